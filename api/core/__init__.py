"""
Shared, cross-cutting code for the API.

`core/` holds the pieces every feature leans on: the asyncpg pool, environment
settings and the HTTP client for the remote dataset. Transaction SQL and
business rules stay in `transactions/`.
"""
