"""
Transaction persistence (raw SQL).

Every read query is scoped by the same WHERE clause builder so the listing,
statistics and chart endpoints agree on which rows belong to a month.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence

import asyncpg

from core import db

from .schemas import MonthFilter

TRANSACTION_COLUMNS = """
    id,
    title,
    description,
    price,
    date_of_sale AS "dateOfSale",
    category,
    sold
"""


class _Params:
    """
    Collects positional arguments and hands out their `$n` placeholders.
    """

    def __init__(self) -> None:
        self.args: list[Any] = []

    def add(self, value: Any) -> str:
        self.args.append(value)
        return f"${len(self.args)}"


def _escape_like(term: str) -> str:
    # Backslash is the default LIKE escape character in Postgres.
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def month_bounds(month: MonthFilter) -> tuple[datetime, datetime]:
    """
    Return the UTC [start, end) range for a year-pinned month.
    """
    if month.year is None:
        raise ValueError("month_bounds needs a year.")
    start = datetime(month.year, month.month, 1, tzinfo=timezone.utc)
    if month.month == 12:
        end = datetime(month.year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(month.year, month.month + 1, 1, tzinfo=timezone.utc)
    return start, end


def build_where(
    params: _Params,
    *,
    month: MonthFilter | None = None,
    search: str = "",
) -> str:
    """
    Build the WHERE clause (including the keyword) for a month and search term.
    """
    clauses: list[str] = []

    if month is not None:
        if month.year is None:
            clauses.append(
                f"EXTRACT(MONTH FROM date_of_sale AT TIME ZONE 'UTC')::int = {params.add(month.month)}"
            )
        else:
            start, end = month_bounds(month)
            clauses.append(f"date_of_sale >= {params.add(start)}")
            clauses.append(f"date_of_sale < {params.add(end)}")

    term = (search or "").strip()
    if term:
        p = params.add(f"%{_escape_like(term)}%")
        clauses.append(f"(title ILIKE {p} OR description ILIKE {p} OR price::text ILIKE {p})")

    if not clauses:
        return ""
    return "WHERE " + "\n  AND ".join(clauses)


async def ensure_schema() -> None:
    await db.execute(
        """
        CREATE TABLE IF NOT EXISTS transactions (
          id bigserial PRIMARY KEY,
          title text NOT NULL,
          description text NOT NULL DEFAULT '',
          price double precision NOT NULL,
          date_of_sale timestamptz NOT NULL,
          category text NOT NULL,
          sold boolean NOT NULL
        )
        """
    )
    await db.execute(
        "CREATE INDEX IF NOT EXISTS transactions_date_of_sale_idx ON transactions (date_of_sale)"
    )


async def replace_all(records: Sequence[tuple[str, str, float, datetime, str, bool]]) -> int:
    """
    Delete every stored transaction and insert `records` in one DB transaction.

    Each record is (title, description, price, date_of_sale, category, sold).
    Returns the number of inserted rows.
    """
    pool = db.pool()
    async with pool.acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            await conn.execute("DELETE FROM transactions")
            if records:
                await conn.executemany(
                    """
                    INSERT INTO transactions (title, description, price, date_of_sale, category, sold)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    """,
                    list(records),
                )
    return len(records)


async def list_transactions(
    *,
    month: MonthFilter | None = None,
    search: str = "",
    limit: int | None = None,
    offset: int = 0,
) -> list[dict[str, Any]]:
    """
    List transactions ordered by sale date. `limit=None` returns every match.
    """
    params = _Params()
    where = build_where(params, month=month, search=search)
    sql = f"""
        SELECT {TRANSACTION_COLUMNS}
        FROM transactions
        {where}
        ORDER BY date_of_sale, id
    """
    if limit is not None:
        sql += f"LIMIT {params.add(limit)} OFFSET {params.add(offset)}"
    return await db.fetch_all(sql, *params.args)


async def count_transactions(*, month: MonthFilter | None = None, search: str = "") -> int:
    params = _Params()
    where = build_where(params, month=month, search=search)
    n = await db.fetch_value(f"SELECT count(*) FROM transactions {where}", *params.args)
    return int(n or 0)


async def sale_statistics(*, month: MonthFilter | None = None) -> dict[str, Any]:
    """
    Total price plus sold / unsold counts in a single aggregate.
    """
    params = _Params()
    where = build_where(params, month=month)
    row = await db.fetch_one(
        f"""
        SELECT
          COALESCE(sum(price), 0) AS total_sale_amount,
          count(*) FILTER (WHERE sold) AS sold_count,
          count(*) FILTER (WHERE NOT sold) AS not_sold_count
        FROM transactions
        {where}
        """,
        *params.args,
    )
    return row or {"total_sale_amount": 0, "sold_count": 0, "not_sold_count": 0}


def build_price_range_select(
    params: _Params,
    upper_bounds: Sequence[float | None],
) -> str:
    """
    One `count(*) FILTER (...)` column per bucket, aliased bucket_0, bucket_1, ...

    Bucket i covers (upper_bounds[i-1], upper_bounds[i]]; the first bucket is
    [0, upper_bounds[0]] so negative prices land in no bucket. A `None` upper
    bound means unbounded.
    """
    columns: list[str] = []
    lower: float | None = None
    for i, upper in enumerate(upper_bounds):
        conds: list[str] = []
        if i == 0:
            conds.append(f"price >= {params.add(0.0)}")
        elif lower is not None:
            conds.append(f"price > {params.add(float(lower))}")
        if upper is not None:
            conds.append(f"price <= {params.add(float(upper))}")
        cond = " AND ".join(conds) or "true"
        columns.append(f"count(*) FILTER (WHERE {cond}) AS bucket_{i}")
        lower = upper
    return ",\n  ".join(columns)


async def price_range_counts(
    upper_bounds: Sequence[float | None],
    *,
    month: MonthFilter | None = None,
) -> list[int]:
    """
    Count transactions per price bucket, in bucket order.
    """
    params = _Params()
    select = build_price_range_select(params, upper_bounds)
    where = build_where(params, month=month)
    row = await db.fetch_one(f"SELECT {select} FROM transactions {where}", *params.args)
    row = row or {}
    return [int(row.get(f"bucket_{i}", 0) or 0) for i in range(len(upper_bounds))]


async def category_counts(*, month: MonthFilter | None = None) -> list[dict[str, Any]]:
    params = _Params()
    where = build_where(params, month=month)
    return await db.fetch_all(
        f"""
        SELECT category, count(*) AS count
        FROM transactions
        {where}
        GROUP BY category
        ORDER BY count DESC, category ASC
        """,
        *params.args,
    )
