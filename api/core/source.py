"""
HTTP client for the remote transaction dataset.

The source is a single static JSON document: a list of objects with
`title`, `description`, `price`, `dateOfSale`, `category` and `sold`.
"""

from __future__ import annotations

from typing import Any

import httpx


# Upstream failures are explicit and separable from database errors.
class SourceError(RuntimeError):
    pass


def _normalize_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise SourceError("Seed source URL is empty.")
    return url


async def fetch_records(*, url: str, timeout_s: float = 30.0) -> list[dict[str, Any]]:
    """
    Download the dataset and return its items as a list of dicts.
    """
    url = _normalize_url(url)

    try:
        async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True) as client:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        raise SourceError(f"Failed to fetch seed data from {url}: {e}") from e

    if resp.status_code != 200:
        # Keep the message short; error pages can be large.
        body = resp.text[:300]
        raise SourceError(f"Seed source returned {resp.status_code}: {body}")

    try:
        data = resp.json()
    except ValueError as e:
        raise SourceError("Seed source did not return valid JSON.") from e

    if not isinstance(data, list):
        raise SourceError("Seed source must return a JSON array.")

    for item in data:
        if not isinstance(item, dict):
            raise SourceError("Seed source items must be JSON objects.")

    return data
