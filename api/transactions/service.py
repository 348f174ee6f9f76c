"""
Transactions "service layer".

This file holds the rules that sit between the routes and the SQL:
- parse the `month` query parameter
- fixed price ranges for the bar chart
- seeding from the remote dataset
- shaping aggregate rows into the JSON the dashboard expects
"""

from __future__ import annotations

import calendar
import logging
import re
from datetime import timezone
from typing import Any

import asyncpg
from fastapi import HTTPException
from pydantic import ValidationError

from core import settings, source

from . import repository
from .schemas import MAX_YEAR, MonthFilter, SeedItem

logger = logging.getLogger(__name__)

# (label, inclusive upper bound); None means no upper bound.
PRICE_RANGES: list[tuple[str, float | None]] = [
    ("0-100", 100),
    ("101-200", 200),
    ("201-300", 300),
    ("301-400", 400),
    ("401-500", 500),
    ("501-600", 600),
    ("601-700", 700),
    ("701-800", 800),
    ("801-900", 900),
    ("901-above", None),
]

_YEAR_MONTH_RE = re.compile(r"^([0-9]{4})-([0-9]{1,2})$")

_MONTH_NAMES: dict[str, int] = {}
for _number in range(1, 13):
    _MONTH_NAMES[calendar.month_name[_number].lower()] = _number
    _MONTH_NAMES[calendar.month_abbr[_number].lower()] = _number


def parse_month(raw: str | None) -> MonthFilter | None:
    """
    Turn the `month` query parameter into a MonthFilter.

    Accepted: "March", "mar", "3", "03" (any year) or "2021-11" (one month of
    one year). Blank or missing means no month restriction.
    """
    value = (raw or "").strip().lower()
    if not value:
        return None

    if value in _MONTH_NAMES:
        return MonthFilter(month=_MONTH_NAMES[value])

    if value.isascii() and value.isdigit():
        number = int(value)
        if 1 <= number <= 12:
            return MonthFilter(month=number)

    match = _YEAR_MONTH_RE.match(value)
    if match:
        year, number = int(match.group(1)), int(match.group(2))
        if 1 <= year <= MAX_YEAR and 1 <= number <= 12:
            return MonthFilter(month=number, year=year)

    raise HTTPException(
        status_code=400,
        detail=f"Invalid month '{raw}'. Use a month name, 1-12, or YYYY-MM.",
    )


def _seed_records(items: list[dict[str, Any]]) -> list[tuple]:
    records: list[tuple] = []
    for index, item in enumerate(items):
        try:
            parsed = SeedItem.model_validate(item)
        except ValidationError as e:
            raise source.SourceError(f"Seed item {index} is invalid: {e.errors()[0]['msg']}") from e

        date_of_sale = parsed.date_of_sale
        if date_of_sale.tzinfo is None:
            date_of_sale = date_of_sale.replace(tzinfo=timezone.utc)

        records.append(
            (
                parsed.title,
                parsed.description,
                parsed.price,
                date_of_sale,
                parsed.category,
                parsed.sold,
            )
        )
    return records


async def seed() -> dict:
    """
    Replace every stored transaction with the remote dataset.

    Nothing is deleted unless the whole payload downloaded and validated, and
    a failed insert rolls the delete back. Failures become a 500 carrying the
    error message.
    """
    url = settings.seed_source_url()
    try:
        items = await source.fetch_records(url=url, timeout_s=settings.seed_timeout_s())
        records = _seed_records(items)
        inserted = await repository.replace_all(records)
    except (source.SourceError, asyncpg.PostgresError) as exc:
        logger.warning("seed_failed source=%s error=%s", url, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    logger.info("seed_complete source=%s inserted=%s", url, inserted)
    return {"message": "Database seeded successfully!", "inserted": inserted}


async def list_transactions(
    *,
    month: MonthFilter | None,
    search: str = "",
    page: int = 1,
    per_page: int = 10,
) -> dict:
    offset = (page - 1) * per_page
    rows = await repository.list_transactions(
        month=month,
        search=search,
        limit=per_page,
        offset=offset,
    )
    total = await repository.count_transactions(month=month, search=search)
    return {
        "page": page,
        "perPage": per_page,
        "total": total,
        "count": len(rows),
        "transactions": rows,
    }


async def statistics(*, month: MonthFilter | None) -> dict:
    row = await repository.sale_statistics(month=month)
    return {
        "totalSaleAmount": float(row["total_sale_amount"] or 0),
        "totalSoldItems": int(row["sold_count"] or 0),
        "totalNotSoldItems": int(row["not_sold_count"] or 0),
    }


async def bar_chart(*, month: MonthFilter | None) -> list[dict]:
    counts = await repository.price_range_counts(
        [upper for _, upper in PRICE_RANGES],
        month=month,
    )
    return [
        {"range": label, "count": count}
        for (label, _), count in zip(PRICE_RANGES, counts)
    ]


async def pie_chart(*, month: MonthFilter | None) -> list[dict]:
    rows = await repository.category_counts(month=month)
    return [{"category": str(row["category"]), "count": int(row["count"])} for row in rows]


async def all_data(*, month: MonthFilter | None) -> dict:
    transactions = await repository.list_transactions(month=month)
    return {
        "transactions": transactions,
        "statistics": await statistics(month=month),
        "barChart": await bar_chart(month=month),
        "pieChart": await pie_chart(month=month),
    }
