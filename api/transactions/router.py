"""
Transactions API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from . import service

router = APIRouter()


@router.get("/seed")
async def seed() -> dict:
    """
    Replace the stored dataset with a fresh copy of the remote source.
    """
    return await service.seed()


@router.get("/transactions")
async def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, alias="perPage", ge=1, le=100),
    search: str = Query(default="", max_length=200),
    month: str | None = None,
) -> dict:
    """
    One page of transactions wrapped with `page`, `perPage`, `total` and `count`.

    Clients written for the bare-array response must read `transactions`.
    /alldata still embeds the unpaginated month listing as a plain array.
    """
    return await service.list_transactions(
        month=service.parse_month(month),
        search=search,
        page=page,
        per_page=per_page,
    )


@router.get("/statistics")
async def statistics(month: str | None = None) -> dict:
    return await service.statistics(month=service.parse_month(month))


@router.get("/barchart")
async def bar_chart(month: str | None = None) -> list[dict]:
    return await service.bar_chart(month=service.parse_month(month))


@router.get("/piechart")
async def pie_chart(month: str | None = None) -> list[dict]:
    return await service.pie_chart(month=service.parse_month(month))


@router.get("/alldata")
async def all_data(month: str | None = None) -> dict:
    """
    Listing, statistics and both charts for one month in a single response.
    """
    return await service.all_data(month=service.parse_month(month))
