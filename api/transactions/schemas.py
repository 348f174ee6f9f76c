"""
Pydantic schemas for the transactions feature.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SeedItem(BaseModel):
    """
    One record of the remote dataset. Unknown keys (`id`, `image`) are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    title: str
    description: str = ""
    price: float
    date_of_sale: datetime = Field(..., alias="dateOfSale")
    category: str
    sold: bool


# The month after December 9998 is still a valid datetime.
MAX_YEAR = 9998


class MonthFilter(BaseModel):
    """
    A calendar month, optionally pinned to a year.
    """

    model_config = ConfigDict(frozen=True)

    month: int = Field(..., ge=1, le=12)
    year: int | None = Field(default=None, ge=1, le=MAX_YEAR)
