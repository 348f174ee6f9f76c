"""Shared fixtures: an app client that never opens a database pool."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

import main
from transactions import repository


@pytest.fixture()
def client() -> TestClient:
    # Not used as a context manager, so the lifespan (DB pool) never runs.
    return TestClient(main.app)


class FakeRepository:
    """Records calls and returns canned rows in place of the SQL layer."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []
        self.rows: list[dict] = []
        self.total = 0
        self.stats = {"total_sale_amount": 0, "sold_count": 0, "not_sold_count": 0}
        self.buckets: list[int] = [0] * 10
        self.categories: list[dict] = []
        self.replaced: list[tuple] | None = None

    async def list_transactions(self, **kwargs):
        self.calls.append(("list_transactions", kwargs))
        return self.rows

    async def count_transactions(self, **kwargs):
        self.calls.append(("count_transactions", kwargs))
        return self.total

    async def sale_statistics(self, **kwargs):
        self.calls.append(("sale_statistics", kwargs))
        return self.stats

    async def price_range_counts(self, upper_bounds, **kwargs):
        self.calls.append(("price_range_counts", {"upper_bounds": list(upper_bounds), **kwargs}))
        return self.buckets

    async def category_counts(self, **kwargs):
        self.calls.append(("category_counts", kwargs))
        return self.categories

    async def replace_all(self, records):
        self.replaced = list(records)
        return len(self.replaced)

    def kwargs_for(self, name: str) -> dict:
        for call_name, kwargs in self.calls:
            if call_name == name:
                return kwargs
        raise AssertionError(f"{name} was not called")


@pytest.fixture()
def fake_repo(monkeypatch) -> FakeRepository:
    fake = FakeRepository()
    for name in (
        "list_transactions",
        "count_transactions",
        "sale_statistics",
        "price_range_counts",
        "category_counts",
        "replace_all",
    ):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake
