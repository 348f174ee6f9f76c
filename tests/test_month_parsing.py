"""Tests for the `month` query parameter parser."""

from __future__ import annotations

import pytest
from fastapi import HTTPException

from transactions.schemas import MonthFilter
from transactions.service import parse_month


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_month_means_no_filter(raw) -> None:
    assert parse_month(raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("March", 3),
        ("march", 3),
        ("MAR", 3),
        ("12", 12),
        ("01", 1),
        (" november ", 11),
    ],
)
def test_month_names_and_numbers_match_any_year(raw, expected) -> None:
    assert parse_month(raw) == MonthFilter(month=expected)


def test_year_month_pins_the_year() -> None:
    parsed = parse_month("2021-11")

    assert parsed == MonthFilter(month=11, year=2021)


def test_single_digit_month_after_year_is_accepted() -> None:
    assert parse_month("2022-3") == MonthFilter(month=3, year=2022)


@pytest.mark.parametrize(
    "raw",
    [
        "0",
        "13",
        "2021-13",
        "2021-00",
        "0000-05",
        "9999-12",
        "Smarch",
        "sept",
        "2021/11",
        "\u00b2",
        "\u0663",
        "2021-\u0661\u0661",
    ],
)
def test_invalid_month_is_rejected_with_400(raw) -> None:
    with pytest.raises(HTTPException) as exc_info:
        parse_month(raw)

    assert exc_info.value.status_code == 400
    assert raw in exc_info.value.detail


def test_last_supported_year_is_accepted() -> None:
    assert parse_month("9998-12") == MonthFilter(month=12, year=9998)


def test_out_of_range_and_non_ascii_months_return_400_from_endpoints(client, fake_repo) -> None:
    for raw in ("9999-12", "²"):
        response = client.get("/statistics", params={"month": raw})

        assert response.status_code == 400, raw
    assert fake_repo.calls == []
