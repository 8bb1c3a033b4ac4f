"""Tests for the numeric guards and date helpers."""

from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from pos_analytics.utils import (
    camel_case,
    end_of_day,
    format_amount,
    parse_date,
    parse_timestamp,
    pick,
    safe_divide,
    safe_divide_series,
    safe_percentage,
    start_of_day,
    to_number,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 0.0),
        ("", 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (True, 0.0),
        ("12.5", 12.5),
        (7, 7.0),
        (-3.25, -3.25),
    ],
)
def test_to_number(raw: object, expected: float) -> None:
    """Missing, null and non-numeric values read as zero."""
    assert to_number(raw) == expected


def test_to_number_custom_default() -> None:
    assert to_number(None, default=10) == 10


def test_safe_divide_by_zero() -> None:
    assert safe_divide(5, 0) == 0.0
    assert safe_divide(6, 3) == 2.0
    assert safe_percentage(0, 0) == 0.0
    assert safe_percentage(1, 4) == 25.0


def test_safe_divide_series() -> None:
    """Zero denominators yield zero, never NaN or infinity."""
    num = pd.Series([10.0, 5.0, 0.0], index=["a", "b", "c"])
    den = pd.Series([2.0, 0.0, 0.0], index=["a", "b", "c"])

    out = safe_divide_series(num, den)

    assert list(out) == [5.0, 0.0, 0.0]
    assert list(out.index) == ["a", "b", "c"]
    assert np.isfinite(out).all()


def test_safe_divide_series_scalar() -> None:
    num = pd.Series([4.0, 8.0])
    assert list(safe_divide_series(num, 4)) == [1.0, 2.0]
    assert list(safe_divide_series(num, 0)) == [0.0, 0.0]


def test_parse_date() -> None:
    assert parse_date("2025-01-15") == date(2025, 1, 15)
    with pytest.raises(ValueError):
        parse_date("15/01/2025")


class TestParseTimestamp:
    def test_naive_iso(self) -> None:
        assert parse_timestamp("2025-01-15T10:20:30") == datetime(2025, 1, 15, 10, 20, 30)

    def test_utc_suffix_becomes_naive_utc(self) -> None:
        assert parse_timestamp("2025-01-15T10:00:00.000Z") == datetime(2025, 1, 15, 10, 0)

    def test_converted_to_store_zone(self) -> None:
        """Lagos is UTC+1 all year."""
        parsed = parse_timestamp("2025-01-15T23:30:00Z", tz="Africa/Lagos")
        assert parsed == datetime(2025, 1, 16, 0, 30)

    def test_datetime_passthrough(self) -> None:
        moment = datetime(2025, 1, 15, 9, 0)
        assert parse_timestamp(moment) == moment

    @pytest.mark.parametrize("raw", [None, "", "not a date"])
    def test_unparseable_is_none(self, raw: object) -> None:
        assert parse_timestamp(raw) is None


def test_day_boundaries() -> None:
    moment = datetime(2025, 1, 15, 14, 30)
    assert start_of_day(moment) == datetime(2025, 1, 15)
    assert end_of_day(moment) == datetime(2025, 1, 15, 23, 59, 59, 999000)
    assert end_of_day(date(2025, 1, 15)) == datetime(2025, 1, 15, 23, 59, 59, 999000)


def test_format_amount() -> None:
    assert format_amount(3) == "3.00"
    assert format_amount(2.005) in ("2.00", "2.01")
    assert format_amount(None) == "0.00"


def test_pick_and_camel_case() -> None:
    record = {"totalSales": None, "total_sales": 12}
    assert pick(record, "totalSales", "total_sales") == 12
    assert pick(record, "missing", default="x") == "x"
    assert camel_case("quantity_sold") == "quantitySold"
    assert camel_case("revenue") == "revenue"
