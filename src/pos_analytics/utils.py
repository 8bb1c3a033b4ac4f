"""Shared utilities for the analytics aggregator.

This module provides the guarded numeric reads and date helpers every other
module relies on. It includes:

- Numeric coercion: missing, null and non-numeric values read as ``0``
- Zero-safe division for scalars and pandas Series
- Date parsing and day-boundary helpers

Examples:
    >>> from pos_analytics.utils import safe_percentage, to_number
    >>> to_number(None)
    0.0
    >>> safe_percentage(1, 0)
    0.0

"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd

# ============================================================================
# Numeric guards
# ============================================================================


def to_number(value: Any, default: float = 0.0) -> float:
    """Read a numeric value, substituting ``default`` for anything unusable.

    ``None``, empty strings, NaN, infinities and values that cannot be
    converted to float all read as ``default``.

    Args:
        value: Raw value from an API record.
        default: Value used when ``value`` is not a finite number.

    Returns:
        A finite float.

    Examples:
        >>> to_number("12.5")
        12.5
        >>> to_number(float("nan"))
        0.0

    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is zero or the result is not finite."""
    if denominator == 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def safe_percentage(part: float, total: float) -> float:
    """Return ``part / total * 100``, or 0 when ``total`` is zero.

    Examples:
        >>> safe_percentage(60, 100)
        60.0
        >>> safe_percentage(5, 0)
        0.0

    """
    return safe_divide(part, total) * 100


def safe_divide_series(numerator: pd.Series, denominator: pd.Series | float) -> pd.Series:
    """Element-wise division yielding 0 wherever the denominator is zero.

    Args:
        numerator: Series of numerators.
        denominator: Series (aligned with ``numerator``) or scalar denominator.

    Returns:
        Float Series with the same index as ``numerator``.

    """
    num = numerator.to_numpy(dtype=float)
    if isinstance(denominator, pd.Series):
        den = denominator.to_numpy(dtype=float)
    else:
        den = np.full(num.shape, float(denominator))
    out = np.zeros_like(num)
    np.divide(num, den, out=out, where=den != 0)
    out[~np.isfinite(out)] = 0.0
    return pd.Series(out, index=numerator.index)


# ============================================================================
# Dates
# ============================================================================


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2023-01-15")
        datetime.date(2023, 1, 15)

    """
    return datetime.strptime(s, "%Y-%m-%d").date()


def parse_timestamp(value: Any, tz: str | None = None) -> datetime | None:
    """Parse an API timestamp into a naive local ``datetime``.

    ISO strings (with or without ``Z``/offset), ``datetime``, ``date`` and
    pandas Timestamps are accepted. Aware values are converted to ``tz``
    (UTC when ``tz`` is None) and then made naive, so every timestamp the
    aggregator compares lives on the same wall clock as ``now``.

    Args:
        value: Raw timestamp.
        tz: IANA zone name used as the store's wall clock.

    Returns:
        Naive datetime, or None when the value is missing or unparseable.

    """
    if value is None or value == "":
        return None
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(tz or "UTC").tz_localize(None)
    return ts.to_pydatetime()


def start_of_day(moment: datetime | date) -> datetime:
    """Return 00:00:00 of the calendar day containing ``moment``."""
    day = moment.date() if isinstance(moment, datetime) else moment
    return datetime.combine(day, time.min)


def end_of_day(moment: datetime | date) -> datetime:
    """Return 23:59:59.999 of the calendar day containing ``moment``.

    Examples:
        >>> end_of_day(date(2025, 1, 31))
        datetime.datetime(2025, 1, 31, 23, 59, 59, 999000)

    """
    day = moment.date() if isinstance(moment, datetime) else moment
    return datetime.combine(day, time(23, 59, 59, 999000))


def format_amount(value: Any) -> str:
    """Format a number with exactly two decimals, reading bad input as 0."""
    return f"{to_number(value):.2f}"


# ============================================================================
# API payloads
# ============================================================================


def camel_case(name: str) -> str:
    """``quantity_sold`` -> ``quantitySold``."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def pick(record: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first non-null value among ``keys``.

    The POS server mixes snake_case and camelCase keys between endpoints,
    so readers list both spellings.

    Examples:
        >>> pick({"totalSales": 10}, "total_sales", "totalSales")
        10

    """
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def wall_clock_now(tz: str | None = None) -> datetime:
    """Current naive time on the same wall clock ``parse_timestamp`` uses."""
    return pd.Timestamp.now(tz=tz or "UTC").tz_localize(None).to_pydatetime()
