"""Time-bucketed sales series.

Every function returns a DataFrame with (at least) the columns ``label``,
``sales_amount`` and ``transaction_count``, ordered along the time axis.
Day, hour and weekday series emit a row for every bucket, including empty
ones, so charts get contiguous axes. Only transactions inside the given
range are counted.

Weekdays follow the Sunday=0 .. Saturday=6 convention.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import date

import pandas as pd

from pos_analytics.models import Transaction
from pos_analytics.periods import DateRange
from pos_analytics.sales.frames import transactions_frame

logger = logging.getLogger(__name__)

# Sunday first (Sunday=0 .. Saturday=6)
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

_AGGREGATIONS = {
    "sales_amount": ("total_amount", "sum"),
    "transaction_count": ("id", "count"),
}


def _aggregate(df: pd.DataFrame, key: pd.Series, index: Sequence) -> pd.DataFrame:
    """Group ``df`` by ``key`` and reindex onto the full bucket axis."""
    grouped = df.groupby(key).agg(**_AGGREGATIONS)
    out = grouped.reindex(list(index), fill_value=0)
    out["sales_amount"] = out["sales_amount"].astype(float)
    out["transaction_count"] = out["transaction_count"].astype(int)
    return out


def sample_days(days: Sequence[date], max_points: int) -> list[date]:
    """Pick at most ``max_points`` days, always keeping the last one ("today").

    Offsets back from the last day are ``round_half_up(i * stride)`` for
    ``i = 0 .. max_points - 1`` with ``stride = len(days) / max_points``.
    When the range is shorter than ``max_points`` the stride is below one,
    offsets repeat and are deduplicated, so every day is kept. When it is
    longer, some days are skipped unevenly depending on rounding.

    Args:
        days: Chronological list of days.
        max_points: Upper bound on the number of days returned.

    Returns:
        Chronological list of sampled days.

    Examples:
        >>> from datetime import date, timedelta
        >>> days = [date(2025, 1, 1) + timedelta(days=i) for i in range(30)]
        >>> picked = sample_days(days, 20)
        >>> len(picked), picked[-1]
        (20, datetime.date(2025, 1, 30))

    """
    n = len(days)
    if n == 0 or max_points <= 0:
        return []
    stride = n / max_points
    picked: dict[date, None] = {}
    for i in range(max_points):
        offset = math.floor(i * stride + 0.5)
        if offset >= n:
            break
        picked.setdefault(days[n - 1 - offset], None)
    return sorted(picked)


def bucket_by_day(
    transactions: Iterable[Transaction],
    date_range: DateRange,
    max_points: int | None = None,
) -> pd.DataFrame:
    """Daily sales for every calendar day of ``date_range``.

    Args:
        transactions: Parsed transactions.
        date_range: Range to cover; one row per calendar day.
        max_points: Optional cap on the number of rows, applied with
            ``sample_days`` (sums then cover only the sampled days).

    Returns:
        DataFrame with columns ``date``, ``label`` (YYYY-MM-DD),
        ``sales_amount`` and ``transaction_count``.

    """
    df = transactions_frame(transactions, date_range)
    days = date_range.days
    out = _aggregate(df, df["created_at"].dt.date, days)
    if max_points is not None and len(days) > 0:
        kept = sample_days(days, max_points)
        logger.debug("Sampled %d of %d days", len(kept), len(days))
        out = out.loc[kept]
    out.index.name = "date"
    out = out.reset_index()
    out.insert(1, "label", [d.isoformat() for d in out["date"]])
    return out


def bucket_by_hour(transactions: Iterable[Transaction], date_range: DateRange) -> pd.DataFrame:
    """Sales by hour of day (0-23) across the whole range.

    Returns:
        DataFrame with 24 rows and columns ``hour``, ``label`` (``HH:00``),
        ``sales_amount`` and ``transaction_count``.

    """
    df = transactions_frame(transactions, date_range)
    out = _aggregate(df, df["created_at"].dt.hour, range(24))
    out.index.name = "hour"
    out = out.reset_index()
    out["hour"] = out["hour"].astype(int)
    out.insert(1, "label", [f"{h:02d}:00" for h in out["hour"]])
    return out


def bucket_by_weekday(transactions: Iterable[Transaction], date_range: DateRange) -> pd.DataFrame:
    """Sales by day of week, Sunday=0 .. Saturday=6.

    Returns:
        DataFrame with 7 rows and columns ``weekday``, ``label`` (``Sun``..),
        ``sales_amount`` and ``transaction_count``.

    """
    df = transactions_frame(transactions, date_range)
    # pandas counts Monday=0
    weekday = (df["created_at"].dt.dayofweek + 1) % 7
    out = _aggregate(df, weekday, range(7))
    out.index.name = "weekday"
    out = out.reset_index()
    out["weekday"] = out["weekday"].astype(int)
    out.insert(1, "label", [DAY_ABBREVIATIONS[d] for d in out["weekday"]])
    return out


def bucket_by_month(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> pd.DataFrame:
    """Sales by calendar month (``YYYY-MM``).

    With a range, every month the range touches gets a row. Without one,
    only months that have transactions appear, in chronological order.

    Returns:
        DataFrame with columns ``month``, ``label``, ``sales_amount`` and
        ``transaction_count``.

    """
    df = transactions_frame(transactions, date_range)
    df = df[df["created_at"].notna()]
    month = df["created_at"].dt.to_period("M").astype(str)
    if date_range is not None:
        months = pd.period_range(date_range.start, date_range.end, freq="M").astype(str)
    else:
        months = sorted(month.unique())
    out = _aggregate(df, month, months)
    out.index.name = "month"
    out = out.reset_index()
    out.insert(1, "label", out["month"])
    return out
