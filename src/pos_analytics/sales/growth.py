"""Growth-rate comparisons between sales periods.

``growth_percent`` is the single formula used for every comparison:

- both amounts zero: 0
- previous zero, current positive: 100
- previous zero, current negative (net refunds): -100
- otherwise: ``(current - previous) / previous * 100``

It never raises and never returns NaN or infinity.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from pos_analytics.models import Transaction
from pos_analytics.periods import DateRange, month_range, previous_range, year_range
from pos_analytics.utils import end_of_day, start_of_day, to_number

logger = logging.getLogger(__name__)


def growth_percent(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``.

    Examples:
        >>> growth_percent(150, 100)
        50.0
        >>> growth_percent(100, 0)
        100.0
        >>> growth_percent(0, 0)
        0.0

    """
    current = to_number(current)
    previous = to_number(previous)
    if previous == 0:
        if current == 0:
            return 0.0
        return 100.0 if current > 0 else -100.0
    result = (current - previous) / previous * 100
    return result if math.isfinite(result) else 0.0


@dataclass(frozen=True)
class GrowthComparison:
    current_amount: float
    previous_amount: float
    growth_percent: float

    @classmethod
    def between(cls, current: float, previous: float) -> GrowthComparison:
        return cls(
            current_amount=to_number(current),
            previous_amount=to_number(previous),
            growth_percent=growth_percent(current, previous),
        )


@dataclass(frozen=True)
class GrowthSummary:
    """Day, week, month and year comparisons anchored on ``now``.

    Attributes:
        daily: Today vs yesterday.
        weekly: Last 7 days (including today) vs the 7 days before.
        monthly: Current month to date vs the whole previous month.
        yearly: Current year to date vs the whole previous year.
    """

    daily: GrowthComparison
    weekly: GrowthComparison
    monthly: GrowthComparison
    yearly: GrowthComparison


def sales_total(transactions: Iterable[Transaction], date_range: DateRange) -> float:
    """Sum of transaction totals whose timestamp falls in ``date_range``."""
    return float(sum(t.total_amount for t in transactions if date_range.contains(t.created_at)))


def compare_ranges(
    transactions: Iterable[Transaction], current: DateRange, previous: DateRange
) -> GrowthComparison:
    txns = list(transactions)
    return GrowthComparison.between(sales_total(txns, current), sales_total(txns, previous))


def period_growth(transactions: Iterable[Transaction], date_range: DateRange) -> GrowthComparison:
    """Compare ``date_range`` with the equal-length range right before it."""
    return compare_ranges(transactions, date_range, previous_range(date_range))


def growth_summary(transactions: Iterable[Transaction], now: datetime) -> GrowthSummary:
    """Compute the standard dashboard comparisons.

    Args:
        transactions: Parsed transactions covering at least the previous
            calendar year; missing history simply reads as zero sales.
        now: Anchor instant.

    Returns:
        GrowthSummary.

    """
    txns = list(transactions)
    today_end = end_of_day(now)

    today = DateRange(start_of_day(now), today_end)
    yesterday = DateRange(start_of_day(now - timedelta(days=1)), end_of_day(now - timedelta(days=1)))

    this_week = DateRange(start_of_day(now - timedelta(days=6)), today_end)
    last_week = DateRange(
        start_of_day(now - timedelta(days=13)), end_of_day(now - timedelta(days=7))
    )

    this_month = DateRange(month_range(now.year, now.month).start, today_end)
    prev_month_year, prev_month = (now.year, now.month - 1) if now.month > 1 else (now.year - 1, 12)
    last_month = month_range(prev_month_year, prev_month)

    this_year = DateRange(year_range(now.year).start, today_end)
    last_year = year_range(now.year - 1)

    summary = GrowthSummary(
        daily=compare_ranges(txns, today, yesterday),
        weekly=compare_ranges(txns, this_week, last_week),
        monthly=compare_ranges(txns, this_month, last_month),
        yearly=compare_ranges(txns, this_year, last_year),
    )
    logger.debug(
        "Growth: day %.1f%%, week %.1f%%, month %.1f%%",
        summary.daily.growth_percent,
        summary.weekly.growth_percent,
        summary.monthly.growth_percent,
    )
    return summary
