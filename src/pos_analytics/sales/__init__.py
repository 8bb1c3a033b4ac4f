"""Sales domain module.

This module provides the time-based views over transactions:

- **buckets**: day / hour / weekday / month series (``bucket_by_day`` ...)
- **growth**: growth-rate comparisons (``growth_percent``, ``growth_summary``)
- **frames**: flattening of transactions and line items into DataFrames

Example:
    >>> from datetime import datetime
    >>> from pos_analytics.periods import resolve_period
    >>> from pos_analytics.sales import bucket_by_day, growth_summary
    >>>
    >>> now = datetime(2025, 1, 31, 18, 0)
    >>> daily = bucket_by_day(transactions, resolve_period("30d", now), max_points=20)
    >>> growth = growth_summary(transactions, now)
    >>> growth.daily.growth_percent
"""

from pos_analytics.sales.buckets import (
    bucket_by_day,
    bucket_by_hour,
    bucket_by_month,
    bucket_by_weekday,
    sample_days,
)
from pos_analytics.sales.growth import (
    GrowthComparison,
    GrowthSummary,
    growth_percent,
    growth_summary,
    period_growth,
    sales_total,
)

__all__ = [
    "GrowthComparison",
    "GrowthSummary",
    "bucket_by_day",
    "bucket_by_hour",
    "bucket_by_month",
    "bucket_by_weekday",
    "growth_percent",
    "growth_summary",
    "period_growth",
    "sales_total",
    "sample_days",
]
