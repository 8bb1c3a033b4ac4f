"""POS Analytics - sales, payment, inventory and product analytics for a POS backend.

This package turns the raw transaction, product and goal records served by
the POS REST API into the views behind the admin dashboards and reports:

- **Sales**: day / hour / weekday / month series and growth comparisons
- **Payments**: payment-method and order-source breakdowns
- **Inventory**: stock status, category rollups, reorder recommendations,
  fast / slow movers and aging
- **Products**: performance rankings, top products and category revenue

Module Structure:
    pos_analytics.periods: Period tokens -> date ranges
    pos_analytics.sales: Time buckets and growth
    pos_analytics.payments: Payment / order-source normalization
    pos_analytics.inventory: Stock status and reorder engine
    pos_analytics.products: Product performance
    pos_analytics.goals: Daily / monthly goal progress
    pos_analytics.report: Full report assembly
    pos_analytics.api: REST client and concurrent fetching
    pos_analytics.export: CSV export

Quick Start:
    >>> from pos_analytics import ApiConfig, PosApiClient, build_report, fetch_report_inputs
    >>> from pos_analytics.export import write_report_csv
    >>>
    >>> with PosApiClient(ApiConfig.from_env()) as client:
    ...     inputs = fetch_report_inputs(client, "30d", store_id="store-1")
    >>> report = build_report(inputs, "30d")
    >>> write_report_csv(report, "reports/last30.csv")

All aggregation functions are pure: they take explicit records, a date range
or ``now``, and an ``AnalyticsConfig``, and never touch the network.
"""

__version__ = "0.1.0"

from pos_analytics.api import PosApiClient, fetch_report_inputs
from pos_analytics.config import AnalyticsConfig, ApiConfig
from pos_analytics.exceptions import ApiError, ConfigError, DataQualityError, PosAnalyticsError
from pos_analytics.periods import DateRange, resolve_period
from pos_analytics.report import AnalyticsReport, ReportInputs, build_report

__all__ = [
    "AnalyticsConfig",
    "AnalyticsReport",
    "ApiConfig",
    "ApiError",
    "ConfigError",
    "DataQualityError",
    "DateRange",
    "PosAnalyticsError",
    "PosApiClient",
    "ReportInputs",
    "__version__",
    "build_report",
    "fetch_report_inputs",
    "resolve_period",
]
