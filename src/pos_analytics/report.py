"""Assemble every analytics view into one report.

``build_report`` takes the raw payloads returned by the API (see
``pos_analytics.api.fetch_report_inputs``) and produces an
``AnalyticsReport``. Server-side aggregates (dashboard metrics, monthly
series, top products, product performance, inventory summary) are used when
the server returned them; otherwise each one is recomputed from the raw
transactions and products. ``AnalyticsReport.sources`` records which path
each section took.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pandas as pd

from pos_analytics.config import AnalyticsConfig
from pos_analytics.goals import GoalProgress, goals_progress
from pos_analytics.inventory import (
    LOW_STOCK,
    OUT_OF_STOCK,
    InventorySummary,
    ReorderRecommendation,
    aging,
    category_rollups,
    fast_moving,
    inventory_summary,
    reorder_recommendations,
    sales_quantities,
    slow_moving,
    status_counts,
)
from pos_analytics.models import (
    Product,
    StructuredPayments,
    Transaction,
    parse_goals,
    parse_products,
    parse_transactions,
)
from pos_analytics.payments import (
    BreakdownEntry,
    normalize_payment_method,
    order_source_breakdown,
    payment_breakdown,
)
from pos_analytics.periods import DateRange, PeriodSpec, describe_period, resolve_period
from pos_analytics.products import (
    ProductPerformance,
    category_breakdown,
    performance_table_from_api,
    product_performance,
    rank_performance,
    top_products,
)
from pos_analytics.products.performance import TOP_PRODUCT_COLUMNS, UNKNOWN_PRODUCT
from pos_analytics.sales import (
    GrowthComparison,
    GrowthSummary,
    bucket_by_day,
    bucket_by_hour,
    bucket_by_month,
    bucket_by_weekday,
    growth_summary,
    period_growth,
    sales_total,
)
from pos_analytics.sales.frames import filter_transactions
from pos_analytics.utils import parse_timestamp, pick, safe_divide, to_number, wall_clock_now

logger = logging.getLogger(__name__)

SERVER = "server"
COMPUTED = "computed"

RECENT_TRANSACTION_COLUMNS = [
    "id",
    "created_at",
    "total_amount",
    "payment_method",
    "order_source",
    "status",
]


# ============================================================================
# Inputs
# ============================================================================


@dataclass
class ReportInputs:
    """Raw payloads gathered for one report.

    Any of the server aggregates may be None (endpoint failed or returned
    nothing); the record lists are then the only source.

    Attributes:
        dashboard: ``GET /analytics/dashboard`` payload.
        product_performance: ``GET /analytics/products`` payload.
        inventory: ``GET /analytics/inventory`` payload.
        transactions: Raw transaction records.
        products: Raw product records.
        goals: Raw goal records.
        failures: Names of the fetches that failed.
    """

    dashboard: Mapping[str, Any] | None = None
    product_performance: Any = None
    inventory: Mapping[str, Any] | None = None
    transactions: list[Mapping[str, Any]] = field(default_factory=list)
    products: list[Mapping[str, Any]] = field(default_factory=list)
    goals: list[Mapping[str, Any]] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)


# ============================================================================
# Dashboard metrics
# ============================================================================


@dataclass(frozen=True)
class DashboardMetrics:
    """Headline numbers shown at the top of the dashboard."""

    total_sales: float
    total_transactions: int
    average_transaction_value: float
    today_sales: float
    monthly_sales: float
    growth_rate: float
    total_products: int
    low_stock_items: int

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> DashboardMetrics:
        total_sales = to_number(pick(data, "totalSales", "total_sales"))
        total_transactions = int(to_number(pick(data, "totalTransactions", "total_transactions")))
        average = pick(data, "averageTransactionValue", "average_transaction_value")
        return cls(
            total_sales=total_sales,
            total_transactions=total_transactions,
            average_transaction_value=(
                to_number(average)
                if average is not None
                else safe_divide(total_sales, total_transactions)
            ),
            today_sales=to_number(pick(data, "todaySales", "today_sales")),
            monthly_sales=to_number(pick(data, "monthlySales", "monthly_sales")),
            growth_rate=to_number(pick(data, "growthRate", "growth_rate")),
            total_products=int(to_number(pick(data, "totalProducts", "total_products"))),
            low_stock_items=int(to_number(pick(data, "lowStockItems", "low_stock_items"))),
        )


def compute_dashboard_metrics(
    transactions: Iterable[Transaction],
    products: Iterable[Product],
    date_range: DateRange,
    now: datetime,
) -> DashboardMetrics:
    """Recompute the dashboard headline numbers from raw records.

    ``low_stock_items`` counts every product at or below its minimum level,
    out-of-stock ones included.
    """
    txns = list(transactions)
    in_range = filter_transactions(txns, date_range)
    total_sales = sales_total(in_range, date_range)
    counts = status_counts(products)
    return DashboardMetrics(
        total_sales=total_sales,
        total_transactions=len(in_range),
        average_transaction_value=safe_divide(total_sales, len(in_range)),
        today_sales=sales_total(txns, resolve_period("today", now)),
        monthly_sales=sales_total(txns, resolve_period("this_month", now)),
        growth_rate=period_growth(txns, date_range).growth_percent,
        total_products=sum(counts.values()),
        low_stock_items=counts[LOW_STOCK] + counts[OUT_OF_STOCK],
    )


def _has_dashboard_data(data: Mapping[str, Any] | None) -> bool:
    return bool(data) and pick(data, "totalSales", "total_sales") is not None


# ============================================================================
# Server series readers
# ============================================================================


def sales_by_month_from_api(records: Any) -> pd.DataFrame:
    """Read the server's ``salesByMonth`` list (``month``, ``sales``, ``transactions``)."""
    rows = [
        {
            "month": str(r.get("month") or ""),
            "label": str(r.get("month") or ""),
            "sales_amount": to_number(pick(r, "sales", "sales_amount")),
            "transaction_count": int(to_number(pick(r, "transactions", "transaction_count"))),
        }
        for r in records or []
        if isinstance(r, Mapping)
    ]
    df = pd.DataFrame(rows, columns=["month", "label", "sales_amount", "transaction_count"])
    return df.sort_values("month", kind="mergesort").reset_index(drop=True)


def top_products_from_api(records: Any) -> pd.DataFrame:
    """Read the server's ``topProducts`` list."""
    rows = [
        {
            "product_id": str(pick(r, "productId", "product_id", default="")),
            "product_name": str(pick(r, "productName", "product_name") or UNKNOWN_PRODUCT),
            "quantity_sold": to_number(pick(r, "quantitySold", "quantity_sold")),
            "revenue": to_number(r.get("revenue")),
        }
        for r in records or []
        if isinstance(r, Mapping)
    ]
    return pd.DataFrame(rows, columns=TOP_PRODUCT_COLUMNS)


def recent_transactions_from_api(records: Any) -> pd.DataFrame:
    """Read the server's ``recentTransactions`` list."""
    rows = [
        {
            "id": str(pick(r, "id", "_id", default="")),
            "created_at": parse_timestamp(pick(r, "createdAt", "created_at")),
            "total_amount": to_number(pick(r, "totalAmount", "total_amount")),
            "payment_method": normalize_payment_method(pick(r, "paymentMethod", "payment_method")),
            "order_source": pick(r, "orderSource", "order_source"),
            "status": r.get("status"),
        }
        for r in records or []
        if isinstance(r, Mapping)
    ]
    return pd.DataFrame(rows, columns=RECENT_TRANSACTION_COLUMNS)


def _payment_label(txn: Transaction) -> str:
    if isinstance(txn.payment, StructuredPayments):
        keys = dict.fromkeys(normalize_payment_method(s.type) for s in txn.payment.splits)
        return "+".join(keys)
    return normalize_payment_method(txn.payment.method)


def recent_transactions(
    transactions: Iterable[Transaction], date_range: DateRange, limit: int
) -> pd.DataFrame:
    """Most recent transactions in the range, newest first.

    Split payments are labeled with their method keys joined by ``+``.
    """
    in_range = sorted(
        filter_transactions(transactions, date_range),
        key=lambda t: t.created_at,
        reverse=True,
    )[:limit]
    rows = [
        {
            "id": t.id,
            "created_at": t.created_at,
            "total_amount": t.total_amount,
            "payment_method": _payment_label(t),
            "order_source": t.order_source,
            "status": t.status,
        }
        for t in in_range
    ]
    return pd.DataFrame(rows, columns=RECENT_TRANSACTION_COLUMNS)


# ============================================================================
# Report
# ============================================================================


@dataclass
class AnalyticsReport:
    """Every view for one period.

    Attributes:
        period_label: Human-readable period name.
        date_range: Resolved range the report covers.
        generated_at: The ``now`` the report was computed at.
        metrics: Dashboard headline numbers.
        sales_by_day: Daily series, sampled to ``chart_max_points``.
        sales_by_hour: Hour-of-day series.
        sales_by_weekday: Day-of-week series (Sunday first).
        sales_by_month: Monthly series.
        growth: Day / week / month / year comparisons.
        period_growth: The range vs the equal-length range before it.
        payment_breakdown: Amounts per canonical payment method.
        order_source_breakdown: Amounts per order source (empty when not tracked).
        category_breakdown: Line-item revenue per product category.
        top_products: Best sellers by revenue.
        recent_transactions: Latest transactions, newest first.
        product_performance: Ranked product views.
        inventory: Inventory headline numbers.
        status_counts: Products per stock status.
        category_rollups: Stock position per category.
        reorder: Reorder recommendations, most urgent first.
        fast_moving: Products that sold in the range.
        slow_moving: Products with stock but no sales in the range.
        aging: Products by days since last update.
        goals: Progress of the active goals.
        failures: Fetches that failed while gathering inputs.
        sources: Section name -> ``"server"`` or ``"computed"``.
    """

    period_label: str
    date_range: DateRange
    generated_at: datetime
    metrics: DashboardMetrics
    sales_by_day: pd.DataFrame
    sales_by_hour: pd.DataFrame
    sales_by_weekday: pd.DataFrame
    sales_by_month: pd.DataFrame
    growth: GrowthSummary
    period_growth: GrowthComparison
    payment_breakdown: list[BreakdownEntry]
    order_source_breakdown: list[BreakdownEntry]
    category_breakdown: list[BreakdownEntry]
    top_products: pd.DataFrame
    recent_transactions: pd.DataFrame
    product_performance: ProductPerformance
    inventory: InventorySummary
    status_counts: dict[str, int]
    category_rollups: pd.DataFrame
    reorder: list[ReorderRecommendation]
    fast_moving: pd.DataFrame
    slow_moving: pd.DataFrame
    aging: pd.DataFrame
    goals: list[GoalProgress]
    failures: list[str] = field(default_factory=list)
    sources: dict[str, str] = field(default_factory=dict)


def build_report(
    inputs: ReportInputs,
    period: PeriodSpec = "30d",
    now: datetime | None = None,
    config: AnalyticsConfig | None = None,
    tz: str | None = None,
    track_order_source: bool = True,
) -> AnalyticsReport:
    """Compute the full report for ``period``.

    Args:
        inputs: Raw payloads (see ``ReportInputs``).
        period: Period token or explicit ``(start, end)`` pair.
        now: Anchor instant; defaults to the current time on the ``tz`` wall clock.
        config: Thresholds; defaults to ``AnalyticsConfig()``.
        tz: Store time zone used to read aware timestamps.
        track_order_source: When False the order-source breakdown is left
            empty (stores that never record a channel).

    Returns:
        AnalyticsReport.

    Raises:
        ValueError: If ``period`` is an explicit range with start after end.

    """
    now = now or wall_clock_now(tz)
    config = config or AnalyticsConfig()
    date_range = resolve_period(period, now)
    logger.info("Building report for %s (%s to %s)", period, date_range.start, date_range.end)

    transactions = parse_transactions(inputs.transactions, tz=tz)
    products = parse_products(inputs.products, tz=tz)
    goals = parse_goals(inputs.goals)
    logger.info(
        "Parsed %d transactions, %d products, %d goals",
        len(transactions),
        len(products),
        len(goals),
    )
    sources: dict[str, str] = {}

    dashboard = inputs.dashboard or {}
    if _has_dashboard_data(dashboard):
        metrics = DashboardMetrics.from_api(dashboard)
        sources["metrics"] = SERVER
    else:
        metrics = compute_dashboard_metrics(transactions, products, date_range, now)
        sources["metrics"] = COMPUTED

    server_months = dashboard.get("salesByMonth") or dashboard.get("sales_by_month")
    if server_months:
        sales_by_month = sales_by_month_from_api(server_months)
        sources["sales_by_month"] = SERVER
    else:
        sales_by_month = bucket_by_month(transactions, date_range)
        sources["sales_by_month"] = COMPUTED

    server_top = dashboard.get("topProducts") or dashboard.get("top_products")
    if server_top:
        top = top_products_from_api(server_top).head(config.top_n)
        sources["top_products"] = SERVER
    else:
        top = top_products(transactions, date_range, limit=config.top_n)
        sources["top_products"] = COMPUTED

    server_recent = dashboard.get("recentTransactions") or dashboard.get("recent_transactions")
    if server_recent:
        recent = recent_transactions_from_api(server_recent).head(config.recent_transactions)
        sources["recent_transactions"] = SERVER
    else:
        recent = recent_transactions(transactions, date_range, config.recent_transactions)
        sources["recent_transactions"] = COMPUTED

    if products or not inputs.product_performance:
        performance = product_performance(products, transactions, date_range, config)
        sources["product_performance"] = COMPUTED
    else:
        performance = rank_performance(
            performance_table_from_api(inputs.product_performance), config
        )
        sources["product_performance"] = SERVER

    quantities = sales_quantities(transactions, date_range)
    if inputs.inventory:
        inventory = InventorySummary.from_api(inputs.inventory)
        sources["inventory"] = SERVER
    else:
        inventory = inventory_summary(products, quantities)
        sources["inventory"] = COMPUTED

    report = AnalyticsReport(
        period_label=describe_period(period),
        date_range=date_range,
        generated_at=now,
        metrics=metrics,
        sales_by_day=bucket_by_day(transactions, date_range, max_points=config.chart_max_points),
        sales_by_hour=bucket_by_hour(transactions, date_range),
        sales_by_weekday=bucket_by_weekday(transactions, date_range),
        sales_by_month=sales_by_month,
        growth=growth_summary(transactions, now),
        period_growth=period_growth(transactions, date_range),
        payment_breakdown=payment_breakdown(transactions, date_range),
        order_source_breakdown=(
            order_source_breakdown(transactions, date_range) if track_order_source else []
        ),
        category_breakdown=category_breakdown(transactions, products, date_range),
        top_products=top,
        recent_transactions=recent,
        product_performance=performance,
        inventory=inventory,
        status_counts=status_counts(products),
        category_rollups=category_rollups(products),
        reorder=reorder_recommendations(products, config),
        fast_moving=fast_moving(products, quantities, limit=config.top_n),
        slow_moving=slow_moving(products, quantities, limit=config.top_n),
        aging=aging(products, now, config),
        goals=goals_progress(goals, transactions, now),
        failures=list(inputs.failures),
        sources=sources,
    )
    if report.failures:
        logger.warning("Report built with failed fetches: %s", ", ".join(report.failures))
    logger.info("Report ready: %.2f total sales", report.metrics.total_sales)
    return report
