"""CSV export of an analytics report.

The file is a sequence of labeled sections, each written as a title row, a
header row, the data rows and a blank separator line:

    Report Metadata
    Dashboard Metrics
    Sales by Month
    Top Products
    Recent Transactions
    Product Performance
    Inventory Analytics

Amounts and percentages are written with two decimals. Quoting is
``csv.QUOTE_MINIMAL``: fields containing a comma, quote or newline are
wrapped in quotes with embedded quotes doubled.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd

from pos_analytics.report import AnalyticsReport
from pos_analytics.utils import format_amount

logger = logging.getLogger(__name__)

SECTION_TITLES = [
    "Report Metadata",
    "Dashboard Metrics",
    "Sales by Month",
    "Top Products",
    "Recent Transactions",
    "Product Performance",
    "Inventory Analytics",
]


def _timestamp(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def _text(value: Any) -> str:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ""
    return str(value)


def _write_section(
    writer: Any, title: str, header: Sequence[str], rows: Iterable[Sequence[Any]]
) -> None:
    writer.writerow([title])
    writer.writerow(header)
    for row in rows:
        writer.writerow(row)
    writer.writerow([])


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _metadata_rows(report: AnalyticsReport) -> list[list[str]]:
    return [
        ["Period", report.period_label],
        ["Start Date", _timestamp(report.date_range.start)],
        ["End Date", _timestamp(report.date_range.end)],
        ["Generated At", _timestamp(report.generated_at)],
        ["Failed Fetches", ", ".join(report.failures)],
    ]


def _dashboard_rows(report: AnalyticsReport) -> list[list[str]]:
    m = report.metrics
    rows = [
        ["Total Sales", format_amount(m.total_sales)],
        ["Total Transactions", str(m.total_transactions)],
        ["Average Transaction Value", format_amount(m.average_transaction_value)],
        ["Today's Sales", format_amount(m.today_sales)],
        ["Monthly Sales", format_amount(m.monthly_sales)],
        ["Growth Rate %", format_amount(m.growth_rate)],
        ["Total Products", str(m.total_products)],
        ["Low Stock Items", str(m.low_stock_items)],
    ]
    rows += [
        [f"Payment: {e.key}", format_amount(e.amount), format_amount(e.percentage)]
        for e in report.payment_breakdown
    ]
    rows += [
        [f"Order Source: {e.key}", format_amount(e.amount), format_amount(e.percentage)]
        for e in report.order_source_breakdown
    ]
    return rows


def _month_rows(report: AnalyticsReport) -> list[list[str]]:
    return [
        [_text(r.label), format_amount(r.sales_amount), str(int(r.transaction_count))]
        for r in report.sales_by_month.itertuples(index=False)
    ]


def _top_product_rows(report: AnalyticsReport) -> list[list[str]]:
    return [
        [_text(r.product_name), format_amount(r.quantity_sold), format_amount(r.revenue)]
        for r in report.top_products.itertuples(index=False)
    ]


def _recent_rows(report: AnalyticsReport) -> list[list[str]]:
    return [
        [
            _text(r.id),
            _timestamp(r.created_at),
            format_amount(r.total_amount),
            _text(r.payment_method),
            _text(r.order_source),
            _text(r.status),
        ]
        for r in report.recent_transactions.itertuples(index=False)
    ]


def _performance_rows(report: AnalyticsReport) -> list[list[str]]:
    return [
        [
            _text(r.product_name),
            _text(r.category),
            format_amount(r.revenue),
            format_amount(r.quantity_sold),
            format_amount(r.profit_margin),
            format_amount(r.turnover_rate),
        ]
        for r in report.product_performance.best_performers.itertuples(index=False)
    ]


def _inventory_rows(report: AnalyticsReport) -> list[list[str]]:
    inv = report.inventory
    rows = [
        ["Total Products", str(inv.total_products)],
        ["Total Inventory Value", format_amount(inv.total_inventory_value)],
        ["Low Stock Count", str(inv.low_stock_count)],
        ["Out of Stock Count", str(inv.out_of_stock_count)],
        ["Fast Moving Count", str(inv.fast_moving_count)],
        ["Slow Moving Count", str(inv.slow_moving_count)],
    ]
    rows += [
        [
            f"Reorder: {r.product.name}",
            r.priority,
            format_amount(r.recommended_quantity),
            format_amount(r.estimated_cost),
        ]
        for r in report.reorder
    ]
    return rows


def render_report_csv(report: AnalyticsReport) -> str:
    """Render ``report`` as CSV text.

    Examples:
        >>> text = render_report_csv(report)
        >>> text.splitlines()[0]
        'Report Metadata'

    """
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    sections = [
        (["Field", "Value"], _metadata_rows(report)),
        (["Metric", "Value", "Percentage"], _dashboard_rows(report)),
        (["Month", "Sales", "Transactions"], _month_rows(report)),
        (["Product", "Quantity Sold", "Revenue"], _top_product_rows(report)),
        (
            ["Transaction ID", "Date", "Amount", "Payment Method", "Order Source", "Status"],
            _recent_rows(report),
        ),
        (
            ["Product", "Category", "Revenue", "Quantity Sold", "Profit Margin %", "Turnover Rate %"],
            _performance_rows(report),
        ),
        (["Metric", "Value", "Quantity", "Estimated Cost"], _inventory_rows(report)),
    ]
    for title, (header, rows) in zip(SECTION_TITLES, sections):
        _write_section(writer, title, header, rows)
    return buf.getvalue()


def write_report_csv(report: AnalyticsReport, out_path: Path | str) -> Path:
    """Write ``report`` to ``out_path`` (UTF-8 with BOM, for spreadsheet apps).

    Returns:
        The path written.

    """
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_report_csv(report), encoding="utf-8-sig", newline="")
    logger.info("Wrote report CSV: %s", out_path)
    return out_path
