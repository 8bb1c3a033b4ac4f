"""Product performance rankings.

Products are joined with the sales accumulated from transaction line items
over a period. Lines whose product is not in the catalog do not enter the
per-product rankings, but still count in ``top_products`` and the category
breakdown (under ``"Other"``), which are read straight off the line items.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from pos_analytics.config import AnalyticsConfig
from pos_analytics.inventory.status import products_frame
from pos_analytics.models import DEFAULT_CATEGORY, Product, Transaction
from pos_analytics.payments.normalize import BreakdownEntry
from pos_analytics.periods import DateRange
from pos_analytics.sales.frames import line_items_frame
from pos_analytics.utils import (
    camel_case,
    pick,
    safe_divide_series,
    safe_percentage,
    to_number,
)

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT = "Unknown Product"

PERFORMANCE_COLUMNS = [
    "product_id",
    "product_name",
    "category",
    "price",
    "unit_cost",
    "stock_quantity",
    "stock_value",
    "revenue",
    "quantity_sold",
    "transaction_count",
    "profit_margin",
    "turnover_rate",
    "avg_price_per_sale",
]

TOP_PRODUCT_COLUMNS = ["product_id", "product_name", "quantity_sold", "revenue"]


def product_sales(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> pd.DataFrame:
    """Revenue, quantity and distinct-transaction count per product id.

    Returns:
        DataFrame indexed by ``product_id`` with columns ``product_name``,
        ``revenue``, ``quantity_sold`` and ``transaction_count``.

    """
    items = line_items_frame(transactions, date_range)
    if items.empty:
        empty = pd.DataFrame(
            {
                "product_name": pd.Series(dtype=object),
                "revenue": pd.Series(dtype=float),
                "quantity_sold": pd.Series(dtype=float),
                "transaction_count": pd.Series(dtype=int),
            },
            index=pd.Index([], dtype=object, name="product_id"),
        )
        return empty
    return items.groupby("product_id").agg(
        product_name=("product_name", "first"),
        revenue=("total_price", "sum"),
        quantity_sold=("quantity", "sum"),
        transaction_count=("transaction_id", "nunique"),
    )


@dataclass
class ProductPerformance:
    """The four ranked views plus the full per-product table.

    Attributes:
        table: One row per catalog product (see ``PERFORMANCE_COLUMNS``).
        best_performers: Revenue descending.
        worst_performers: No revenue but stock on hand, by stock value descending.
        most_profitable: Products with revenue, by profit margin descending.
        fastest_moving: Turnover rate descending.
    """

    table: pd.DataFrame
    best_performers: pd.DataFrame
    worst_performers: pd.DataFrame
    most_profitable: pd.DataFrame
    fastest_moving: pd.DataFrame


def _ranked(df: pd.DataFrame, column: str, limit: int) -> pd.DataFrame:
    return (
        df.sort_values(column, ascending=False, kind="mergesort").head(limit).reset_index(drop=True)
    )


def performance_table(
    products: Iterable[Product],
    transactions: Iterable[Transaction],
    date_range: DateRange | None = None,
) -> pd.DataFrame:
    """Join the catalog with period sales and derive the per-product ratios.

    - ``profit_margin``: ``(revenue - quantity_sold * unit_cost) / revenue * 100``,
      0 without revenue; ``unit_cost`` is the cost price, or the list price
      when no cost is recorded
    - ``turnover_rate``: ``quantity_sold / stock_quantity * 100``, 0 without stock
    - ``avg_price_per_sale``: ``revenue / quantity_sold``, the list price when
      nothing sold
    """
    catalog = products_frame(products)
    sales = product_sales(transactions, date_range).drop(columns="product_name")
    df = catalog.merge(sales, how="left", left_on="product_id", right_index=True)
    df[["revenue", "quantity_sold"]] = df[["revenue", "quantity_sold"]].fillna(0.0).astype(float)
    df["transaction_count"] = df["transaction_count"].fillna(0).astype(int)

    cost_of_sales = df["quantity_sold"] * df["unit_cost"]
    df["profit_margin"] = safe_divide_series(df["revenue"] - cost_of_sales, df["revenue"]) * 100
    df["turnover_rate"] = safe_divide_series(df["quantity_sold"], df["stock_quantity"]) * 100
    df["avg_price_per_sale"] = np.where(
        df["quantity_sold"] != 0,
        safe_divide_series(df["revenue"], df["quantity_sold"]),
        df["price"],
    )
    return df[PERFORMANCE_COLUMNS].reset_index(drop=True)


def rank_performance(table: pd.DataFrame, config: AnalyticsConfig | None = None) -> ProductPerformance:
    """Build the four ranked views from a performance table."""
    config = config or AnalyticsConfig()
    limit = config.top_n

    worst = table[(table["revenue"] == 0) & (table["stock_quantity"] > 0)]
    profitable = table[table["revenue"] > 0]

    result = ProductPerformance(
        table=table,
        best_performers=_ranked(table, "revenue", limit),
        worst_performers=_ranked(worst, "stock_value", limit),
        most_profitable=_ranked(profitable, "profit_margin", limit),
        fastest_moving=_ranked(table, "turnover_rate", limit),
    )
    logger.info(
        "Ranked %d products (%d with sales)", len(table), int((table["revenue"] > 0).sum())
    )
    return result


def product_performance(
    products: Iterable[Product],
    transactions: Iterable[Transaction],
    date_range: DateRange | None = None,
    config: AnalyticsConfig | None = None,
) -> ProductPerformance:
    """Rank catalog products by their sales over ``date_range``.

    Args:
        products: Catalog products.
        transactions: Parsed transactions.
        date_range: Optional period restriction for the sales side.
        config: Supplies ``top_n``; defaults to ``AnalyticsConfig()``.

    Returns:
        ProductPerformance with every view capped at ``top_n`` rows.

    """
    return rank_performance(performance_table(products, transactions, date_range), config)


def performance_table_from_api(payload: Any) -> pd.DataFrame:
    """Read ``GET /analytics/products`` rows into a performance table.

    The server sends either a list of rows or ``{"products": [...]}``, with
    snake_case or camelCase keys. Missing metrics read as 0.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("products") or payload.get("data") or []
    rows = []
    for record in payload or []:
        if not isinstance(record, Mapping):
            continue
        rows.append(
            {
                "product_id": str(pick(record, "product_id", "productId", "_id", "id") or ""),
                "product_name": str(pick(record, "product_name", "productName", "name") or ""),
                "category": str(record.get("category") or DEFAULT_CATEGORY),
                **{
                    col: to_number(pick(record, col, camel_case(col)))
                    for col in PERFORMANCE_COLUMNS[3:]
                },
            }
        )
    df = pd.DataFrame(rows, columns=PERFORMANCE_COLUMNS)
    df["transaction_count"] = df["transaction_count"].astype(int)
    for col in PERFORMANCE_COLUMNS[3:]:
        if col != "transaction_count":
            df[col] = df[col].astype(float)
    return df

# --------------------------------------------------------------------------- #
# Line-item views
# --------------------------------------------------------------------------- #


def top_products(
    transactions: Iterable[Transaction],
    date_range: DateRange | None = None,
    limit: int = 10,
) -> pd.DataFrame:
    """Best-selling products by revenue, read from line items.

    Returns:
        DataFrame with columns ``product_id``, ``product_name``,
        ``quantity_sold`` and ``revenue``.

    """
    sales = product_sales(transactions, date_range)
    if sales.empty:
        return pd.DataFrame(columns=TOP_PRODUCT_COLUMNS)
    out = sales.reset_index()
    out["product_name"] = out["product_name"].replace("", UNKNOWN_PRODUCT).fillna(UNKNOWN_PRODUCT)
    out = out.sort_values("revenue", ascending=False, kind="mergesort").head(limit)
    return out[TOP_PRODUCT_COLUMNS].reset_index(drop=True)


def category_breakdown(
    transactions: Iterable[Transaction],
    products: Iterable[Product],
    date_range: DateRange | None = None,
) -> list[BreakdownEntry]:
    """Line-item revenue per product category.

    Lines whose product is unknown to the catalog are filed under ``"Other"``.
    """
    categories = {p.id: p.category for p in products}
    items = line_items_frame(transactions, date_range)
    if items.empty:
        return []
    items["category"] = items["product_id"].map(categories).fillna(DEFAULT_CATEGORY)
    revenue = items.groupby("category")["total_price"].sum()
    total = float(revenue.sum())
    entries = [
        BreakdownEntry(key=str(k), amount=float(v), percentage=safe_percentage(float(v), total))
        for k, v in revenue.items()
    ]
    return sorted(entries, key=lambda e: e.amount, reverse=True)
