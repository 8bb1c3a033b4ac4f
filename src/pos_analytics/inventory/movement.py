"""Stock movement views: fast movers, slow movers and aging.

Movement is measured against the quantities sold over a period, given as a
``{product_id: quantity}`` mapping (see ``sales_quantities``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

import numpy as np
import pandas as pd

from pos_analytics.config import AnalyticsConfig
from pos_analytics.inventory.status import LOW_STOCK, OUT_OF_STOCK, products_frame
from pos_analytics.models import Product, Transaction
from pos_analytics.periods import DateRange
from pos_analytics.sales.frames import line_items_frame
from pos_analytics.utils import safe_divide_series, to_number

logger = logging.getLogger(__name__)

AGE_NEW = "new"
AGE_MEDIUM = "medium"
AGE_OLD = "old"
AGE_UNKNOWN = "unknown"


def sales_quantities(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> dict[str, float]:
    """Total quantity sold per product id over ``date_range``."""
    items = line_items_frame(transactions, date_range)
    items = items[items["product_id"] != ""]
    if items.empty:
        return {}
    totals = items.groupby("product_id")["quantity"].sum()
    return {str(k): float(v) for k, v in totals.items()}


def _movement_frame(products: Iterable[Product], quantities: Mapping[str, float]) -> pd.DataFrame:
    df = products_frame(products)
    df["sales_quantity"] = df["product_id"].map(dict(quantities)).fillna(0.0).astype(float)
    df["turnover_rate"] = safe_divide_series(df["sales_quantity"], df["stock_quantity"]) * 100
    return df


def fast_moving(
    products: Iterable[Product],
    quantities: Mapping[str, float],
    limit: int | None = None,
) -> pd.DataFrame:
    """Products with positive sales, by quantity sold descending.

    ``turnover_rate`` is ``sales_quantity / stock_quantity * 100``, 0 when
    stock is zero.

    Returns:
        DataFrame with columns ``product_id``, ``product_name``,
        ``category``, ``stock_quantity``, ``sales_quantity`` and
        ``turnover_rate``.

    """
    df = _movement_frame(products, quantities)
    df = df[df["sales_quantity"] > 0].sort_values(
        "sales_quantity", ascending=False, kind="mergesort"
    )
    cols = ["product_id", "product_name", "category", "stock_quantity", "sales_quantity", "turnover_rate"]
    out = df[cols].reset_index(drop=True)
    return out.head(limit) if limit is not None else out


def slow_moving(
    products: Iterable[Product],
    quantities: Mapping[str, float],
    limit: int | None = None,
) -> pd.DataFrame:
    """Products that did not sell at all but still hold stock, by stock value descending."""
    df = _movement_frame(products, quantities)
    df = df[(df["sales_quantity"] == 0) & (df["stock_quantity"] > 0)].sort_values(
        "stock_value", ascending=False, kind="mergesort"
    )
    cols = ["product_id", "product_name", "category", "stock_quantity", "stock_value"]
    out = df[cols].reset_index(drop=True)
    return out.head(limit) if limit is not None else out


def aging(
    products: Iterable[Product],
    now: datetime,
    config: AnalyticsConfig | None = None,
) -> pd.DataFrame:
    """Days since each product was last updated, oldest first.

    Age buckets: ``new`` below ``aging_new_days``, ``old`` above
    ``aging_old_days``, ``medium`` in between (both bounds inclusive).
    Products with no timestamp get ``unknown`` and sort last.

    Returns:
        DataFrame with columns ``product_id``, ``product_name``,
        ``category``, ``stock_quantity``, ``days_since_update`` and
        ``age_bucket``.

    """
    config = config or AnalyticsConfig()
    df = products_frame(products)
    days = (pd.Timestamp(now) - df["updated_at"]).dt.days
    df["days_since_update"] = days
    df["age_bucket"] = np.select(
        [
            days.isna(),
            days < config.aging_new_days,
            days > config.aging_old_days,
        ],
        [AGE_UNKNOWN, AGE_NEW, AGE_OLD],
        default=AGE_MEDIUM,
    )
    df = df.sort_values("days_since_update", ascending=False, na_position="last", kind="mergesort")
    cols = ["product_id", "product_name", "category", "stock_quantity", "days_since_update", "age_bucket"]
    return df[cols].reset_index(drop=True)


# --------------------------------------------------------------------------- #
# Summary
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class InventorySummary:
    """Headline inventory numbers, in the shape of ``GET /analytics/inventory``."""

    total_products: int
    total_inventory_value: float
    low_stock_count: int
    out_of_stock_count: int
    fast_moving_count: int
    slow_moving_count: int

    @classmethod
    def from_api(cls, data: Mapping) -> InventorySummary:
        """Read the server payload; missing counters read as 0."""
        return cls(
            total_products=int(to_number(data.get("total_products"))),
            total_inventory_value=to_number(data.get("total_inventory_value")),
            low_stock_count=int(to_number(data.get("low_stock_count"))),
            out_of_stock_count=int(to_number(data.get("out_of_stock_count"))),
            fast_moving_count=int(to_number(data.get("fast_moving_count"))),
            slow_moving_count=int(to_number(data.get("slow_moving_count"))),
        )


def inventory_summary(
    products: Iterable[Product], quantities: Mapping[str, float]
) -> InventorySummary:
    """Recompute the inventory headline numbers from the catalog."""
    products = list(products)
    df = _movement_frame(products, quantities)
    summary = InventorySummary(
        total_products=len(df),
        total_inventory_value=float(df["stock_value"].sum()),
        low_stock_count=int((df["status"] == LOW_STOCK).sum()),
        out_of_stock_count=int((df["status"] == OUT_OF_STOCK).sum()),
        fast_moving_count=int((df["sales_quantity"] > 0).sum()),
        slow_moving_count=int(((df["sales_quantity"] == 0) & (df["stock_quantity"] > 0)).sum()),
    )
    logger.debug("Inventory summary: %s", summary)
    return summary
