"""Stock status classification and per-category rollups.

Every product falls in exactly one status:

- ``out_of_stock``: stock quantity is zero (negative stock, left behind by
  unsynced refunds, is treated the same way)
- ``low_stock``: ``0 < stock <= min_stock_level``
- ``in_stock``: everything else
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from pos_analytics.models import Product

logger = logging.getLogger(__name__)

IN_STOCK = "in_stock"
LOW_STOCK = "low_stock"
OUT_OF_STOCK = "out_of_stock"
STATUSES = [IN_STOCK, LOW_STOCK, OUT_OF_STOCK]

PRODUCT_COLUMNS = [
    "product_id",
    "product_name",
    "category",
    "price",
    "unit_cost",
    "stock_quantity",
    "min_stock_level",
    "stock_value",
    "status",
    "updated_at",
]

ROLLUP_COLUMNS = [
    "category",
    "product_count",
    "total_stock_value",
    "total_quantity",
    "in_stock_count",
    "low_stock_count",
    "out_of_stock_count",
]


def stock_status(product: Product) -> str:
    """Classify one product.

    Examples:
        >>> stock_status(Product(id="a", name="A", stock_quantity=3, min_stock_level=5))
        'low_stock'

    """
    if product.stock_quantity <= 0:
        return OUT_OF_STOCK
    if product.stock_quantity <= product.min_stock_level:
        return LOW_STOCK
    return IN_STOCK


def status_counts(products: Iterable[Product]) -> dict[str, int]:
    """Number of products per status; all three keys are always present."""
    counts = dict.fromkeys(STATUSES, 0)
    for product in products:
        counts[stock_status(product)] += 1
    return counts


def products_frame(products: Iterable[Product]) -> pd.DataFrame:
    """One row per product with its derived stock value and status."""
    rows = [
        {
            "product_id": p.id,
            "product_name": p.name,
            "category": p.category,
            "price": p.price,
            "unit_cost": p.unit_cost,
            "stock_quantity": p.stock_quantity,
            "min_stock_level": p.min_stock_level,
            "stock_value": p.stock_value,
            "status": stock_status(p),
            "updated_at": p.updated_at,
        }
        for p in products
    ]
    df = pd.DataFrame(rows, columns=PRODUCT_COLUMNS)
    for col in ("price", "unit_cost", "stock_quantity", "min_stock_level", "stock_value"):
        df[col] = df[col].astype(float)
    df["updated_at"] = pd.to_datetime(df["updated_at"])
    return df


def category_rollups(products: Iterable[Product]) -> pd.DataFrame:
    """Aggregate stock position per category.

    Returns:
        DataFrame with columns ``category``, ``product_count``,
        ``total_stock_value`` (sum of price x stock), ``total_quantity``,
        ``in_stock_count``, ``low_stock_count`` and ``out_of_stock_count``,
        sorted by stock value descending.

    """
    df = products_frame(products)
    if df.empty:
        return pd.DataFrame(columns=ROLLUP_COLUMNS)

    status_table = pd.crosstab(df["category"], df["status"]).reindex(
        columns=STATUSES, fill_value=0
    )
    out = df.groupby("category").agg(
        product_count=("product_id", "count"),
        total_stock_value=("stock_value", "sum"),
        total_quantity=("stock_quantity", "sum"),
    )
    for status in STATUSES:
        out[f"{status}_count"] = status_table[status].astype(int)

    out = out.reset_index().sort_values(
        ["total_stock_value", "category"], ascending=[False, True], kind="mergesort"
    )
    logger.debug("Rolled up %d products into %d categories", len(df), len(out))
    return out[ROLLUP_COLUMNS].reset_index(drop=True)
