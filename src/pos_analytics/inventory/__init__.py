"""Inventory domain module.

- **status**: stock status partition and per-category rollups
- **reorder**: prioritized reorder recommendations
- **movement**: fast / slow movers, aging and the inventory summary

Example:
    >>> from pos_analytics.inventory import reorder_recommendations, status_counts
    >>> status_counts(products)
    {'in_stock': 1, 'low_stock': 1, 'out_of_stock': 1}
    >>> [r.recommended_quantity for r in reorder_recommendations(products)]
"""

from pos_analytics.inventory.movement import (
    InventorySummary,
    aging,
    fast_moving,
    inventory_summary,
    sales_quantities,
    slow_moving,
)
from pos_analytics.inventory.reorder import (
    ReorderRecommendation,
    reorder_priority,
    reorder_quantity,
    reorder_recommendations,
)
from pos_analytics.inventory.status import (
    IN_STOCK,
    LOW_STOCK,
    OUT_OF_STOCK,
    category_rollups,
    products_frame,
    status_counts,
    stock_status,
)

__all__ = [
    "IN_STOCK",
    "LOW_STOCK",
    "OUT_OF_STOCK",
    "InventorySummary",
    "ReorderRecommendation",
    "aging",
    "category_rollups",
    "fast_moving",
    "inventory_summary",
    "products_frame",
    "reorder_priority",
    "reorder_quantity",
    "reorder_recommendations",
    "sales_quantities",
    "slow_moving",
    "status_counts",
    "stock_status",
]
