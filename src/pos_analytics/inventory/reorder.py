"""Reorder recommendations for low and out-of-stock products."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from pos_analytics.config import AnalyticsConfig
from pos_analytics.inventory.status import LOW_STOCK, OUT_OF_STOCK, stock_status
from pos_analytics.models import Product

logger = logging.getLogger(__name__)

PRIORITIES = ["critical", "high", "medium", "low"]
_PRIORITY_RANK = {name: rank for rank, name in enumerate(PRIORITIES)}


@dataclass(frozen=True)
class ReorderRecommendation:
    """A suggested replenishment for one product.

    Attributes:
        product: The product to reorder.
        priority: ``critical``, ``high``, ``medium`` or ``low``.
        recommended_quantity: Units to order.
        estimated_cost: ``recommended_quantity`` times the product's unit cost.
    """

    product: Product
    priority: str
    recommended_quantity: float
    estimated_cost: float


def reorder_quantity(product: Product, config: AnalyticsConfig | None = None) -> float:
    """Units to order so stock gets back above its minimum level.

    Low stock orders ``max(2 * min - stock, min)``. Out of stock orders
    ``min``, or the configured default when no minimum is set.

    Examples:
        >>> reorder_quantity(Product(id="p", name="P", stock_quantity=3, min_stock_level=10))
        17.0

    """
    config = config or AnalyticsConfig()
    minimum = product.min_stock_level
    if product.stock_quantity <= 0:
        return float(minimum) if minimum > 0 else float(config.default_reorder_quantity)
    return float(max(2 * minimum - product.stock_quantity, minimum))


def reorder_priority(product: Product, config: AnalyticsConfig | None = None) -> str:
    config = config or AnalyticsConfig()
    if product.stock_quantity <= 0:
        return "critical"
    # low stock implies a positive minimum
    ratio = product.stock_quantity / product.min_stock_level if product.min_stock_level else 1.0
    if ratio < config.high_priority_ratio:
        return "high"
    if ratio < config.medium_priority_ratio:
        return "medium"
    return "low"


def reorder_recommendations(
    products: Iterable[Product], config: AnalyticsConfig | None = None
) -> list[ReorderRecommendation]:
    """Recommend a reorder for every low or out-of-stock product.

    Args:
        products: Catalog products.
        config: Thresholds; defaults to ``AnalyticsConfig()``.

    Returns:
        Recommendations sorted by priority tier (critical first), then by
        estimated cost descending.

    """
    config = config or AnalyticsConfig()
    recommendations = []
    for product in products:
        if stock_status(product) not in (LOW_STOCK, OUT_OF_STOCK):
            continue
        quantity = reorder_quantity(product, config)
        recommendations.append(
            ReorderRecommendation(
                product=product,
                priority=reorder_priority(product, config),
                recommended_quantity=quantity,
                estimated_cost=quantity * product.unit_cost,
            )
        )
    recommendations.sort(key=lambda r: (_PRIORITY_RANK[r.priority], -r.estimated_cost))
    logger.info("%d products need reordering", len(recommendations))
    return recommendations
