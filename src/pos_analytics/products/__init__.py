"""Products domain module.

Example:
    >>> from pos_analytics.products import product_performance
    >>> perf = product_performance(products, transactions, date_range)
    >>> perf.best_performers[["product_name", "revenue"]]
"""

from pos_analytics.products.performance import (
    PERFORMANCE_COLUMNS,
    ProductPerformance,
    category_breakdown,
    performance_table,
    performance_table_from_api,
    product_performance,
    product_sales,
    rank_performance,
    top_products,
)

__all__ = [
    "PERFORMANCE_COLUMNS",
    "ProductPerformance",
    "category_breakdown",
    "performance_table",
    "performance_table_from_api",
    "product_performance",
    "product_sales",
    "rank_performance",
    "top_products",
]
