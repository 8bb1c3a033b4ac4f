"""Example: Stock check and reorder list

This example works directly on the record lists, without the full report:
1. Download the product catalog and the last 30 days of transactions
2. Classify stock and list reorder recommendations, most urgent first
3. Show fast movers and products that did not sell at all

Prerequisites:
- Set POS_API_BASE (and POS_API_TOKEN if your API needs auth)
"""

from pos_analytics import ApiConfig, PosApiClient, resolve_period
from pos_analytics.inventory import (
    fast_moving,
    reorder_recommendations,
    sales_quantities,
    slow_moving,
    status_counts,
)
from pos_analytics.models import parse_products, parse_transactions

date_range = resolve_period("30d")

with PosApiClient(ApiConfig.from_env()) as client:
    products = parse_products(client.get_all_products())
    transactions = parse_transactions(client.get_all_transactions(date_range=date_range))

print(f"{len(products)} products, {len(transactions)} transactions in the last 30 days")
print(f"Stock status: {status_counts(products)}")

print("\nReorder list:")
for rec in reorder_recommendations(products):
    print(
        f"  [{rec.priority:>8}] {rec.product.name}: order {rec.recommended_quantity:.0f} "
        f"(~{rec.estimated_cost:.2f})"
    )

quantities = sales_quantities(transactions, date_range)

print("\nFast movers:")
print(fast_moving(products, quantities, limit=5).to_string(index=False))

print("\nNo sales in 30 days:")
print(slow_moving(products, quantities, limit=5).to_string(index=False))
