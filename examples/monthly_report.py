"""Example: Monthly analytics report from the POS REST API

This example fetches everything a report needs for one store and month,
builds the report and writes it to CSV:
1. Fetch dashboard, product, inventory, transaction, catalog and goal data
   (concurrently; failed endpoints are listed, not fatal)
2. Build the report (server aggregates where available, otherwise computed)
3. Export the labeled CSV sections

Prerequisites:
- Set POS_API_BASE (and POS_API_TOKEN if your API needs auth)
"""

from pathlib import Path

from pos_analytics import ApiConfig, PosApiClient, build_report, fetch_report_inputs
from pos_analytics.export import write_report_csv

period = "2025-01"  # MODIFY AS NEEDED
store_id = None  # MODIFY AS NEEDED (None = the token's default store)
store_tz = "Africa/Lagos"  # MODIFY AS NEEDED

print(f"Fetching report inputs for {period}...")
with PosApiClient(ApiConfig.from_env()) as client:
    inputs = fetch_report_inputs(client, period, store_id=store_id)

if inputs.failures:
    print(f"WARNING: these fetches failed: {', '.join(inputs.failures)}")

report = build_report(inputs, period, tz=store_tz)

print(f"\n{report.period_label}: {report.date_range.start} to {report.date_range.end}")
print(f"  - Total sales: {report.metrics.total_sales:.2f}")
print(f"  - Transactions: {report.metrics.total_transactions}")
print(f"  - Growth vs previous period: {report.period_growth.growth_percent:.1f}%")

print("\nPayment methods:")
for entry in report.payment_breakdown:
    print(f"  - {entry.key}: {entry.amount:.2f} ({entry.percentage:.1f}%)")

print("\nSection sources:")
for section, source in report.sources.items():
    print(f"  - {section}: {source}")

out = write_report_csv(report, Path("reports") / f"report_{period}.csv")
print(f"\n✓ Report written to {out}")
