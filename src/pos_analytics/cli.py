"""Command-line entry point: fetch, aggregate and export a report.

Examples:
  pos-analytics --period 30d -o reports/last30.csv
  pos-analytics --period 2025-01 --store-id 64f0c1 -o jan.csv -v
  pos-analytics --start 2025-01-01 --end 2025-01-15 -o first_half.csv

Environment:
  POS_API_BASE     API root, e.g. http://localhost:3001/api/v1
  POS_API_TOKEN    Bearer token (optional)
  POS_API_TIMEOUT  Per-request timeout in seconds (default 10)
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from pos_analytics.api import PosApiClient, fetch_report_inputs
from pos_analytics.config import AnalyticsConfig, ApiConfig
from pos_analytics.exceptions import PosAnalyticsError
from pos_analytics.export import write_report_csv
from pos_analytics.report import build_report
from pos_analytics.utils import wall_clock_now

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pos-analytics",
        description="Build a POS analytics report from the REST API and export it as CSV.",
    )
    p.add_argument(
        "--period",
        default="30d",
        help="Period token: 7d, 30d, 90d, 1y, today, this_month, YYYY-MM or year-YYYY (default: 30d).",
    )
    p.add_argument("--start", default=None, help="Explicit start date (YYYY-MM-DD); needs --end.")
    p.add_argument("--end", default=None, help="Explicit end date (YYYY-MM-DD); needs --start.")
    p.add_argument("--store-id", default=None, help="Store to report on.")
    p.add_argument("--base-url", default=None, help="API root (overrides POS_API_BASE).")
    p.add_argument("--tz", default=None, help="Store time zone, e.g. Africa/Lagos (default: UTC).")
    p.add_argument("--top-n", type=int, default=10, help="Rows per ranked view (default: 10).")
    p.add_argument(
        "--no-order-source",
        action="store_true",
        help="Skip the order-source breakdown (stores without online orders).",
    )
    p.add_argument("-o", "--output", required=True, help="Output CSV path.")
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose/debug logging output.",
    )
    return p


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if (args.start is None) != (args.end is None):
        print("ERROR: --start and --end must be given together", file=sys.stderr)
        return 2
    period = (args.start, args.end) if args.start else args.period

    try:
        api_config = ApiConfig.from_env(base_url=args.base_url)
        config = AnalyticsConfig(top_n=args.top_n)
        now = wall_clock_now(args.tz)
        with PosApiClient(api_config) as client:
            inputs = fetch_report_inputs(client, period, store_id=args.store_id, now=now)
        report = build_report(
            inputs,
            period,
            now=now,
            config=config,
            tz=args.tz,
            track_order_source=not args.no_order_source,
        )
        write_report_csv(report, args.output)
    except (PosAnalyticsError, ValueError) as e:
        logger.error("Error: %s", e, exc_info=args.verbose)
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"Successfully wrote report to: {args.output}")
    if report.failures:
        print(f"WARNING: incomplete data, failed fetches: {', '.join(report.failures)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
