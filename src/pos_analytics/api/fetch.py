"""Concurrent loading of everything a report needs.

``fetch_report_inputs`` fans the independent endpoint calls out on a thread
pool and waits for all of them. A failing call never aborts its siblings:
its error is logged, its name is recorded in ``ReportInputs.failures`` and
an empty default takes its place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any

from pos_analytics.api.client import PosApiClient
from pos_analytics.exceptions import PosAnalyticsError
from pos_analytics.periods import DateRange, PeriodSpec, resolve_period, year_range
from pos_analytics.report import ReportInputs
from pos_analytics.utils import end_of_day, wall_clock_now

logger = logging.getLogger(__name__)


def history_range(date_range: DateRange, now: datetime) -> DateRange:
    """Transaction window covering ``date_range`` and the growth comparisons.

    Year-over-year growth compares with the whole previous calendar year, so
    the window starts no later than January 1st of last year.
    """
    return DateRange(
        start=min(date_range.start, year_range(now.year - 1).start),
        end=max(date_range.end, end_of_day(now)),
    )


def fetch_report_inputs(
    client: PosApiClient,
    period: PeriodSpec = "30d",
    store_id: str | None = None,
    now: datetime | None = None,
) -> ReportInputs:
    """Fetch dashboard, product, inventory, transaction, catalog and goal data.

    Args:
        client: API client.
        period: Period token or explicit ``(start, end)`` pair.
        store_id: Store to report on; None lets the server pick the user's store.
        now: Anchor instant; defaults to the current UTC wall clock.

    Returns:
        ReportInputs with a safe empty default for every failed fetch.

    """
    now = now or wall_clock_now()
    date_range = resolve_period(period, now)
    token = period if isinstance(period, str) else None

    calls: dict[str, tuple[Callable[[], Any], Any]] = {
        "dashboard": (lambda: client.get_dashboard_analytics(store_id, date_range), None),
        "product_performance": (
            lambda: client.get_product_performance(store_id, token, date_range),
            None,
        ),
        "inventory": (lambda: client.get_inventory_analytics(store_id), None),
        "transactions": (
            lambda: client.get_all_transactions(store_id, history_range(date_range, now)),
            [],
        ),
        "products": (lambda: client.get_all_products(store_id), []),
        "goals": (lambda: client.get_goals(store_id), []),
    }

    results: dict[str, Any] = {}
    failures: list[str] = []
    with ThreadPoolExecutor(max_workers=client.config.max_workers) as executor:
        future_to_name = {executor.submit(fn): name for name, (fn, _) in calls.items()}
        for future in as_completed(future_to_name):
            name = future_to_name[future]
            try:
                results[name] = future.result()
            except PosAnalyticsError as e:
                logger.warning("Failed to load %s: %s", name, e)
                failures.append(name)
                results[name] = calls[name][1]

    failures.sort(key=list(calls).index)
    logger.info("Fetched report inputs (%d of %d calls failed)", len(failures), len(calls))
    return ReportInputs(
        dashboard=results["dashboard"],
        product_performance=results["product_performance"],
        inventory=results["inventory"],
        transactions=results["transactions"],
        products=results["products"],
        goals=results["goals"],
        failures=failures,
    )
