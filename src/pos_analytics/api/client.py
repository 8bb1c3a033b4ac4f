"""HTTP client for the POS REST API.

Every endpoint answers with a ``{"success": bool, "data": ...}`` envelope.
``PosApiClient`` unwraps it and raises ``ApiError`` for transport errors,
non-2xx statuses, unparseable bodies and ``success: false`` envelopes.
Requests are never retried.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from pos_analytics.config import DEFAULT_MAX_WORKERS, DEFAULT_TIMEOUT, ApiConfig
from pos_analytics.exceptions import ApiError
from pos_analytics.periods import DateRange

logger = logging.getLogger(__name__)


def make_session(
    timeout: float = DEFAULT_TIMEOUT,
    token: str | None = None,
    pool_size: int = DEFAULT_MAX_WORKERS,
) -> requests.Session:
    """Create a requests Session with a default timeout and auth header.

    Configures the session with:
    - JSON Accept header and, when ``token`` is set, a Bearer Authorization header
    - A connection pool large enough for ``pool_size`` concurrent fetches
    - No retries (``max_retries=0``)
    - Default timeout for all requests

    Args:
        timeout: Default timeout in seconds for all requests.
        token: Optional bearer token.
        pool_size: Number of connections kept per host.

    Returns:
        Configured requests.Session object.

    """
    s = requests.Session()
    s.headers.update({"Accept": "application/json"})
    if token:
        s.headers["Authorization"] = f"Bearer {token}"
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    # Default timeouts via a wrapper
    orig_request = s.request

    def timed_request(method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return orig_request(method, url, **kwargs)

    s.request = timed_request  # type: ignore[method-assign,assignment]
    return s


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds")


def _range_params(date_range: DateRange | None) -> dict[str, str]:
    if date_range is None:
        return {}
    return {"start_date": _iso(date_range.start), "end_date": _iso(date_range.end)}


def _records(data: Any, key: str) -> list[dict[str, Any]]:
    """Pull a record list out of ``data``, which is a list or ``{key: [...]}``."""
    if isinstance(data, Mapping):
        data = data.get(key)
    if not isinstance(data, list):
        return []
    return [r for r in data if isinstance(r, Mapping)]


def _count(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def _page_meta(data: Any) -> tuple[int | None, int | None]:
    """``(pages, total)`` reported by a paged response, either flat or under ``pagination``."""
    if not isinstance(data, Mapping):
        return None, None
    meta = data.get("pagination")
    if not isinstance(meta, Mapping):
        meta = data
    return _count(meta.get("pages")), _count(meta.get("total"))


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or f"HTTP {response.status_code}"
    error = body.get("error") if isinstance(body, Mapping) else None
    if isinstance(error, Mapping) and error.get("message"):
        return str(error["message"])
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return response.reason or f"HTTP {response.status_code}"


class PosApiClient:
    """Typed wrapper over the analytics, transaction, product and goal endpoints.

    Args:
        config: Connection settings.
        session: Optional pre-built session (tests inject fakes here).

    Examples:
        >>> client = PosApiClient(ApiConfig.from_env())
        >>> products = client.get_all_products(store_id="store-1")

    """

    def __init__(self, config: ApiConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or make_session(
            timeout=config.timeout, token=config.token, pool_size=config.max_workers
        )

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def _request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.config.base_url}{path}"
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug("%s %s %s", method, url, clean_params)
        try:
            response = self.session.request(method, url, params=clean_params, json=json)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise ApiError(
                f"{method} {path} returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(
                f"{method} {path} returned a non-JSON body", status_code=response.status_code
            ) from e

        if isinstance(body, Mapping) and "success" in body:
            if not body.get("success"):
                raise ApiError(
                    f"{method} {path} reported failure: {_error_message(response)}",
                    status_code=response.status_code,
                )
            return body.get("data")
        return body

    def _get(self, path: str, **params: Any) -> Any:
        return self._request("GET", path, params=params)

    # ------------------------------------------------------------------ #
    # Analytics
    # ------------------------------------------------------------------ #

    def get_dashboard_analytics(
        self, store_id: str | None = None, date_range: DateRange | None = None
    ) -> dict[str, Any]:
        data = self._get("/analytics/dashboard", store_id=store_id, **_range_params(date_range))
        return dict(data) if isinstance(data, Mapping) else {}

    def get_product_performance(
        self,
        store_id: str | None = None,
        period: str | None = None,
        date_range: DateRange | None = None,
    ) -> Any:
        """Server-side product performance; the payload shape is passed through."""
        return self._get(
            "/analytics/products", store_id=store_id, period=period, **_range_params(date_range)
        )

    def get_inventory_analytics(self, store_id: str | None = None) -> dict[str, Any]:
        data = self._get("/analytics/inventory", store_id=store_id)
        return dict(data) if isinstance(data, Mapping) else {}

    # ------------------------------------------------------------------ #
    # Records
    # ------------------------------------------------------------------ #

    def get_transactions(
        self,
        store_id: str | None = None,
        date_range: DateRange | None = None,
        page: int = 1,
        limit: int | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch one page of transactions."""
        data = self._get(
            "/transactions",
            store_id=store_id,
            page=page,
            limit=limit or self.config.page_size,
            status=status,
            **_range_params(date_range),
        )
        return _records(data, "transactions")

    def get_products(
        self, store_id: str | None = None, page: int = 1, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Fetch one page of the product catalog."""
        data = self._get(
            "/products", store_id=store_id, page=page, limit=limit or self.config.page_size
        )
        return _records(data, "products")

    def _paginate(self, path: str, key: str, **params: Any) -> list[dict[str, Any]]:
        """Walk the pages of ``path`` until the server says there are no more.

        Reported ``pages`` or ``total`` counts decide when to stop; without
        them a page shorter than ``page_size`` is taken as the last one.
        """
        records: list[dict[str, Any]] = []
        limit = self.config.page_size
        for page in range(1, self.config.max_pages + 1):
            data = self._get(path, page=page, limit=limit, **params)
            batch = _records(data, key)
            records.extend(batch)
            pages, total = _page_meta(data)
            if pages is not None:
                last = page >= pages
            elif total is not None:
                last = len(records) >= total
            else:
                last = len(batch) < limit
            if last or not batch:
                break
        else:
            logger.warning(
                "Stopped fetching %s after %d pages (%d records); results may be incomplete",
                key,
                self.config.max_pages,
                len(records),
            )
        logger.info("Fetched %d %s", len(records), key)
        return records

    def get_all_transactions(
        self,
        store_id: str | None = None,
        date_range: DateRange | None = None,
        status: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every page of transactions, up to ``max_pages``."""
        return self._paginate(
            "/transactions",
            "transactions",
            store_id=store_id,
            status=status,
            **_range_params(date_range),
        )

    def get_all_products(self, store_id: str | None = None) -> list[dict[str, Any]]:
        """Fetch every page of the catalog, up to ``max_pages``."""
        return self._paginate("/products", "products", store_id=store_id)

    # ------------------------------------------------------------------ #
    # Goals
    # ------------------------------------------------------------------ #

    def get_goals(self, store_id: str | None = None, is_active: bool | None = True) -> list[dict[str, Any]]:
        params: dict[str, Any] = {"store_id": store_id}
        if is_active is not None:
            params["is_active"] = str(is_active).lower()
        return _records(self._request("GET", "/goals", params=params), "goals")

    def create_goal(
        self,
        goal_type: str,
        target_amount: float,
        store_id: str | None = None,
        goal_name: str | None = None,
    ) -> dict[str, Any]:
        """Create a daily or monthly goal and return the stored record.

        Raises:
            ValueError: If ``goal_type`` is not ``daily`` or ``monthly`` or the
                target is negative.
            ApiError: If the request fails.

        """
        if goal_type not in ("daily", "monthly"):
            raise ValueError(f"goal_type must be 'daily' or 'monthly', got {goal_type!r}")
        if target_amount < 0:
            raise ValueError(f"target_amount must not be negative, got {target_amount}")
        payload: dict[str, Any] = {"goal_type": goal_type, "target_amount": target_amount}
        if store_id:
            payload["store_id"] = store_id
        if goal_name:
            payload["goal_name"] = goal_name
        data = self._request("POST", "/goals", json=payload)
        logger.info("Created %s goal of %.2f", goal_type, target_amount)
        return dict(data) if isinstance(data, Mapping) else {}

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> PosApiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
