"""Unified configuration for POS Analytics.

This module provides the two configuration classes used across the package:
``AnalyticsConfig`` for the aggregation thresholds and ``ApiConfig`` for the
REST API client.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from pos_analytics.exceptions import ConfigError

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_WORKERS = 6
DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 50


@dataclass(frozen=True)
class AnalyticsConfig:
    """Thresholds and limits for the analytics aggregator.

    Attributes:
        default_reorder_quantity: Reorder quantity suggested for an out-of-stock
            product whose minimum stock level is zero or unset.
        top_n: Number of rows kept in the ranked product views.
        chart_max_points: Maximum number of points in a sampled daily series.
        aging_new_days: Products updated less than this many days ago are "new".
        aging_old_days: Products updated more than this many days ago are "old".
        high_priority_ratio: stock/min ratio below which a reorder is "high".
        medium_priority_ratio: stock/min ratio below which a reorder is "medium".
        recent_transactions: Number of transactions listed in a report.
    """

    default_reorder_quantity: float = 10
    top_n: int = 10
    chart_max_points: int = 20
    aging_new_days: int = 30
    aging_old_days: int = 90
    high_priority_ratio: float = 0.25
    medium_priority_ratio: float = 0.5
    recent_transactions: int = 10

    def __post_init__(self) -> None:
        if self.top_n < 1:
            raise ConfigError(f"top_n must be positive, got {self.top_n}")
        if self.chart_max_points < 1:
            raise ConfigError(f"chart_max_points must be positive, got {self.chart_max_points}")
        if self.aging_new_days > self.aging_old_days:
            raise ConfigError(
                f"aging_new_days ({self.aging_new_days}) must not exceed "
                f"aging_old_days ({self.aging_old_days})"
            )
        if not 0 < self.high_priority_ratio <= self.medium_priority_ratio:
            raise ConfigError(
                "Priority ratios must satisfy 0 < high_priority_ratio <= medium_priority_ratio"
            )


@dataclass(frozen=True)
class ApiConfig:
    """Connection settings for the POS REST API.

    Attributes:
        base_url: API root, e.g. ``http://localhost:3001/api/v1``.
        token: Optional bearer token sent in the Authorization header.
        timeout: Per-request timeout in seconds.
        max_workers: Thread pool size for concurrent fetches.
        page_size: Page size used when paginating transactions and products.
        max_pages: Hard stop for pagination loops.
    """

    base_url: str
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES

    @classmethod
    def from_env(cls, base_url: str | None = None, token: str | None = None) -> ApiConfig:
        """Create ApiConfig from environment variables.

        Explicit arguments win over the environment.

        Environment:
            POS_API_BASE: API root URL (required unless ``base_url`` is given).
            POS_API_TOKEN: Bearer token (optional).
            POS_API_TIMEOUT: Timeout in seconds (optional, default 10).

        Returns:
            ApiConfig instance.

        Raises:
            ConfigError: If no base URL is available or the timeout is not a number.

        Examples:
            >>> cfg = ApiConfig.from_env(base_url="http://localhost:3001/api/v1/")
            >>> cfg.base_url
            'http://localhost:3001/api/v1'

        """
        base = base_url or os.environ.get("POS_API_BASE")
        if not base:
            raise ConfigError("POS API base URL missing: pass base_url or set POS_API_BASE")
        # Values copied from .env files often keep their quotes
        base = base.strip().strip('"').strip("'")

        raw_timeout = os.environ.get("POS_API_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError as e:
            raise ConfigError(f"POS_API_TIMEOUT must be a number, got {raw_timeout!r}") from e

        if token is None:
            token = os.environ.get("POS_API_TOKEN") or None

        return cls(base_url=base.rstrip("/"), token=token, timeout=timeout)
