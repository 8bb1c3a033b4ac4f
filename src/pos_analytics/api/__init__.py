"""POS REST API access.

Example:
    >>> from pos_analytics.api import PosApiClient, fetch_report_inputs
    >>> from pos_analytics.config import ApiConfig
    >>>
    >>> with PosApiClient(ApiConfig.from_env()) as client:
    ...     inputs = fetch_report_inputs(client, "30d", store_id="store-1")
    >>> inputs.failures
    []
"""

from pos_analytics.api.client import PosApiClient, make_session
from pos_analytics.api.fetch import fetch_report_inputs, history_range

__all__ = ["PosApiClient", "fetch_report_inputs", "history_range", "make_session"]
