"""Payments domain module.

Normalizes the two payment shapes (legacy tag / structured splits) and the
order-source tag, and builds amount/percentage breakdowns:

- ``payment_breakdown``: amounts per canonical method (cash, pos, transfer,
  crypto, or the raw tag when unmapped)
- ``order_source_breakdown``: amounts per channel (online / in_store)

Example:
    >>> from pos_analytics.payments import payment_breakdown
    >>> entries = payment_breakdown(transactions, date_range)
    >>> {e.key: e.amount for e in entries}
"""

from pos_analytics.payments.normalize import (
    PAYMENT_METHOD_ALIASES,
    BreakdownEntry,
    breakdown_as_dict,
    normalize_order_source,
    normalize_payment_method,
    order_source_breakdown,
    payment_breakdown,
    payment_splits,
)

__all__ = [
    "PAYMENT_METHOD_ALIASES",
    "BreakdownEntry",
    "breakdown_as_dict",
    "normalize_order_source",
    "normalize_payment_method",
    "order_source_breakdown",
    "payment_breakdown",
    "payment_splits",
]
