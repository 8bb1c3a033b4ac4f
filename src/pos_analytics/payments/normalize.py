"""Payment-method and order-source normalization.

Raw payment tags come from two generations of the POS: a single
``payment_method`` string on older transactions and a ``payment_methods``
list of ``{type, amount}`` splits on newer ones. Both are reduced here to a
list of ``(method_key, amount)`` splits, then summed into breakdowns.

Method keys go through a fixed alias table; any tag not in the table passes
through verbatim (lower-cased), so new tags show up in reports instead of
disappearing.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from pos_analytics.models import LegacyPayment, StructuredPayments, Transaction
from pos_analytics.periods import DateRange
from pos_analytics.sales.frames import filter_transactions
from pos_analytics.utils import safe_percentage

logger = logging.getLogger(__name__)

PAYMENT_METHOD_ALIASES = {
    "pos_isbank_transfer": "pos",
    "card": "pos",
    "naira_transfer": "transfer",
    "crypto_payment": "crypto",
}

# Legacy transactions saved without a tag
UNKNOWN_METHOD = "unknown"

ONLINE = "online"
IN_STORE = "in_store"
ORDER_SOURCE_ALIASES = {
    "online": ONLINE,
    "in_store": IN_STORE,
    "in-store": IN_STORE,
}


def normalize_payment_method(method: str | None) -> str:
    """Map a raw payment tag to its canonical key.

    Examples:
        >>> normalize_payment_method("pos_isbank_transfer")
        'pos'
        >>> normalize_payment_method("Cash")
        'cash'
        >>> normalize_payment_method("Gift_Voucher")
        'gift_voucher'

    """
    key = (method or "").strip().lower()
    if not key:
        return UNKNOWN_METHOD
    return PAYMENT_METHOD_ALIASES.get(key, key)


def normalize_order_source(source: str | None) -> str:
    """Map a raw order-source tag to ``online`` / ``in_store``.

    Absent tags count as in-store sales. Unknown tags pass through
    lower-cased.
    """
    key = (source or "").strip().lower()
    if not key:
        return IN_STORE
    return ORDER_SOURCE_ALIASES.get(key, key)


def payment_splits(transaction: Transaction) -> list[tuple[str, float]]:
    """Normalized ``(method_key, amount)`` pairs for one transaction.

    Structured payments yield one pair per split, using the recorded split
    amounts. A legacy tag yields a single pair carrying the whole total.
    """
    payment = transaction.payment
    if isinstance(payment, StructuredPayments):
        splits = [(normalize_payment_method(s.type), s.amount) for s in payment.splits]
        split_sum = sum(amount for _, amount in splits)
        if not math.isclose(split_sum, transaction.total_amount, abs_tol=0.005):
            logger.warning(
                "Transaction %s: payment splits sum to %.2f but total is %.2f",
                transaction.id,
                split_sum,
                transaction.total_amount,
            )
        return splits
    if isinstance(payment, LegacyPayment):
        return [(normalize_payment_method(payment.method), transaction.total_amount)]
    raise TypeError(f"Unsupported payment shape: {type(payment).__name__}")


# --------------------------------------------------------------------------- #
# Breakdowns
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class BreakdownEntry:
    """One row of a breakdown: amount and its share of the total."""

    key: str
    amount: float
    percentage: float


def _entries(amounts: dict[str, float]) -> list[BreakdownEntry]:
    total = sum(amounts.values())
    entries = [
        BreakdownEntry(key=key, amount=amount, percentage=safe_percentage(amount, total))
        for key, amount in amounts.items()
    ]
    return sorted(entries, key=lambda e: e.amount, reverse=True)


def payment_breakdown(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> list[BreakdownEntry]:
    """Sum payment amounts per canonical method key.

    Args:
        transactions: Parsed transactions.
        date_range: Optional range; transactions outside it are ignored.

    Returns:
        Entries sorted by amount, descending. Percentages are taken against
        the sum of all entries and are 0 when that sum is 0.

    Examples:
        >>> from pos_analytics.models import Transaction
        >>> txn = Transaction.from_dict({
        ...     "_id": "t1",
        ...     "total_amount": 100,
        ...     "payment_methods": [
        ...         {"type": "cash", "amount": 60},
        ...         {"type": "pos_isbank_transfer", "amount": 40},
        ...     ],
        ... })
        >>> [(e.key, e.amount, e.percentage) for e in payment_breakdown([txn])]
        [('cash', 60.0, 60.0), ('pos', 40.0, 40.0)]

    """
    amounts: dict[str, float] = {}
    for txn in filter_transactions(transactions, date_range):
        for key, amount in payment_splits(txn):
            amounts[key] = amounts.get(key, 0.0) + amount
    return _entries(amounts)


def order_source_breakdown(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> list[BreakdownEntry]:
    """Sum transaction totals per order source.

    ``online`` and ``in_store`` are always present (possibly at zero);
    unknown sources are added as extra entries.
    """
    amounts: dict[str, float] = {ONLINE: 0.0, IN_STORE: 0.0}
    for txn in filter_transactions(transactions, date_range):
        key = normalize_order_source(txn.order_source)
        amounts[key] = amounts.get(key, 0.0) + txn.total_amount
    return _entries(amounts)


def breakdown_as_dict(entries: Iterable[BreakdownEntry]) -> dict[str, dict[str, float]]:
    """``{key: {"amount": ..., "percentage": ...}}`` view of a breakdown."""
    return {e.key: {"amount": e.amount, "percentage": e.percentage} for e in entries}
