"""Flatten transaction records into pandas DataFrames.

Two grains are produced:

- ``transactions_frame``: one row per transaction (``id``, ``created_at``,
  ``total_amount``, ``order_source``, ``status``).
- ``line_items_frame``: one row per line item (``transaction_id``,
  ``created_at``, ``product_id``, ``product_name``, ``quantity``,
  ``unit_price``, ``total_price``).

Both return correctly-typed empty frames for empty input so downstream
groupbys never need special cases.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import pandas as pd

from pos_analytics.models import Transaction
from pos_analytics.periods import DateRange

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = ["id", "created_at", "total_amount", "order_source", "status"]
LINE_ITEM_COLUMNS = [
    "transaction_id",
    "created_at",
    "product_id",
    "product_name",
    "quantity",
    "unit_price",
    "total_price",
]


def _empty_transactions() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "id": pd.Series(dtype=object),
            "created_at": pd.Series(dtype="datetime64[ns]"),
            "total_amount": pd.Series(dtype=float),
            "order_source": pd.Series(dtype=object),
            "status": pd.Series(dtype=object),
        }
    )


def _empty_line_items() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "transaction_id": pd.Series(dtype=object),
            "created_at": pd.Series(dtype="datetime64[ns]"),
            "product_id": pd.Series(dtype=object),
            "product_name": pd.Series(dtype=object),
            "quantity": pd.Series(dtype=float),
            "unit_price": pd.Series(dtype=float),
            "total_price": pd.Series(dtype=float),
        }
    )


def filter_transactions(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> list[Transaction]:
    """Keep the transactions whose timestamp falls inside ``date_range``.

    With no range, transactions without a timestamp are kept; with a range
    they can never match and are dropped.
    """
    if date_range is None:
        return list(transactions)
    return [t for t in transactions if date_range.contains(t.created_at)]


def transactions_frame(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> pd.DataFrame:
    """One row per transaction, optionally restricted to ``date_range``."""
    rows = [
        {
            "id": t.id,
            "created_at": t.created_at,
            "total_amount": t.total_amount,
            "order_source": t.order_source,
            "status": t.status,
        }
        for t in filter_transactions(transactions, date_range)
    ]
    if not rows:
        return _empty_transactions()
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"])
    df["total_amount"] = df["total_amount"].astype(float)
    return df


def line_items_frame(
    transactions: Iterable[Transaction], date_range: DateRange | None = None
) -> pd.DataFrame:
    """One row per line item, optionally restricted to ``date_range``."""
    rows = [
        {
            "transaction_id": t.id,
            "created_at": t.created_at,
            "product_id": item.product_id,
            "product_name": item.product_name,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total_price": item.total_price,
        }
        for t in filter_transactions(transactions, date_range)
        for item in t.items
    ]
    if not rows:
        return _empty_line_items()
    df = pd.DataFrame(rows, columns=LINE_ITEM_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"])
    logger.debug("Flattened %d line items", len(df))
    return df
