"""Typed records for the data the POS API supplies.

Transactions, products and goals arrive as loosely-typed JSON objects. The
``from_dict`` constructors in this module are the only place that touches the
raw shape: every numeric read is guarded (missing/null/garbage reads as 0),
identifiers are normalized to strings, and the two payment shapes are turned
into a tagged union (``LegacyPayment | StructuredPayments``) so that
downstream code never has to probe dictionaries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from pos_analytics.exceptions import DataQualityError
from pos_analytics.utils import parse_timestamp, to_number

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"


def _record_id(data: Mapping[str, Any]) -> str:
    raw = data.get("_id", data.get("id"))
    if raw is None or raw == "":
        raise DataQualityError(f"Record has no identifier: {dict(data)!r:.200}")
    return str(raw)


def _reference_id(raw: Any) -> str:
    """Read a reference that may be a bare id or a populated sub-document."""
    if isinstance(raw, Mapping):
        raw = raw.get("_id", raw.get("id"))
    return "" if raw is None else str(raw)


def _mappings(raw: Any) -> list[Mapping[str, Any]]:
    """Entries of a list field; anything that is not a list reads as empty."""
    if not isinstance(raw, list):
        return []
    return [entry for entry in raw if isinstance(entry, Mapping)]


def _optional_text(raw: Any) -> str | None:
    return None if raw is None else str(raw)


def _flag(raw: Any, default: bool = True) -> bool:
    """Read a boolean that may arrive as a bool, a number or a string."""
    if raw is None:
        return default
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "1", "yes")
    return bool(raw)


# --------------------------------------------------------------------------- #
# Payments
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class PaymentSplit:
    """One ``{type, amount}`` entry of a split payment."""

    type: str
    amount: float


@dataclass(frozen=True)
class LegacyPayment:
    """Single payment-method tag; the whole transaction total belongs to it."""

    method: str | None


@dataclass(frozen=True)
class StructuredPayments:
    """Split payment whose per-method amounts should sum to the total."""

    splits: tuple[PaymentSplit, ...]


Payment = Union[LegacyPayment, StructuredPayments]


def parse_payment(data: Mapping[str, Any]) -> Payment:
    """Build the payment union from a raw transaction.

    A non-empty ``payment_methods`` list wins over the legacy
    ``payment_method`` field, matching how the POS writes new transactions.
    """
    splits = tuple(
        PaymentSplit(type=str(m.get("type") or ""), amount=to_number(m.get("amount")))
        for m in _mappings(data.get("payment_methods"))
    )
    if splits:
        return StructuredPayments(splits=splits)
    method = data.get("payment_method")
    return LegacyPayment(method=str(method) if method else None)


# --------------------------------------------------------------------------- #
# Records
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class LineItem:
    """A product line on a transaction. ``quantity`` may be fractional."""

    product_id: str
    product_name: str
    quantity: float
    unit_price: float
    total_price: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LineItem:
        quantity = to_number(data.get("quantity"))
        unit_price = to_number(data.get("unit_price"))
        total = data.get("total_price")
        product_ref = data.get("product_id")
        name = data.get("product_name")
        if not name and isinstance(product_ref, Mapping):
            name = product_ref.get("name")
        return cls(
            product_id=_reference_id(product_ref),
            product_name=str(name or ""),
            quantity=quantity,
            unit_price=unit_price,
            total_price=to_number(total) if total is not None else quantity * unit_price,
        )


@dataclass(frozen=True)
class Transaction:
    """A completed (or pending) sale as returned by ``GET /transactions``.

    Attributes:
        id: Transaction identifier.
        created_at: Naive timestamp on the store's wall clock, or None if missing.
        total_amount: Transaction total; negative for refunds.
        items: Line items.
        payment: ``LegacyPayment`` or ``StructuredPayments``.
        order_source: Raw order-source tag (normalized by the payments module).
        status: Raw status string.
    """

    id: str
    created_at: datetime | None
    total_amount: float
    items: tuple[LineItem, ...] = ()
    payment: Payment = field(default_factory=lambda: LegacyPayment(method=None))
    order_source: str | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], tz: str | None = None) -> Transaction:
        """Parse one raw transaction.

        Args:
            data: JSON object from the API.
            tz: Store time zone used to interpret aware timestamps.

        Raises:
            DataQualityError: If ``data`` is not a mapping or has no identifier.

        """
        if not isinstance(data, Mapping):
            raise DataQualityError(f"Transaction must be an object, got {type(data).__name__}")
        items = tuple(LineItem.from_dict(item) for item in _mappings(data.get("items")))
        return cls(
            id=_record_id(data),
            created_at=parse_timestamp(data.get("created_at"), tz=tz),
            total_amount=to_number(data.get("total_amount")),
            items=items,
            payment=parse_payment(data),
            order_source=_optional_text(data.get("order_source")),
            status=_optional_text(data.get("status")),
        )


@dataclass(frozen=True)
class Product:
    """A catalog product with its current stock position."""

    id: str
    name: str
    category: str = DEFAULT_CATEGORY
    price: float = 0.0
    stock_quantity: float = 0.0
    min_stock_level: float = 0.0
    cost_price: float | None = None
    updated_at: datetime | None = None

    @property
    def unit_cost(self) -> float:
        """Cost price when recorded, otherwise the list price."""
        return self.cost_price if self.cost_price is not None else self.price

    @property
    def stock_value(self) -> float:
        return self.price * self.stock_quantity

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], tz: str | None = None) -> Product:
        if not isinstance(data, Mapping):
            raise DataQualityError(f"Product must be an object, got {type(data).__name__}")
        cost = data.get("cost_price")
        category = str(data.get("category") or "").strip()
        return cls(
            id=_record_id(data),
            name=str(data.get("name") or ""),
            category=category or DEFAULT_CATEGORY,
            price=to_number(data.get("price")),
            stock_quantity=to_number(data.get("stock_quantity")),
            min_stock_level=to_number(data.get("min_stock_level")),
            cost_price=to_number(cost) if cost is not None else None,
            updated_at=parse_timestamp(data.get("updated_at") or data.get("created_at"), tz=tz),
        )


@dataclass(frozen=True)
class Goal:
    """A daily or monthly sales target."""

    id: str
    goal_type: str
    target_amount: float
    is_active: bool = True
    name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Goal:
        if not isinstance(data, Mapping):
            raise DataQualityError(f"Goal must be an object, got {type(data).__name__}")
        return cls(
            id=str(data.get("_id", data.get("id")) or ""),
            goal_type=str(data.get("goal_type") or "").lower(),
            target_amount=to_number(data.get("target_amount")),
            is_active=_flag(data.get("is_active")),
            name=_optional_text(data.get("goal_name")),
        )


# --------------------------------------------------------------------------- #
# Bulk parsing
# --------------------------------------------------------------------------- #


def parse_transactions(
    records: Iterable[Mapping[str, Any]] | None, tz: str | None = None
) -> list[Transaction]:
    """Parse raw transactions, skipping (and logging) unusable records."""
    parsed = []
    for record in records or []:
        try:
            parsed.append(Transaction.from_dict(record, tz=tz))
        except DataQualityError as e:
            logger.warning("Skipping transaction: %s", e)
    return parsed


def parse_products(
    records: Iterable[Mapping[str, Any]] | None, tz: str | None = None
) -> list[Product]:
    """Parse raw products, skipping (and logging) unusable records."""
    parsed = []
    for record in records or []:
        try:
            parsed.append(Product.from_dict(record, tz=tz))
        except DataQualityError as e:
            logger.warning("Skipping product: %s", e)
    return parsed


def parse_goals(records: Iterable[Mapping[str, Any]] | None) -> list[Goal]:
    parsed = []
    for record in records or []:
        try:
            parsed.append(Goal.from_dict(record))
        except DataQualityError as e:
            logger.warning("Skipping goal: %s", e)
    return parsed
