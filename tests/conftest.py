"""Shared fixtures: raw API records and a fixed clock."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from pos_analytics.models import Product

# Wednesday 15 January 2025, mid-afternoon
FIXED_NOW = datetime(2025, 1, 15, 14, 30)


def _raw_transaction(
    txn_id: str,
    created_at: str | None,
    total: Any,
    items: list[dict[str, Any]] | None = None,
    payment_method: str | None = "cash",
    payment_methods: list[dict[str, Any]] | None = None,
    order_source: str | None = None,
    status: str = "completed",
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "_id": txn_id,
        "created_at": created_at,
        "total_amount": total,
        "items": items or [],
        "payment_method": payment_method,
        "status": status,
    }
    if payment_methods is not None:
        record["payment_methods"] = payment_methods
    if order_source is not None:
        record["order_source"] = order_source
    return record


def _raw_item(product_id: str, name: str, quantity: float, unit_price: float) -> dict[str, Any]:
    return {
        "product_id": product_id,
        "product_name": name,
        "quantity": quantity,
        "unit_price": unit_price,
        "total_price": quantity * unit_price,
    }


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def raw_transaction() -> Callable[..., dict[str, Any]]:
    """Factory for raw transaction dicts in the API's shape."""
    return _raw_transaction


@pytest.fixture
def raw_item() -> Callable[..., dict[str, Any]]:
    """Factory for raw line-item dicts."""
    return _raw_item


@pytest.fixture
def status_products() -> list[Product]:
    """One out-of-stock, one low-stock and one in-stock product."""
    return [
        Product(id="p0", name="Empty", stock_quantity=0, min_stock_level=5),
        Product(id="p3", name="Low", stock_quantity=3, min_stock_level=5),
        Product(id="p20", name="Plenty", stock_quantity=20, min_stock_level=5),
    ]
