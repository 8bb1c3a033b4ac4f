"""Tests for stock status, reorder recommendations and movement views."""

from datetime import datetime

import pandas as pd
import pytest

from pos_analytics.config import AnalyticsConfig
from pos_analytics.inventory import (
    IN_STOCK,
    LOW_STOCK,
    OUT_OF_STOCK,
    InventorySummary,
    aging,
    category_rollups,
    fast_moving,
    inventory_summary,
    reorder_priority,
    reorder_quantity,
    reorder_recommendations,
    sales_quantities,
    slow_moving,
    status_counts,
    stock_status,
)
from pos_analytics.models import Product, parse_transactions
from pos_analytics.periods import DateRange


class TestStockStatus:
    def test_three_products_one_per_status(self, status_products) -> None:
        assert [stock_status(p) for p in status_products] == [OUT_OF_STOCK, LOW_STOCK, IN_STOCK]
        assert status_counts(status_products) == {"in_stock": 1, "low_stock": 1, "out_of_stock": 1}

    @pytest.mark.parametrize(
        "stock, minimum, expected",
        [
            (0, 0, OUT_OF_STOCK),
            (-2, 5, OUT_OF_STOCK),
            (5, 5, LOW_STOCK),
            (1, 5, LOW_STOCK),
            (6, 5, IN_STOCK),
            (1, 0, IN_STOCK),
        ],
    )
    def test_boundaries(self, stock, minimum, expected) -> None:
        product = Product(id="p", name="P", stock_quantity=stock, min_stock_level=minimum)
        assert stock_status(product) == expected

    def test_counts_partition_the_catalog(self) -> None:
        products = [
            Product(id=str(i), name=str(i), stock_quantity=i % 7, min_stock_level=3)
            for i in range(25)
        ]
        counts = status_counts(products)
        assert sum(counts.values()) == len(products)

    def test_empty_catalog_keeps_every_key(self) -> None:
        assert status_counts([]) == {"in_stock": 0, "low_stock": 0, "out_of_stock": 0}


class TestReorder:
    def test_low_stock_quantity(self) -> None:
        product = Product(id="p", name="P", stock_quantity=3, min_stock_level=10)
        assert reorder_quantity(product) == 17.0
        assert reorder_priority(product) == "medium"

    def test_out_of_stock_quantity(self) -> None:
        assert reorder_quantity(Product(id="p", name="P", stock_quantity=0, min_stock_level=8)) == 8.0

    def test_out_of_stock_without_minimum_uses_default(self) -> None:
        product = Product(id="p", name="P", stock_quantity=0, min_stock_level=0)
        config = AnalyticsConfig(default_reorder_quantity=12)
        assert reorder_quantity(product, config) == 12.0

    @pytest.mark.parametrize(
        "stock, expected",
        [(0, "critical"), (2, "high"), (4, "medium"), (6, "low"), (10, "low")],
    )
    def test_priority_tiers(self, stock, expected) -> None:
        product = Product(id="p", name="P", stock_quantity=stock, min_stock_level=10)
        assert reorder_priority(product) == expected

    def test_recommendations_sorted_by_priority_then_cost(self) -> None:
        products = [
            Product(id="cheap-low", name="A", price=1, stock_quantity=8, min_stock_level=10),
            Product(id="dear-low", name="B", price=50, stock_quantity=7, min_stock_level=10),
            Product(id="empty", name="C", price=2, stock_quantity=0, min_stock_level=10),
            Product(id="fine", name="D", price=9, stock_quantity=40, min_stock_level=10),
            Product(id="high", name="E", price=3, stock_quantity=1, min_stock_level=10),
        ]

        recs = reorder_recommendations(products)

        assert [r.product.id for r in recs] == ["empty", "high", "dear-low", "cheap-low"]
        assert [r.priority for r in recs] == ["critical", "high", "low", "low"]
        dear = recs[2]
        assert dear.recommended_quantity == 13.0
        assert dear.estimated_cost == 650.0

    def test_estimated_cost_prefers_cost_price(self) -> None:
        product = Product(
            id="p", name="P", price=10, cost_price=6, stock_quantity=3, min_stock_level=10
        )
        (rec,) = reorder_recommendations([product])
        assert rec.estimated_cost == pytest.approx(17 * 6)

    def test_nothing_to_reorder(self) -> None:
        assert reorder_recommendations([Product(id="p", name="P", stock_quantity=50)]) == []


class TestCategoryRollups:
    def test_rollup_values_and_order(self) -> None:
        products = [
            Product(id="1", name="Tea", category="Drinks", price=2, stock_quantity=10, min_stock_level=2),
            Product(id="2", name="Juice", category="Drinks", price=3, stock_quantity=0, min_stock_level=2),
            Product(id="3", name="Rice", category="Food", price=10, stock_quantity=5, min_stock_level=5),
            Product(id="4", name="Pen", category="Office", price=1, stock_quantity=1),
        ]

        df = category_rollups(products)

        assert list(df["category"]) == ["Food", "Drinks", "Office"]
        food = df.iloc[0]
        assert food["total_stock_value"] == 50.0
        assert food["low_stock_count"] == 1
        drinks = df.set_index("category").loc["Drinks"]
        assert drinks["product_count"] == 2
        assert drinks["total_quantity"] == 10.0
        assert drinks["in_stock_count"] == 1
        assert drinks["out_of_stock_count"] == 1

    def test_empty(self) -> None:
        df = category_rollups([])
        assert df.empty
        assert "total_stock_value" in df.columns


@pytest.fixture
def catalog():
    return [
        Product(id="a", name="Alpha", price=10, stock_quantity=10, min_stock_level=2),
        Product(id="b", name="Bravo", price=5, stock_quantity=0, min_stock_level=2),
        Product(id="c", name="Charlie", price=20, stock_quantity=4, min_stock_level=1),
        Product(id="d", name="Delta", price=1, stock_quantity=100, min_stock_level=1),
    ]


@pytest.fixture
def sold(raw_transaction, raw_item):
    return parse_transactions(
        [
            raw_transaction(
                "t1",
                "2025-01-14T10:00:00",
                80,
                items=[raw_item("a", "Alpha", 5, 10), raw_item("b", "Bravo", 6, 5)],
            ),
            raw_transaction("t2", "2025-01-15T11:00:00", 10, items=[raw_item("a", "Alpha", 1, 10)]),
            raw_transaction("old", "2024-06-01T11:00:00", 100, items=[raw_item("c", "Charlie", 5, 20)]),
            raw_transaction("stray", "2025-01-15T12:00:00", 4, items=[raw_item("zz", "Ghost", 2, 2)]),
        ]
    )


JANUARY = DateRange(datetime(2025, 1, 1), datetime(2025, 1, 31, 23, 59, 59, 999000))


def test_sales_quantities(sold) -> None:
    assert sales_quantities(sold, JANUARY) == {"a": 6.0, "b": 6.0, "zz": 2.0}
    assert sales_quantities(sold)["c"] == 5.0


def test_fast_moving(catalog, sold) -> None:
    df = fast_moving(catalog, sales_quantities(sold, JANUARY))

    assert list(df["product_id"]) == ["a", "b"]
    assert df.loc[0, "turnover_rate"] == pytest.approx(60.0)
    # no stock left: turnover reads as 0 rather than dividing by zero
    assert df.loc[1, "turnover_rate"] == 0.0


def test_slow_moving(catalog, sold) -> None:
    df = slow_moving(catalog, sales_quantities(sold, JANUARY))

    # Bravo is out of stock, so only Delta and Charlie qualify
    assert list(df["product_id"]) == ["d", "c"]
    assert list(df["stock_value"]) == [100.0, 80.0]


def test_movement_limit(catalog, sold) -> None:
    assert len(slow_moving(catalog, sales_quantities(sold, JANUARY), limit=1)) == 1


class TestAging:
    @pytest.mark.parametrize(
        "updated_at, bucket",
        [
            (datetime(2025, 1, 15, 9, 0), "new"),
            (datetime(2024, 12, 17, 14, 30), "new"),  # 29 days
            (datetime(2024, 12, 16, 14, 30), "medium"),  # 30 days
            (datetime(2024, 10, 17, 14, 30), "medium"),  # 90 days
            (datetime(2024, 10, 16, 14, 30), "old"),  # 91 days
            (None, "unknown"),
        ],
    )
    def test_buckets(self, now, updated_at, bucket) -> None:
        product = Product(id="p", name="P", updated_at=updated_at)
        df = aging([product], now)
        assert df.loc[0, "age_bucket"] == bucket

    def test_oldest_first_unknown_last(self, now) -> None:
        products = [
            Product(id="none", name="N"),
            Product(id="new", name="A", updated_at=datetime(2025, 1, 10)),
            Product(id="old", name="B", updated_at=datetime(2024, 1, 10)),
        ]

        df = aging(products, now)

        assert list(df["product_id"]) == ["old", "new", "none"]
        assert df.loc[0, "days_since_update"] == 371
        assert pd.isna(df.loc[2, "days_since_update"])


class TestInventorySummary:
    def test_computed(self, catalog, sold) -> None:
        summary = inventory_summary(catalog, sales_quantities(sold, JANUARY))

        assert summary == InventorySummary(
            total_products=4,
            total_inventory_value=280.0,
            low_stock_count=0,
            out_of_stock_count=1,
            fast_moving_count=2,
            slow_moving_count=2,
        )

    def test_from_api(self) -> None:
        summary = InventorySummary.from_api(
            {"total_products": "12", "total_inventory_value": 340.5, "low_stock_count": 3}
        )
        assert summary.total_products == 12
        assert summary.total_inventory_value == 340.5
        assert summary.low_stock_count == 3
        assert summary.slow_moving_count == 0
