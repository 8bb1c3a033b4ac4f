"""Tests for product performance rankings."""

import pytest

from pos_analytics.config import AnalyticsConfig
from pos_analytics.models import Product, parse_transactions
from pos_analytics.products import (
    category_breakdown,
    performance_table,
    performance_table_from_api,
    product_performance,
    top_products,
)
from pos_analytics.products.performance import PERFORMANCE_COLUMNS, product_sales


@pytest.fixture
def catalog():
    return [
        Product(id="A", name="Alpha", category="Snacks", price=10, cost_price=6, stock_quantity=5),
        Product(id="B", name="Bravo", category="Drinks", price=4, stock_quantity=20),
        Product(id="C", name="Charlie", category="Snacks", price=8, stock_quantity=0),
    ]


@pytest.fixture
def transactions(raw_transaction, raw_item):
    return parse_transactions(
        [
            raw_transaction(
                "t1",
                "2025-01-14T10:00:00",
                20,
                items=[raw_item("A", "Alpha", 2, 10)],
            ),
            raw_transaction(
                "t2",
                "2025-01-15T09:00:00",
                25,
                items=[raw_item("A", "Alpha", 1, 10), raw_item("X", "", 3, 5)],
            ),
        ]
    )


class TestPerformanceTable:
    def test_scenario(self, catalog, transactions) -> None:
        table = performance_table(catalog, transactions).set_index("product_id")

        a = table.loc["A"]
        assert a["revenue"] == 30.0
        assert a["quantity_sold"] == 3.0
        assert a["transaction_count"] == 2
        assert a["profit_margin"] == pytest.approx(40.0)
        assert a["turnover_rate"] == pytest.approx(60.0)
        assert a["avg_price_per_sale"] == pytest.approx(10.0)

        b = table.loc["B"]
        assert b["revenue"] == 0.0
        assert b["profit_margin"] == 0.0
        assert b["avg_price_per_sale"] == 4.0

    def test_unknown_products_are_left_out(self, catalog, transactions) -> None:
        table = performance_table(catalog, transactions)
        assert list(table.columns) == PERFORMANCE_COLUMNS
        assert set(table["product_id"]) == {"A", "B", "C"}

    def test_margin_without_cost_price_uses_list_price(self, raw_transaction, raw_item) -> None:
        product = Product(id="B", name="Bravo", price=4, stock_quantity=20)
        txns = parse_transactions(
            [raw_transaction("t", "2025-01-15", 10, items=[raw_item("B", "Bravo", 2, 5)])]
        )

        (margin,) = performance_table([product], txns)["profit_margin"]

        assert margin == pytest.approx(20.0)

    def test_no_transactions(self, catalog) -> None:
        table = performance_table(catalog, [])
        assert table["revenue"].sum() == 0
        assert (table["transaction_count"] == 0).all()


def test_product_sales_empty_shape() -> None:
    sales = product_sales([])
    assert sales.empty
    assert sales.index.name == "product_id"


class TestRankings:
    def test_views(self, catalog, transactions) -> None:
        perf = product_performance(catalog, transactions)

        assert perf.best_performers.loc[0, "product_id"] == "A"
        # B has stock but no sales; C has neither
        assert list(perf.worst_performers["product_id"]) == ["B"]
        assert list(perf.most_profitable["product_id"]) == ["A"]
        assert perf.fastest_moving.loc[0, "product_id"] == "A"

    def test_top_n_caps_every_view(self, raw_transaction, raw_item) -> None:
        catalog = [Product(id=str(i), name=f"P{i}", price=1, stock_quantity=10) for i in range(8)]
        txns = parse_transactions(
            [
                raw_transaction(str(i), "2025-01-15", i + 1, items=[raw_item(str(i), f"P{i}", 1, i + 1)])
                for i in range(8)
            ]
        )

        perf = product_performance(catalog, txns, config=AnalyticsConfig(top_n=3))

        assert list(perf.best_performers["product_id"]) == ["7", "6", "5"]
        assert len(perf.fastest_moving) == 3
        assert len(perf.table) == 8


def test_top_products_include_unknown_lines(transactions) -> None:
    df = top_products(transactions)

    assert list(df["product_id"]) == ["A", "X"]
    assert df.loc[1, "product_name"] == "Unknown Product"
    assert df.loc[1, "revenue"] == 15.0


def test_top_products_empty() -> None:
    assert top_products([]).empty


def test_category_breakdown(catalog, transactions) -> None:
    entries = category_breakdown(transactions, catalog)

    assert [(e.key, e.amount) for e in entries] == [("Snacks", 30.0), ("Other", 15.0)]
    assert entries[0].percentage == pytest.approx(200 / 3)


def test_performance_table_from_api() -> None:
    payload = {
        "products": [
            {
                "productId": "A",
                "productName": "Alpha",
                "category": "Snacks",
                "revenue": "30",
                "quantitySold": 3,
                "profitMargin": 40,
                "transactionCount": 2,
            },
            {"product_id": "B", "product_name": "Bravo", "stock_quantity": 20},
            "junk",
        ]
    }

    table = performance_table_from_api(payload)

    assert list(table.columns) == PERFORMANCE_COLUMNS
    assert list(table["product_id"]) == ["A", "B"]
    assert table.loc[0, "revenue"] == 30.0
    assert table.loc[0, "profit_margin"] == 40.0
    assert table.loc[0, "transaction_count"] == 2
    assert table.loc[1, "category"] == "Other"
    assert table.loc[1, "stock_quantity"] == 20.0


def test_performance_table_from_api_list_payload() -> None:
    table = performance_table_from_api([{"_id": "Z", "name": "Zed"}])
    assert table.loc[0, "product_name"] == "Zed"
    assert table.loc[0, "revenue"] == 0.0
