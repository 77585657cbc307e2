"""Tests for the dashboard aggregator against a seeded SQLite database."""

import asyncio
import unittest
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from inventory_fixtures import TempDatabase, clear_tables, month_start, seed_inventory
from sqlalchemy.orm import Session

from inventory_dashboard.analytics import DashboardSnapshot, get_dashboard
from inventory_dashboard.db.models import Category, Customer, Product, SalesHeader, SalesItem, Warehouse
from inventory_dashboard.errors import AggregationError, QueryError

_OBJECT_SECTIONS = ("inventory", "sales", "purchases", "alerts")
_ARRAY_SECTIONS = ("recentSales", "topProducts", "categories", "warehouses")


def _dashboard() -> DashboardSnapshot:
    return asyncio.run(get_dashboard())


class TestDashboardSeeded(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.db = TempDatabase()
        engine = cls.db.start()
        seed_inventory(engine)
        cls.snapshot = _dashboard()
        cls.payload = cls.snapshot.to_payload()

    @classmethod
    def tearDownClass(cls):
        cls.db.stop()

    def test_all_sections_present_and_typed(self):
        self.assertEqual(set(self.payload), set(_OBJECT_SECTIONS) | set(_ARRAY_SECTIONS))
        for key in _OBJECT_SECTIONS:
            self.assertIsInstance(self.payload[key], dict, key)
        for key in _ARRAY_SECTIONS:
            self.assertIsInstance(self.payload[key], list, key)

    def test_inventory_overview(self):
        inv = self.payload["inventory"]
        self.assertEqual(inv["TotalProducts"], 6)
        self.assertEqual(inv["TotalUnits"], 143)
        self.assertEqual(Decimal(str(inv["TotalInventoryValue"])), Decimal("12700"))
        self.assertEqual(inv["LowStockProducts"], 3)
        self.assertEqual(inv["OutOfStockProducts"], 1)
        self.assertAlmostEqual(float(inv["AverageStock"]), 143 / 6, places=3)

    def test_low_stock_includes_out_of_stock(self):
        inv = self.payload["inventory"]
        self.assertGreaterEqual(inv["LowStockProducts"], inv["OutOfStockProducts"])

    def test_sales_overview_this_month_completed_only(self):
        sales = self.payload["sales"]
        self.assertEqual(sales["TotalSales"], 7)
        self.assertEqual(sales["TotalUnitsSold"], 22)
        self.assertEqual(Decimal(str(sales["TotalRevenue"])), Decimal("2400"))
        # Mean over the 8 line items, not over the 7 sales.
        self.assertEqual(Decimal(str(sales["AverageOrderValue"])), Decimal("300"))

    def test_purchases_overview(self):
        purchases = self.payload["purchases"]
        self.assertEqual(purchases["TotalPurchases"], 1)
        self.assertEqual(purchases["TotalUnitsReceived"], 60)
        self.assertEqual(Decimal(str(purchases["TotalPurchaseCost"])), Decimal("5100"))

    def test_alerts_overview_counts_unresolved(self):
        self.assertEqual(
            self.payload["alerts"],
            {"TotalUnresolvedAlerts": 3, "OutOfStockAlerts": 1, "LowStockAlerts": 2},
        )

    def test_recent_sales_newest_first_and_limited(self):
        recent = self.payload["recentSales"]
        self.assertEqual(len(recent), 5)
        self.assertEqual([r["InvoiceNumber"] for r in recent], ["INV-007", "INV-006", "INV-005", "INV-004", "INV-003"])
        dates = [r["SaleDate"] for r in recent]
        self.assertEqual(dates, sorted(dates, reverse=True))
        newest = recent[0]
        self.assertEqual(newest["CustomerName"], "Acme Corp")
        self.assertEqual(newest["WarehouseName"], "Main")
        self.assertEqual(newest["ItemCount"], 2)
        self.assertEqual(Decimal(str(newest["TotalAmount"])), Decimal("820"))

    def test_top_products_by_revenue(self):
        top = self.payload["topProducts"]
        self.assertEqual([p["ProductName"] for p in top], ["Laptop", "Monitor", "Desk", "Chair", "Cable"])
        revenues = [Decimal(str(p["Revenue"])) for p in top]
        self.assertEqual(revenues, sorted(revenues, reverse=True))
        self.assertEqual(top[0]["UnitsSold"], 2)
        self.assertEqual(revenues[0], Decimal("1600"))

    def test_category_distribution_includes_empty_category(self):
        categories = self.payload["categories"]
        self.assertEqual([c["CategoryName"] for c in categories], ["Electronics", "Furniture", "Garden"])
        electronics, furniture, garden = categories
        self.assertEqual(electronics["ProductCount"], 4)
        self.assertEqual(electronics["TotalStock"], 132)
        self.assertEqual(Decimal(str(electronics["InventoryValue"])), Decimal("12000"))
        # The inactive Lamp is not counted.
        self.assertEqual(furniture["ProductCount"], 2)
        self.assertEqual(garden["ProductCount"], 0)
        self.assertEqual(garden["TotalStock"], 0)

    def test_warehouse_summary_active_only(self):
        warehouses = {w["WarehouseName"]: w for w in self.payload["warehouses"]}
        self.assertEqual(set(warehouses), {"Main", "Overflow"})
        self.assertEqual(warehouses["Main"]["TotalStock"], 30)
        self.assertEqual(warehouses["Main"]["ProductCount"], 3)
        self.assertEqual(warehouses["Overflow"]["TotalStock"], 113)

    def test_repeated_calls_return_equal_data(self):
        self.assertEqual(_dashboard().to_payload(), self.payload)

    def test_snapshot_is_frozen(self):
        with self.assertRaises(Exception):
            self.snapshot.inventory = {}


class TestDashboardScenarios(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.db = TempDatabase()
        cls.engine = cls.db.start()

    @classmethod
    def tearDownClass(cls):
        cls.db.stop()

    def setUp(self):
        clear_tables(self.engine)

    def test_empty_database(self):
        payload = _dashboard().to_payload()
        self.assertEqual(
            payload["inventory"],
            {
                "TotalProducts": 0,
                "TotalUnits": None,
                "TotalInventoryValue": None,
                "LowStockProducts": 0,
                "OutOfStockProducts": 0,
                "AverageStock": None,
            },
        )
        self.assertEqual(
            payload["sales"],
            {"TotalSales": 0, "TotalUnitsSold": 0, "TotalRevenue": 0, "AverageOrderValue": 0},
        )
        self.assertEqual(payload["purchases"], {"TotalPurchases": 0, "TotalUnitsReceived": 0, "TotalPurchaseCost": 0})
        self.assertEqual(payload["alerts"], {"TotalUnresolvedAlerts": 0, "OutOfStockAlerts": 0, "LowStockAlerts": 0})
        for key in _ARRAY_SECTIONS:
            self.assertEqual(payload[key], [], key)

    def test_single_out_of_stock_product(self):
        with Session(self.engine) as session:
            category = Category(category_name="Tools")
            session.add(category)
            session.flush()
            session.add(
                Product(
                    product_code="HAM-001",
                    product_name="Hammer",
                    category_id=category.category_id,
                    cost_price=Decimal("10"),
                    selling_price=Decimal("15"),
                    current_stock=0,
                    reorder_level=5,
                )
            )
            session.commit()
        inventory = _dashboard().inventory
        self.assertEqual(inventory["TotalProducts"], 1)
        self.assertEqual(inventory["LowStockProducts"], 1)
        self.assertEqual(inventory["OutOfStockProducts"], 1)
        self.assertEqual(Decimal(str(inventory["TotalInventoryValue"])), Decimal("0"))

    def _two_sales_and_one_pending(self):
        start = month_start()
        with Session(self.engine) as session:
            category = Category(category_name="Tools")
            warehouse = Warehouse(warehouse_name="Main")
            customer = Customer(customer_name="Acme Corp")
            session.add_all([category, warehouse, customer])
            session.flush()
            product = Product(
                product_code="HAM-001",
                product_name="Hammer",
                category_id=category.category_id,
                cost_price=Decimal("10"),
                selling_price=Decimal("25"),
                current_stock=50,
                reorder_level=5,
            )
            session.add(product)
            session.flush()
            sales = [
                ("A", "COMPLETED", start + timedelta(minutes=1), [(2, "25", "50")]),
                ("B", "COMPLETED", start + timedelta(minutes=2), [(3, "10", "30"), (1, "20", "20")]),
                ("P", "PENDING", start + timedelta(minutes=3), [(40, "25", "1000")]),
            ]
            for invoice, status, when, lines in sales:
                header = SalesHeader(
                    customer_id=customer.customer_id,
                    warehouse_id=warehouse.warehouse_id,
                    sale_date=when,
                    invoice_number=invoice,
                    status=status,
                )
                session.add(header)
                session.flush()
                for qty, price, total in lines:
                    session.add(
                        SalesItem(
                            sale_id=header.sale_id,
                            product_id=product.product_id,
                            quantity=qty,
                            unit_price=Decimal(price),
                            line_total=Decimal(total),
                        )
                    )
            session.commit()

    def test_two_completed_sales_this_month(self):
        self._two_sales_and_one_pending()
        sales = _dashboard().sales
        self.assertEqual(sales["TotalSales"], 2)
        self.assertEqual(sales["TotalUnitsSold"], 6)
        self.assertEqual(Decimal(str(sales["TotalRevenue"])), Decimal("100"))
        self.assertAlmostEqual(float(sales["AverageOrderValue"]), 100 / 3, places=2)

    def test_pending_sale_excluded_everywhere(self):
        self._two_sales_and_one_pending()
        snapshot = _dashboard()
        self.assertNotIn("P", [r["InvoiceNumber"] for r in snapshot.recent_sales])
        self.assertEqual([r["InvoiceNumber"] for r in snapshot.recent_sales], ["B", "A"])
        self.assertEqual(len(snapshot.top_products), 1)
        self.assertEqual(snapshot.top_products[0]["UnitsSold"], 6)


class TestDashboardFailure(unittest.TestCase):
    def test_any_query_failure_fails_the_whole_snapshot(self):
        calls = []

        async def flaky(statement, params=None):
            calls.append(statement)
            if len(calls) == 3:
                raise QueryError("Query execution failed: boom", cause=RuntimeError("boom"))
            return mock.Mock(recordset=[])

        with mock.patch("inventory_dashboard.analytics.dashboard.execute_query_async", side_effect=flaky):
            with self.assertRaises(AggregationError) as ctx:
                _dashboard()
        self.assertIsInstance(ctx.exception.cause, QueryError)
        self.assertIn("boom", str(ctx.exception))

    def test_cancellation_is_not_wrapped(self):
        async def cancelled(statement, params=None):
            raise asyncio.CancelledError()

        with mock.patch("inventory_dashboard.analytics.dashboard.execute_query_async", side_effect=cancelled):
            with self.assertRaises(asyncio.CancelledError):
                _dashboard()


if __name__ == "__main__":
    unittest.main()
