"""Re-export all ORM models so Base.metadata has all tables."""

from inventory_dashboard.db.models.alerts import InventoryAlert
from inventory_dashboard.db.models.catalog import Category, Customer, Product, ProductStock, Warehouse
from inventory_dashboard.db.models.transactions import PurchaseHeader, PurchaseItem, SalesHeader, SalesItem

__all__ = [
    "Category",
    "Product",
    "Warehouse",
    "ProductStock",
    "Customer",
    "SalesHeader",
    "SalesItem",
    "PurchaseHeader",
    "PurchaseItem",
    "InventoryAlert",
]
