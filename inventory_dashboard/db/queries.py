"""Dashboard queries built with SQLAlchemy Core.

Each statement returns columns labelled with the names the UI expects
(TotalProducts, SaleID, ...). "This month" is evaluated on the backend clock.
"""

from datetime import datetime

from sqlalchemy import Numeric, Select, and_, case, cast, distinct, extract, false, func, select, true
from sqlalchemy.sql.elements import ColumnElement

from inventory_dashboard.db.models import (
    Category,
    Customer,
    InventoryAlert,
    Product,
    ProductStock,
    PurchaseHeader,
    PurchaseItem,
    SalesHeader,
    SalesItem,
    Warehouse,
)
from inventory_dashboard.db.models.alerts import ALERT_LOW_STOCK, ALERT_OUT_OF_STOCK
from inventory_dashboard.db.models.transactions import STATUS_COMPLETED

RECENT_SALES_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5


def _in_current_month(column) -> ColumnElement[bool]:
    now = func.now()
    return and_(
        extract("year", column) == extract("year", now),
        extract("month", column) == extract("month", now),
    )


def _count_where(condition) -> ColumnElement:
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def inventory_overview() -> Select:
    """Counts and stock value over active products."""
    return select(
        func.count(Product.product_id).label("TotalProducts"),
        func.sum(Product.current_stock).label("TotalUnits"),
        func.sum(Product.current_stock * Product.cost_price).label("TotalInventoryValue"),
        _count_where(Product.current_stock <= Product.reorder_level).label("LowStockProducts"),
        _count_where(Product.current_stock == 0).label("OutOfStockProducts"),
        func.avg(cast(Product.current_stock, Numeric(18, 4))).label("AverageStock"),
    ).where(Product.is_active == true())


def sales_overview() -> Select:
    """Completed sales this month.

    AverageOrderValue is the mean over item rows, not revenue per sale.
    """
    return (
        select(
            func.count(distinct(SalesHeader.sale_id)).label("TotalSales"),
            func.coalesce(func.sum(SalesItem.quantity), 0).label("TotalUnitsSold"),
            func.coalesce(func.sum(SalesItem.line_total), 0).label("TotalRevenue"),
            func.coalesce(func.avg(SalesItem.line_total), 0).label("AverageOrderValue"),
        )
        .select_from(SalesHeader)
        .outerjoin(SalesItem, SalesItem.sale_id == SalesHeader.sale_id)
        .where(_in_current_month(SalesHeader.sale_date))
        .where(SalesHeader.status == STATUS_COMPLETED)
    )


def purchases_overview() -> Select:
    """Completed purchases this month."""
    return (
        select(
            func.count(distinct(PurchaseHeader.purchase_id)).label("TotalPurchases"),
            func.coalesce(func.sum(PurchaseItem.quantity), 0).label("TotalUnitsReceived"),
            func.coalesce(func.sum(PurchaseItem.line_total), 0).label("TotalPurchaseCost"),
        )
        .select_from(PurchaseHeader)
        .outerjoin(PurchaseItem, PurchaseItem.purchase_id == PurchaseHeader.purchase_id)
        .where(_in_current_month(PurchaseHeader.purchase_date))
        .where(PurchaseHeader.status == STATUS_COMPLETED)
    )


def alerts_overview() -> Select:
    """Unresolved alert counts by type."""
    return select(
        func.count(InventoryAlert.alert_id).label("TotalUnresolvedAlerts"),
        _count_where(InventoryAlert.alert_type == ALERT_OUT_OF_STOCK).label("OutOfStockAlerts"),
        _count_where(InventoryAlert.alert_type == ALERT_LOW_STOCK).label("LowStockAlerts"),
    ).where(InventoryAlert.is_resolved == false())


def recent_sales(limit: int = RECENT_SALES_LIMIT) -> Select:
    """Most recent completed sales with customer, warehouse and line totals."""
    total_amount = (
        select(func.sum(SalesItem.line_total))
        .where(SalesItem.sale_id == SalesHeader.sale_id)
        .scalar_subquery()
    )
    item_count = (
        select(func.count(SalesItem.sale_item_id))
        .where(SalesItem.sale_id == SalesHeader.sale_id)
        .scalar_subquery()
    )
    return (
        select(
            SalesHeader.sale_id.label("SaleID"),
            SalesHeader.invoice_number.label("InvoiceNumber"),
            Customer.customer_name.label("CustomerName"),
            Warehouse.warehouse_name.label("WarehouseName"),
            total_amount.label("TotalAmount"),
            item_count.label("ItemCount"),
            SalesHeader.sale_date.label("SaleDate"),
        )
        .join(Customer, Customer.customer_id == SalesHeader.customer_id)
        .join(Warehouse, Warehouse.warehouse_id == SalesHeader.warehouse_id)
        .where(SalesHeader.status == STATUS_COMPLETED)
        .order_by(SalesHeader.sale_date.desc())
        .limit(limit)
    )


def top_products(limit: int = TOP_PRODUCTS_LIMIT) -> Select:
    """Best sellers this month by revenue."""
    revenue = func.sum(SalesItem.line_total).label("Revenue")
    return (
        select(
            Product.product_id.label("ProductID"),
            Product.product_name.label("ProductName"),
            func.sum(SalesItem.quantity).label("UnitsSold"),
            revenue,
        )
        .select_from(SalesItem)
        .join(Product, Product.product_id == SalesItem.product_id)
        .join(SalesHeader, SalesHeader.sale_id == SalesItem.sale_id)
        .where(_in_current_month(SalesHeader.sale_date))
        .where(SalesHeader.status == STATUS_COMPLETED)
        .group_by(Product.product_id, Product.product_name)
        .order_by(revenue.desc())
        .limit(limit)
    )


def category_distribution() -> Select:
    """Every category with its active products' count, stock and value."""
    inventory_value = func.coalesce(func.sum(Product.current_stock * Product.cost_price), 0).label("InventoryValue")
    return (
        select(
            Category.category_id.label("CategoryID"),
            Category.category_name.label("CategoryName"),
            func.count(Product.product_id).label("ProductCount"),
            func.coalesce(func.sum(Product.current_stock), 0).label("TotalStock"),
            inventory_value,
        )
        .select_from(Category)
        .outerjoin(
            Product,
            and_(Product.category_id == Category.category_id, Product.is_active == true()),
        )
        .group_by(Category.category_id, Category.category_name)
        .order_by(inventory_value.desc())
    )


def warehouse_summary() -> Select:
    """Every active warehouse with on-hand totals."""
    return (
        select(
            Warehouse.warehouse_id.label("WarehouseID"),
            Warehouse.warehouse_name.label("WarehouseName"),
            func.coalesce(func.sum(ProductStock.on_hand_qty), 0).label("TotalStock"),
            func.count(distinct(ProductStock.product_id)).label("ProductCount"),
        )
        .select_from(Warehouse)
        .outerjoin(ProductStock, ProductStock.warehouse_id == Warehouse.warehouse_id)
        .where(Warehouse.is_active == true())
        .group_by(Warehouse.warehouse_id, Warehouse.warehouse_name)
    )


def _completed_sales_between(start: datetime, end: datetime) -> ColumnElement[bool]:
    return and_(
        SalesHeader.status == STATUS_COMPLETED,
        SalesHeader.sale_date >= start,
        SalesHeader.sale_date < end,
    )


def period_totals(start: datetime, end: datetime) -> Select:
    """Sales, sale count, purchases and COGS for completed documents in [start, end).

    COGS uses each product's current cost price.
    """
    in_period = _completed_sales_between(start, end)
    sales = (
        select(func.sum(SalesItem.line_total))
        .join(SalesHeader, SalesHeader.sale_id == SalesItem.sale_id)
        .where(in_period)
        .correlate(None)
        .scalar_subquery()
    )
    sales_count = select(func.count(distinct(SalesHeader.sale_id))).where(in_period).correlate(None).scalar_subquery()
    purchases = (
        select(func.sum(PurchaseItem.line_total))
        .join(PurchaseHeader, PurchaseHeader.purchase_id == PurchaseItem.purchase_id)
        .where(PurchaseHeader.status == STATUS_COMPLETED)
        .where(PurchaseHeader.purchase_date >= start, PurchaseHeader.purchase_date < end)
        .correlate(None)
        .scalar_subquery()
    )
    cogs = (
        select(func.sum(SalesItem.quantity * Product.cost_price))
        .select_from(SalesItem)
        .join(SalesHeader, SalesHeader.sale_id == SalesItem.sale_id)
        .join(Product, Product.product_id == SalesItem.product_id)
        .where(in_period)
        .correlate(None)
        .scalar_subquery()
    )
    return select(
        func.coalesce(sales, 0).label("Sales"),
        func.coalesce(sales_count, 0).label("SalesCount"),
        func.coalesce(purchases, 0).label("Purchases"),
        func.coalesce(cogs, 0).label("COGS"),
    )
