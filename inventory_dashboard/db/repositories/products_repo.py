"""Products repository: low-stock listing and dead-stock listing."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import Select, and_, case, func, or_, select, true

from inventory_dashboard.db import execute_query, execute_stored_procedure, get_pool
from inventory_dashboard.db.models import Category, Product, SalesHeader, SalesItem
from inventory_dashboard.db.models.transactions import STATUS_COMPLETED

DEAD_STOCK_PROCEDURE = "sp_GetDeadStock"
DEFAULT_DEAD_STOCK_DAYS = 90
NEVER_SOLD = "Never Sold"
NEVER_SOLD_DAYS = 9999
CLEARANCE_AFTER_DAYS = 180
PROMOTION_AFTER_DAYS = 120


def _decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _money(total: Decimal) -> str:
    return f"{total:.2f}"


def fetch_low_stock() -> list[dict[str, Any]]:
    """Active products at or below their reorder level, most urgent first."""
    # Priority 2 is "at or below half the reorder level", written without division
    # so integer and decimal division semantics of the backend do not matter.
    priority = case(
        (Product.current_stock == 0, 1),
        (Product.current_stock * 2 <= Product.reorder_level, 2),
        else_=3,
    )
    urgency = case(
        (Product.current_stock == 0, "CRITICAL - Out of Stock"),
        (Product.current_stock * 2 <= Product.reorder_level, "HIGH - Very Low"),
        else_="MEDIUM - Below Reorder Level",
    )
    stmt = (
        select(
            Product.product_id.label("ProductID"),
            Product.product_code.label("ProductCode"),
            Product.product_name.label("ProductName"),
            Category.category_name.label("CategoryName"),
            Product.current_stock.label("CurrentStock"),
            Product.reorder_level.label("ReorderLevel"),
            (Product.reorder_level - Product.current_stock).label("UnitsNeeded"),
            (Product.reorder_level * 2).label("SuggestedOrderQuantity"),
            Product.cost_price.label("CostPrice"),
            (Product.reorder_level * 2 * Product.cost_price).label("EstimatedRestockCost"),
            Product.unit.label("Unit"),
            urgency.label("UrgencyLevel"),
            priority.label("Priority"),
        )
        .join(Category, Category.category_id == Product.category_id)
        .where(Product.current_stock <= Product.reorder_level)
        .where(Product.is_active == true())
        .order_by(priority, Product.current_stock)
    )
    return execute_query(stmt).recordset


def summarize_low_stock(rows: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "totalLowStockProducts": len(rows),
        "outOfStockCount": sum(1 for r in rows if r.get("CurrentStock") == 0),
        "criticalCount": sum(1 for r in rows if r.get("Priority") in (1, 2)),
        "totalEstimatedRestockCost": _money(sum((_decimal(r.get("EstimatedRestockCost")) for r in rows), Decimal("0"))),
    }


def dead_stock_cutoff(days_without_sale: int, today: date) -> datetime:
    """Sales strictly before this instant are at least days_without_sale calendar days old."""
    return datetime.combine(today - timedelta(days=days_without_sale - 1), time.min)


def dead_stock_query(cutoff: datetime) -> Select:
    """Active products with stock whose last completed sale is older than cutoff, or that never sold."""
    last_sale = func.max(SalesHeader.sale_date)
    return (
        select(
            Product.product_id.label("ProductID"),
            Product.product_code.label("ProductCode"),
            Product.product_name.label("ProductName"),
            Category.category_name.label("CategoryName"),
            Product.current_stock.label("CurrentStock"),
            Product.cost_price.label("CostPrice"),
            Product.selling_price.label("SellingPrice"),
            (Product.current_stock * Product.cost_price).label("DeadStockValue"),
            last_sale.label("LastSaleDate"),
        )
        .select_from(Product)
        .join(Category, Category.category_id == Product.category_id)
        .outerjoin(SalesItem, SalesItem.product_id == Product.product_id)
        .outerjoin(
            SalesHeader,
            and_(SalesHeader.sale_id == SalesItem.sale_id, SalesHeader.status == STATUS_COMPLETED),
        )
        .where(Product.is_active == true())
        .where(Product.current_stock > 0)
        .group_by(
            Product.product_id,
            Product.product_code,
            Product.product_name,
            Category.category_name,
            Product.current_stock,
            Product.cost_price,
            Product.selling_price,
        )
        .having(or_(last_sale.is_(None), last_sale < cutoff))
    )


def _recommendation(days: int | None) -> str:
    if days is None:
        return "Review product viability - Never sold"
    if days >= CLEARANCE_AFTER_DAYS:
        return "Consider clearance sale or return to supplier"
    if days >= PROMOTION_AFTER_DAYS:
        return "Run promotional campaign"
    return "Monitor closely"


def _with_age(row: dict[str, Any], today: date) -> dict[str, Any]:
    last_sale = row.get("LastSaleDate")
    if isinstance(last_sale, datetime):
        last_sale = last_sale.date()
    days = (today - last_sale).days if last_sale is not None else None
    return {
        **row,
        "DaysSinceLastSale": NEVER_SOLD if days is None else f"{days} days",
        "DaysSinceLastSaleNum": NEVER_SOLD_DAYS if days is None else days,
        "Recommendation": _recommendation(days),
    }


def fetch_dead_stock(days_without_sale: int = DEFAULT_DEAD_STOCK_DAYS) -> list[dict[str, Any]]:
    """Products with stock and no completed sale in the last days_without_sale days, stalest first.

    SQL Server deployments ship sp_GetDeadStock; every other backend runs the equivalent query.
    """
    today = datetime.now().date()
    if get_pool().dialect.name == "mssql":
        rows = execute_stored_procedure(DEAD_STOCK_PROCEDURE, {"DaysWithoutSale": days_without_sale}).recordset
    else:
        rows = execute_query(dead_stock_query(dead_stock_cutoff(days_without_sale, today))).recordset
    rows = [_with_age(row, today) for row in rows]
    rows.sort(key=lambda r: r["DaysSinceLastSaleNum"], reverse=True)
    return rows


def summarize_dead_stock(rows: list[dict[str, Any]], days_without_sale: int) -> dict[str, Any]:
    stock_value = sum((_decimal(r.get("DeadStockValue")) for r in rows), Decimal("0"))
    full_price = sum(
        (_decimal(r.get("CurrentStock")) * _decimal(r.get("SellingPrice")) for r in rows),
        Decimal("0"),
    )
    return {
        "daysThreshold": days_without_sale,
        "totalDeadStockProducts": len(rows),
        "neverSoldCount": sum(1 for r in rows if r.get("DaysSinceLastSale") == NEVER_SOLD),
        "totalDeadStockValue": _money(stock_value),
        "potentialRecoveryAtCost": _money(stock_value),
        "potentialRevenueAtFullPrice": _money(full_price),
    }
