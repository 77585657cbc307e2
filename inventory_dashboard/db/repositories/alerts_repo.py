"""Alerts repository: list alerts with urgency, resolve one alert."""

from typing import Any, Optional

from sqlalchemy import case, false, select, true

from inventory_dashboard.db import execute_query
from inventory_dashboard.db.models import Category, InventoryAlert, Product
from inventory_dashboard.db.models.alerts import ALERT_LOW_STOCK, ALERT_OUT_OF_STOCK

STATUS_UNRESOLVED = "unresolved"
STATUS_RESOLVED = "resolved"
STATUS_ALL = "all"
STATUS_FILTERS = (STATUS_UNRESOLVED, STATUS_RESOLVED, STATUS_ALL)

_RESOLVE_SQL = (
    "UPDATE InventoryAlerts "
    "SET IsResolved = 1, ResolvedAt = CURRENT_TIMESTAMP, ResolvedByUserID = :resolved_by "
    "WHERE AlertID = :alert_id"
)

_urgency_rank = case(
    (InventoryAlert.alert_type == ALERT_OUT_OF_STOCK, 1),
    (Product.current_stock * 2 <= Product.reorder_level, 2),
    else_=3,
)
_urgency = case(
    (InventoryAlert.alert_type == ALERT_OUT_OF_STOCK, "CRITICAL"),
    (Product.current_stock * 2 <= Product.reorder_level, "HIGH"),
    else_="MEDIUM",
)


def _alerts_select():
    return (
        select(
            InventoryAlert.alert_id.label("AlertID"),
            InventoryAlert.product_id.label("ProductID"),
            Product.product_code.label("ProductCode"),
            Product.product_name.label("ProductName"),
            Category.category_name.label("CategoryName"),
            InventoryAlert.alert_type.label("AlertType"),
            InventoryAlert.message.label("Message"),
            InventoryAlert.current_stock.label("CurrentStock"),
            InventoryAlert.reorder_level.label("ReorderLevel"),
            InventoryAlert.is_resolved.label("IsResolved"),
            InventoryAlert.resolved_at.label("ResolvedAt"),
            InventoryAlert.resolved_by_user_id.label("ResolvedByUserID"),
            InventoryAlert.created_at.label("CreatedAt"),
            Product.current_stock.label("LatestStock"),
            _urgency.label("Urgency"),
        )
        .join(Product, Product.product_id == InventoryAlert.product_id)
        .join(Category, Category.category_id == Product.category_id)
    )


def fetch_alerts(status: str = STATUS_UNRESOLVED) -> list[dict[str, Any]]:
    """Alerts filtered by status, most urgent first, newest first within an urgency."""
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown alert status filter: {status!r}")
    stmt = _alerts_select()
    if status == STATUS_UNRESOLVED:
        stmt = stmt.where(InventoryAlert.is_resolved == false())
    elif status == STATUS_RESOLVED:
        stmt = stmt.where(InventoryAlert.is_resolved == true())
    stmt = stmt.order_by(_urgency_rank, InventoryAlert.created_at.desc())
    return execute_query(stmt).recordset


def summarize_alerts(rows: list[dict[str, Any]]) -> dict[str, int]:
    return {
        "totalAlerts": len(rows),
        "criticalCount": sum(1 for r in rows if r.get("Urgency") == "CRITICAL"),
        "highCount": sum(1 for r in rows if r.get("Urgency") == "HIGH"),
        "mediumCount": sum(1 for r in rows if r.get("Urgency") == "MEDIUM"),
        "outOfStockCount": sum(1 for r in rows if r.get("AlertType") == ALERT_OUT_OF_STOCK),
        "lowStockCount": sum(1 for r in rows if r.get("AlertType") == ALERT_LOW_STOCK),
    }


def get_alert(alert_id: int) -> Optional[dict[str, Any]]:
    rows = execute_query(_alerts_select().where(InventoryAlert.alert_id == alert_id)).recordset
    return rows[0] if rows else None


def resolve_alert(alert_id: int, resolved_by_user_id: Optional[int] = None) -> Optional[dict[str, Any]]:
    """Mark the alert resolved. Returns the updated alert, or None when no alert has that id."""
    result = execute_query(_RESOLVE_SQL, {"alert_id": alert_id, "resolved_by": resolved_by_user_id})
    if result.rows_affected == 0:
        return None
    return get_alert(alert_id)
