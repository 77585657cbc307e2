"""DB repositories: sync functions that return response-shaped rows."""

from inventory_dashboard.db.repositories.alerts_repo import fetch_alerts, resolve_alert, summarize_alerts
from inventory_dashboard.db.repositories.products_repo import (
    fetch_dead_stock,
    fetch_low_stock,
    summarize_dead_stock,
    summarize_low_stock,
)

__all__ = [
    "fetch_alerts",
    "resolve_alert",
    "summarize_alerts",
    "fetch_low_stock",
    "summarize_low_stock",
    "fetch_dead_stock",
    "summarize_dead_stock",
]
