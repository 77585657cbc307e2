"""Analytics services."""

from inventory_dashboard.analytics.dashboard import DashboardSnapshot, get_dashboard
from inventory_dashboard.analytics.period_stats import get_period_stats, period_bounds

__all__ = ["DashboardSnapshot", "get_dashboard", "get_period_stats", "period_bounds"]
