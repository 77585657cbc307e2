"""Dashboard aggregation: eight independent queries assembled into one snapshot."""

import asyncio
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from inventory_dashboard.db import QueryResult, execute_query_async, queries
from inventory_dashboard.errors import AggregationError
from inventory_dashboard.utils.logger import get_logger

logger = get_logger("inventory_dashboard.analytics.dashboard")

# Sections backed by a single aggregate row (collapsed to a mapping).
_SINGLE_ROW_SECTIONS = {
    "inventory": queries.inventory_overview,
    "sales": queries.sales_overview,
    "purchases": queries.purchases_overview,
    "alerts": queries.alerts_overview,
}
# Sections returned as ordered row lists.
_LIST_SECTIONS = {
    "recent_sales": queries.recent_sales,
    "top_products": queries.top_products,
    "categories": queries.category_distribution,
    "warehouses": queries.warehouse_summary,
}


class DashboardSnapshot(BaseModel):
    """Point-in-time dashboard payload. Every section is always present."""

    inventory: dict[str, Any] = Field(default_factory=dict)
    sales: dict[str, Any] = Field(default_factory=dict)
    purchases: dict[str, Any] = Field(default_factory=dict)
    alerts: dict[str, Any] = Field(default_factory=dict)
    recent_sales: list[dict[str, Any]] = Field(default_factory=list, alias="recentSales")
    top_products: list[dict[str, Any]] = Field(default_factory=list, alias="topProducts")
    categories: list[dict[str, Any]] = Field(default_factory=list)
    warehouses: list[dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Dict keyed the way the UI reads it (recentSales, topProducts)."""
        return self.model_dump(by_alias=True)


def _first_row(result: QueryResult) -> dict[str, Any]:
    return dict(result.recordset[0]) if result.recordset else {}


async def get_dashboard() -> DashboardSnapshot:
    """Run the dashboard queries concurrently through the shared pool and build the snapshot.

    Any failing query fails the whole call with AggregationError; there is no
    partial snapshot.
    """
    builders = {**_SINGLE_ROW_SECTIONS, **_LIST_SECTIONS}
    names = list(builders)
    try:
        results = await asyncio.gather(*(execute_query_async(build()) for build in builders.values()))
    except Exception as e:
        logger.error("analytics.dashboard.query_failed", error_type=type(e).__name__, error=str(e))
        raise AggregationError(f"Dashboard aggregation failed: {e}", cause=e) from e
    by_name = dict(zip(names, results))
    snapshot = DashboardSnapshot(
        **{name: _first_row(by_name[name]) for name in _SINGLE_ROW_SECTIONS},
        **{name: list(by_name[name].recordset) for name in _LIST_SECTIONS},
    )
    logger.debug(
        "analytics.dashboard.assembled",
        recent_sales=len(snapshot.recent_sales),
        top_products=len(snapshot.top_products),
        categories=len(snapshot.categories),
        warehouses=len(snapshot.warehouses),
    )
    return snapshot
