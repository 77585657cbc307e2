"""Weekly, monthly and yearly sales and profit figures."""

import asyncio
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from inventory_dashboard.db import execute_query_async, queries
from inventory_dashboard.errors import AggregationError
from inventory_dashboard.utils.logger import get_logger

logger = get_logger("inventory_dashboard.analytics.period_stats")

PERIODS = ("weekly", "monthly", "yearly")


def week_start(year: int, month: int, week: int | None = None) -> date:
    """Monday of the selected week.

    Week 1 is the Monday-started week containing January 1st. Without a week
    number, the week containing the 1st of the month is used.
    """
    if week is not None:
        jan_first = date(year, 1, 1)
        return jan_first - timedelta(days=jan_first.weekday()) + timedelta(weeks=week - 1)
    first = date(year, month, 1)
    return first - timedelta(days=first.weekday())


def period_bounds(year: int, month: int, week: int | None = None) -> dict[str, tuple[datetime, datetime]]:
    """Half-open [start, end) ranges for each period."""
    monday = datetime.combine(week_start(year, month, week), datetime.min.time())
    month_start = datetime(year, month, 1)
    month_end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return {
        "weekly": (monday, monday + timedelta(days=7)),
        "monthly": (month_start, month_end),
        "yearly": (datetime(year, 1, 1), datetime(year + 1, 1, 1)),
    }


def _amount(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _period_figures(row: dict[str, Any]) -> dict[str, Any]:
    sales = _amount(row.get("Sales"))
    cogs = _amount(row.get("COGS"))
    gross_profit = sales - cogs
    return {
        "sales": sales,
        "salesCount": int(row.get("SalesCount") or 0),
        "purchases": _amount(row.get("Purchases")),
        "cogs": cogs,
        "grossProfit": gross_profit,
        # No operating expenses are recorded, so net equals gross.
        "netProfit": gross_profit,
    }


async def get_period_stats(year: int, month: int, week: int | None = None) -> dict[str, Any]:
    bounds = period_bounds(year, month, week)
    try:
        results = await asyncio.gather(
            *(execute_query_async(queries.period_totals(*bounds[name])) for name in PERIODS)
        )
    except Exception as e:
        logger.error("analytics.period_stats.query_failed", error_type=type(e).__name__, error=str(e))
        raise AggregationError(f"Period statistics failed: {e}", cause=e) from e
    stats: dict[str, Any] = {
        "year": year,
        "month": month,
        "week": week,
        "weekStart": bounds["weekly"][0].date(),
    }
    for name, result in zip(PERIODS, results):
        stats[name] = _period_figures(dict(result.recordset[0]) if result.recordset else {})
    return stats
