"""Analytics API routes: the dashboard snapshot and period statistics."""

from datetime import date

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from inventory_dashboard.analytics import get_dashboard, get_period_stats
from inventory_dashboard.api.responses import error_response, failure_response, success_response
from inventory_dashboard.utils.logger import get_logger

logger = get_logger("inventory_dashboard.api.analytics")

router = APIRouter(prefix="/api/analytics", tags=["analytics"])

MIN_YEAR = 1
MAX_YEAR = 9998


@router.get("/dashboard")
async def dashboard(request: Request) -> JSONResponse:
    """Inventory, sales, purchases and alert statistics in one payload."""
    try:
        snapshot = await get_dashboard()
    except Exception as e:
        logger.exception("analytics.dashboard.failed", error=str(e))
        return error_response(request, "Failed to fetch dashboard data", e)
    return success_response("Dashboard data fetched successfully", data=snapshot.to_payload())


@router.get("/period-stats")
async def period_stats(
    request: Request,
    year: int | None = None,
    month: int | None = None,
    week: int | None = None,
) -> JSONResponse:
    """Weekly, monthly and yearly sales, COGS and profit. Defaults to the current month."""
    today = date.today()
    year = today.year if year is None else year
    month = today.month if month is None else month
    if not MIN_YEAR <= year <= MAX_YEAR:
        return failure_response(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    if not 1 <= month <= 12:
        return failure_response("Month must be between 1 and 12")
    if week is not None and not 1 <= week <= 53:
        return failure_response("Week must be between 1 and 53")
    try:
        stats = await get_period_stats(year, month, week)
    except Exception as e:
        logger.exception("analytics.period_stats.failed", error=str(e), year=year, month=month, week=week)
        return error_response(request, "Failed to fetch period statistics", e)
    return success_response("Period statistics fetched successfully", data=stats)
