"""Alert API routes: list alerts by status, resolve one alert."""

import asyncio

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from inventory_dashboard.api.models import ResolveAlertBody
from inventory_dashboard.api.responses import error_response, failure_response, success_response
from inventory_dashboard.db.repositories import fetch_alerts, resolve_alert, summarize_alerts
from inventory_dashboard.db.repositories.alerts_repo import STATUS_FILTERS, STATUS_UNRESOLVED
from inventory_dashboard.utils.logger import get_logger

logger = get_logger("inventory_dashboard.api.alerts")

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


@router.get("")
async def list_alerts(request: Request, status: str = STATUS_UNRESOLVED) -> JSONResponse:
    """Alerts filtered by status (unresolved, resolved or all), most urgent first."""
    status = status.strip().lower()
    if status not in STATUS_FILTERS:
        return failure_response(f"Status must be one of: {', '.join(STATUS_FILTERS)}")
    try:
        rows = await asyncio.to_thread(fetch_alerts, status)
    except Exception as e:
        logger.exception("alerts.list.failed", status=status, error=str(e))
        return error_response(request, "Failed to fetch alerts", e)
    return success_response(
        "Alerts fetched successfully",
        data=rows,
        summary=summarize_alerts(rows),
        filter=status,
    )


@router.patch("")
async def resolve(request: Request, body: ResolveAlertBody) -> JSONResponse:
    """Mark one alert resolved."""
    if body.alert_id is None:
        return failure_response("Alert ID is required")
    try:
        alert = await asyncio.to_thread(resolve_alert, body.alert_id, body.resolved_by_user_id)
    except Exception as e:
        logger.exception("alerts.resolve.failed", alert_id=body.alert_id, error=str(e))
        return error_response(request, "Failed to resolve alert", e)
    if alert is None:
        return failure_response("Alert not found", status_code=404)
    logger.info("alerts.resolved", alert_id=body.alert_id, resolved_by=body.resolved_by_user_id)
    return success_response("Alert resolved successfully", data=alert)
