"""Product API routes: low-stock report and dead-stock report."""

import asyncio

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from inventory_dashboard.api.responses import error_response, failure_response, success_response
from inventory_dashboard.db.repositories import (
    fetch_dead_stock,
    fetch_low_stock,
    summarize_dead_stock,
    summarize_low_stock,
)
from inventory_dashboard.db.repositories.products_repo import DEFAULT_DEAD_STOCK_DAYS
from inventory_dashboard.utils.logger import get_logger

logger = get_logger("inventory_dashboard.api.products")

router = APIRouter(prefix="/api/products", tags=["products"])

MIN_DEAD_STOCK_DAYS = 1
MAX_DEAD_STOCK_DAYS = 365


@router.get("/low-stock")
async def low_stock(request: Request) -> JSONResponse:
    """Active products at or below their reorder level, most urgent first."""
    try:
        rows = await asyncio.to_thread(fetch_low_stock)
    except Exception as e:
        logger.exception("products.low_stock.failed", error=str(e))
        return error_response(request, "Failed to fetch low stock products", e)
    return success_response(
        "Low stock products fetched successfully",
        data=rows,
        summary=summarize_low_stock(rows),
    )


@router.get("/dead-stock")
async def dead_stock(request: Request, days: int = DEFAULT_DEAD_STOCK_DAYS) -> JSONResponse:
    """Products with stock on hand and no sale in the last `days` days."""
    if not MIN_DEAD_STOCK_DAYS <= days <= MAX_DEAD_STOCK_DAYS:
        return failure_response(
            f"Days parameter must be between {MIN_DEAD_STOCK_DAYS} and {MAX_DEAD_STOCK_DAYS}"
        )
    try:
        rows = await asyncio.to_thread(fetch_dead_stock, days)
    except Exception as e:
        logger.exception("products.dead_stock.failed", days=days, error=str(e))
        return error_response(request, "Failed to fetch dead stock products", e)
    return success_response(
        f"Dead stock products (no sales in {days}+ days) fetched successfully",
        data=rows,
        summary=summarize_dead_stock(rows, days),
    )
