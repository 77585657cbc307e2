"""FastAPI app factory for the inventory dashboard API."""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from inventory_dashboard.api.alert_routes import router as alert_router
from inventory_dashboard.api.analytics_routes import router as analytics_router
from inventory_dashboard.api.product_routes import router as product_router
from inventory_dashboard.config import EXPOSE_ERROR_DETAILS
from inventory_dashboard.db import close_pool, pool_state
from inventory_dashboard.utils.logger import bind_context, clear_context, get_logger

logger = get_logger("inventory_dashboard.api.server")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """The pool is created lazily by the first request and released on shutdown."""
    logger.info("api.lifespan.started", expose_error_details=app.state.expose_error_details)
    yield
    await asyncio.to_thread(close_pool)
    logger.info("api.lifespan.stopped")


def create_app(expose_error_details: bool | None = None) -> FastAPI:
    """
    Create the FastAPI app.
    expose_error_details: reveal error causes in 500 responses; defaults to NODE_ENV == "development".
    """
    app = FastAPI(
        title="Smart Inventory API",
        version="0.1.0",
        lifespan=_lifespan,
    )
    app.state.expose_error_details = (
        EXPOSE_ERROR_DETAILS if expose_error_details is None else expose_error_details
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        clear_context()
        bind_context(method=request.method, path=request.url.path)
        try:
            return await call_next(request)
        finally:
            clear_context()

    app.include_router(analytics_router)
    app.include_router(product_router)
    app.include_router(alert_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "pool": pool_state().value}

    return app
