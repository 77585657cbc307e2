"""HTTP surface: FastAPI app factory and routers."""

from inventory_dashboard.api.server import create_app

__all__ = ["create_app"]
