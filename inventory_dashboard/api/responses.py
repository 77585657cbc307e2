"""JSON envelopes shared by every route: {success, message, ...payload}."""

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from inventory_dashboard.errors import InventoryError

GENERIC_ERROR = "Internal server error"


def success_response(message: str, status_code: int = 200, **payload: Any) -> JSONResponse:
    """Success envelope. Decimals become numbers and datetimes ISO-8601 strings."""
    body = {"success": True, "message": message, **payload}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def failure_response(message: str, status_code: int = 400) -> JSONResponse:
    """Client error envelope (bad parameters, unknown ids)."""
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _error_detail(exc: BaseException) -> str:
    cause = exc.cause if isinstance(exc, InventoryError) and exc.cause is not None else exc
    return str(cause)


def error_response(request: Request, message: str, exc: BaseException, status_code: int = 500) -> JSONResponse:
    """Server error envelope. The underlying cause is revealed only when the app exposes error details."""
    expose = bool(getattr(request.app.state, "expose_error_details", False))
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": _error_detail(exc) if expose else GENERIC_ERROR,
        },
    )
