"""dashboard: compute one dashboard snapshot and print it as JSON."""

import asyncio
import json

import typer
from fastapi.encoders import jsonable_encoder

from inventory_dashboard.analytics import get_dashboard
from inventory_dashboard.db import close_pool
from inventory_dashboard.errors import InventoryError

from .shared import console, logger


async def _snapshot() -> dict:
    try:
        snapshot = await get_dashboard()
    finally:
        close_pool()
    return snapshot.to_payload()


def dashboard(
    indent: int = typer.Option(2, "--indent", help="JSON indentation"),
) -> None:
    """Run the dashboard aggregation once against the configured database."""
    log = logger.bind(command="dashboard")
    try:
        payload = asyncio.run(_snapshot())
    except InventoryError as e:
        console.print(f"[red]Dashboard failed: {e}[/red]")
        log.error("dashboard.fail", error_type=type(e).__name__, error=str(e))
        raise typer.Exit(1) from e
    console.print_json(json.dumps(jsonable_encoder(payload)), indent=indent)
    log.info("dashboard.ok")
