"""Serve mode: run the inventory API under uvicorn."""

import sys

import typer
import uvicorn

from inventory_dashboard.config import SERVER_HOST, SERVER_PORT

from .shared import console, logger

APP_FACTORY = "inventory_dashboard.api.server:create_app"


def serve(
    host: str = typer.Option(SERVER_HOST, "--host", "-h", help="Bind host"),
    port: int = typer.Option(SERVER_PORT, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes (development)"),
) -> None:
    """Start the HTTP API. The database pool is created on the first request."""
    log = logger.bind(command="serve", host=host, port=port)
    log.info("serve.start", reload=reload)
    console.print(f"[green]Starting inventory API on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: GET /api/analytics/dashboard, /api/products/*, /api/alerts, GET /health[/dim]")
    try:
        uvicorn.run(
            APP_FACTORY,
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level="info",
            timeout_graceful_shutdown=15,
        )
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
