"""check-db: build the pool from the environment and run a trivial query."""

import typer
from rich.table import Table

from inventory_dashboard.db import close_pool, execute_query, get_pool
from inventory_dashboard.errors import DatabaseError

from .shared import console, logger


def check_db() -> None:
    """Connect with the configured settings, run SELECT 1 and print pool details."""
    log = logger.bind(command="check-db")
    log.info("check_db.start")
    try:
        engine = get_pool()
        result = execute_query("SELECT 1 AS ok")
    except DatabaseError as e:
        console.print(f"[red]Database check failed: {e}[/red]")
        log.error("check_db.fail", error_type=type(e).__name__, error=str(e))
        raise typer.Exit(1) from e
    try:
        table = Table(title="Database")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("Backend", engine.url.get_backend_name())
        table.add_row("Driver", engine.url.get_driver_name())
        table.add_row("Host", str(engine.url.host or ""))
        table.add_row("Database", str(engine.url.database or ""))
        table.add_row("Pool", engine.pool.status())
        table.add_row("SELECT 1", str(result.recordset[0]["ok"]))
        console.print(table)
        console.print("[green]Database reachable.[/green]")
        log.info("check_db.ok", backend=engine.url.get_backend_name())
    finally:
        close_pool()
