"""CLI commands: one module per command (serve, check-db, dashboard)."""

from typer import Typer

from inventory_dashboard.cli import check_db as check_db_module, dashboard_mode, serve_mode

app = Typer(help="Smart Inventory dashboard service")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(serve_mode.serve)
    app.command(name="check-db")(check_db_module.check_db)
    app.command()(dashboard_mode.dashboard)


register_commands()
