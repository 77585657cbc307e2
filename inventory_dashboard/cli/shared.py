"""Shared CLI helpers: console and logger."""

from rich.console import Console

from inventory_dashboard.utils.logger import get_logger

console = Console()
logger = get_logger("inventory_dashboard.cli")
