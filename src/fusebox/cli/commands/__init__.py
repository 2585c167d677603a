"""CLI command modules."""

from fusebox.cli.commands import config, demo

__all__ = [
    "config",
    "demo",
]
