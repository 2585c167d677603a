"""Main CLI application."""

import typer

from fusebox.cli.commands import config, demo

app = typer.Typer(
    name="fusebox",
    help="Fusebox - one-shot timed callbacks",
    no_args_is_help=True,
)

config.register(app)
demo.register(app)


def main() -> None:
    app()
