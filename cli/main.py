#!/usr/bin/env python3
"""
Contract Engine CLI

Main entrypoint for the contract-engine command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from contract_engine.logging_config import setup_logging

from cli.commands import log, replay

# Initialize Typer app
app = typer.Typer(
    name="contract-engine",
    help="Deterministic contract execution CLI",
    add_completion=False,
)

# Console for rich output
console = Console()

# Add command groups
app.add_typer(log.app, name="log", help="Operation log operations")

# Add standalone commands
app.command("replay")(replay.replay_command)


@app.callback()
def _init() -> None:
    setup_logging()


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from contract_engine import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Contract Engine CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
