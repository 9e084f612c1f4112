"""CLI entry point - registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="riskmap",
    help="riskmap - Interactive risk treemap for vehicle incident scenarios",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    """
    Build and explore the vehicle incident risk treemap.

    [bold cyan]Examples:[/bold cyan]

      riskmap render --output map.svg

      riskmap render --context Surface --zoom Surface/Passenger --format html -o map.html

      riskmap show --max-depth 2

      riskmap tui
    """
    if version:
        console.print(f"[bold cyan]riskmap[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .catalog import catalog as _catalog  # noqa: F401, E402
from .render import render as _render  # noqa: F401, E402
from .show import show as _show  # noqa: F401, E402
from .tui import tui as _tui  # noqa: F401, E402
