"""Catalog CLI command -- list the risk taxonomy."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..exceptions import RiskMapError
from ..taxonomy import NODE_CATEGORIES, RiskCatalog
from . import app
from ._common import console, resolve_catalog, resolve_config


@app.command()
def catalog(
    catalog_file: Optional[Path] = typer.Option(
        None,
        "--catalog",
        help="JSON taxonomy to inspect instead of the built-in catalog",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    List operating contexts, equipment and damaging energy mechanisms.

    The JSON output is a valid --catalog file and makes a starting point
    for a custom taxonomy.

    [bold cyan]Examples:[/bold cyan]

      riskmap catalog

      riskmap catalog --json > taxonomy.json
    """
    try:
        settings = resolve_config(config=config, catalog_file=catalog_file)
        taxonomy = resolve_catalog(settings)
    except RiskMapError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(taxonomy.to_dict(), indent=2))
        return

    console.print(_contexts_table(taxonomy))
    console.print(_equipment_tree(taxonomy))
    console.print(_mechanism_tree(taxonomy))
    console.print(f"\n[dim]Tiers: {' → '.join(NODE_CATEGORIES)}[/dim]")


def _contexts_table(taxonomy: RiskCatalog) -> Table:
    table = Table(title=NODE_CATEGORIES[1] + "s")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    for i, name in enumerate(taxonomy.contexts, 1):
        table.add_row(str(i), escape(name))
    return table


def _equipment_tree(taxonomy: RiskCatalog) -> Tree:
    tree = Tree("[bold]Equipment[/bold]")
    for equipment in taxonomy.equipment:
        branch = tree.add(escape(equipment.name))
        for child in equipment.children:
            branch.add(escape(child))
    return tree


def _mechanism_tree(taxonomy: RiskCatalog) -> Tree:
    tree = Tree("[bold]Damaging energy mechanisms[/bold]")
    for mechanism in taxonomy.mechanisms:
        count = len(mechanism.scenarios)
        branch = tree.add(f"{escape(mechanism.name)} [dim]({count} scenarios)[/dim]")
        for scenario in mechanism.scenarios:
            branch.add(escape(scenario))
    return tree
