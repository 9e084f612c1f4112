"""Show CLI command -- print the hierarchy and its layout in the terminal."""

from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..exceptions import RiskMapError
from ..hierarchy import WeightedNode
from ..logging_config import setup_logging
from ..session import TreemapSession
from ..treemap import LayoutResult, TextMetrics, format_value
from ..visualization import (
    CELL_OPTIONS,
    EMPTY_MESSAGE,
    breadcrumb_text,
    paint_cells,
    to_rich_text,
)
from . import app
from ._common import (
    build_selection,
    console,
    parse_zoom_path,
    resolve_catalog,
    resolve_config,
    zoom_target,
)


@app.command()
def show(
    context: Optional[List[str]] = typer.Option(
        None, "--context", help="Operating context to include (repeatable; default: all)"
    ),
    equipment: Optional[List[str]] = typer.Option(
        None, "--equipment", help="Equipment as 'Level 1' or 'Level 1/Level 2' (repeatable)"
    ),
    scenario: Optional[List[str]] = typer.Option(
        None, "--scenario", help="Scenario to include (repeatable; default: all)"
    ),
    mechanism: Optional[List[str]] = typer.Option(
        None, "--mechanism", help="Include every scenario of a damaging energy mechanism"
    ),
    zoom: Optional[str] = typer.Option(None, "--zoom", "-z", help="Branch to start from"),
    max_depth: Optional[str] = typer.Option(
        None, "--max-depth", "-d", help="Tiers shown below the current root"
    ),
    preview: bool = typer.Option(
        False, "--preview", "-p", help="Also paint the treemap with terminal cells"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
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
    Print the weighted hierarchy as a tree and its visible rectangles as a table.

    [bold cyan]Examples:[/bold cyan]

      riskmap show --max-depth 2

      riskmap show --context Underground --zoom Underground/Passenger

      riskmap show --preview
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config=config, max_depth=max_depth, verbose=verbose)
        catalog = resolve_catalog(settings)
        selection = build_selection(catalog, context, equipment, scenario, mechanism)
        session = TreemapSession(settings, selection=selection, catalog=catalog)

        path = parse_zoom_path(zoom)
        if path:
            session.node_clicked(zoom_target(session.tree, path))
        result = session.result

        console.print(
            f"[bold]{escape(settings.title)}[/bold]  [dim]{escape(breadcrumb_text(result))}[/dim]"
        )
        if result.is_empty:
            console.print(f"[yellow]{EMPTY_MESSAGE}[/yellow]")
            raise typer.Exit(0)

        console.print(_tree(result.current_root, settings.max_depth))
        console.print(_table(result))

        if preview:
            grid = replace(
                settings, width=max(40, min(console.width, 160)), height=24, min_viewport=1
            )
            cells = TreemapSession(
                grid,
                selection=selection,
                catalog=catalog,
                options=CELL_OPTIONS,
                metrics=TextMetrics.cells(),
            )
            if path:
                cells.node_clicked(zoom_target(cells.tree, path))
            console.print(to_rich_text(paint_cells(cells.result)))

    except (typer.Exit, typer.BadParameter):
        raise
    except RiskMapError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Show failed")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _tree(root: WeightedNode, max_depth: Optional[int]) -> Tree:
    tree = Tree(f"[bold]{escape(root.name)}[/bold] ({format_value(root.value)})")
    stack = [(root, tree, 0)]
    while stack:
        node, branch, depth = stack.pop()
        if max_depth is not None and depth >= max_depth:
            continue
        for child in node.children:
            label = escape(child.name)
            if not child.is_leaf:
                label = f"{label} ({format_value(child.value)})"
            sub = branch.add(f"{label} [dim]{escape(child.category)}[/dim]")
            stack.append((child, sub, depth + 1))
    return tree


def _table(result: LayoutResult) -> Table:
    table = Table(title="Visible rectangles", show_lines=False)
    table.add_column("Depth", justify="right")
    table.add_column("Category", style="dim")
    table.add_column("Node")
    table.add_column("Value", justify="right")
    table.add_column("x0,y0 → x1,y1", justify="right")
    for node in result.rects:
        table.add_row(
            str(node.depth),
            escape(node.ref.category),
            escape(node.ref.name),
            format_value(node.ref.value),
            f"{node.x0:g},{node.y0:g} → {node.x1:g},{node.y1:g}",
        )
    return table
