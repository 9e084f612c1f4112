"""Render CLI command -- write the treemap as SVG, HTML or JSON."""

import json
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer

from ..exceptions import RiskMapError
from ..logging_config import setup_logging
from ..session import TreemapSession
from ..visualization import generate_report, render_svg
from . import app
from ._common import (
    build_selection,
    console,
    parse_zoom_path,
    resolve_catalog,
    resolve_config,
    zoom_target,
)


class OutputFormat(str, Enum):
    svg = "svg"
    html = "html"
    json = "json"


@app.command()
def render(
    context: Optional[List[str]] = typer.Option(
        None, "--context", help="Operating context to include (repeatable; default: all)"
    ),
    equipment: Optional[List[str]] = typer.Option(
        None,
        "--equipment",
        help="Equipment as 'Level 1' or 'Level 1/Level 2' (repeatable; default: all)",
    ),
    scenario: Optional[List[str]] = typer.Option(
        None, "--scenario", help="Scenario to include (repeatable; default: all)"
    ),
    mechanism: Optional[List[str]] = typer.Option(
        None, "--mechanism", help="Include every scenario of a damaging energy mechanism"
    ),
    zoom: Optional[str] = typer.Option(
        None, "--zoom", "-z", help="Start zoomed into a branch, e.g. 'Surface/Passenger'"
    ),
    max_depth: Optional[str] = typer.Option(
        None, "--max-depth", "-d", help="Tiers shown below the current root ('unbounded' for all)"
    ),
    width: Optional[int] = typer.Option(None, "--width", min=1, help="Viewport width"),
    height: Optional[int] = typer.Option(None, "--height", min=1, help="Viewport height"),
    title: Optional[str] = typer.Option(None, "--title", help="Root label and map heading"),
    output_format: OutputFormat = typer.Option(
        OutputFormat.svg, "--format", "-f", help="Output format", case_sensitive=False
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file (default: stdout, or riskmap-report.html for html)",
    ),
    catalog_file: Optional[Path] = typer.Option(
        None,
        "--catalog",
        help="JSON taxonomy replacing the built-in catalog",
        exists=True,
        file_okay=True,
        dir_okay=False,
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
    Lay out the risk treemap for a selection and write it out.

    Every operating context, equipment type and scenario is selected unless
    narrowed with the options below.

    [bold cyan]Examples:[/bold cyan]

      riskmap render -o map.svg

      riskmap render --context Surface --mechanism "Vehicle to person" -f json

      riskmap render --zoom Surface/Passenger --max-depth 2 -f html -o map.html
    """
    logger = setup_logging(verbose=verbose)

    try:
        settings = resolve_config(
            config=config,
            title=title,
            max_depth=max_depth,
            width=width,
            height=height,
            catalog_file=catalog_file,
            verbose=verbose,
        )
        catalog = resolve_catalog(settings)
        selection = build_selection(catalog, context, equipment, scenario, mechanism)
        session = TreemapSession(settings, selection=selection, catalog=catalog)

        path = parse_zoom_path(zoom)
        if path:
            session.node_clicked(zoom_target(session.tree, path))
        result = session.result

        if output_format is OutputFormat.html:
            target = output or Path("riskmap-report.html")
            report_path = generate_report(result, settings.title, str(target), session.metrics)
            console.print(f"Report saved to: [bold green]{report_path}[/bold green]")
            return

        if output_format is OutputFormat.json:
            text = json.dumps(result.to_dict(), indent=2)
        else:
            text = render_svg(result, settings.title, session.metrics)

        if output is None:
            typer.echo(text)
        else:
            output.write_text(text, encoding="utf-8")
            console.print(f"Wrote {output_format.value} to [bold green]{output}[/bold green]")

    except (typer.Exit, typer.BadParameter):
        raise
    except RiskMapError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Render failed")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
