"""riskmap TUI - the treemap as a zoomable terminal view.

Layout:
┌─────────────────────────────────────────────────────────────────────┐
│ VEHICLE INCIDENT - 4 contexts · 420 scenarios · all tiers           │
│ Vehicle Incident / Surface / Passenger                              │
├──────────────────────────────────────────────────┬──────────────────┤
│                                                  │ Contexts         │
│  (treemap painted with terminal cells;           │ [x] Surface      │
│   click a branch to zoom into it)                │ Equipment        │
│                                                  │ Mechanisms       │
├──────────────────────────────────────────────────┴──────────────────┤
│ Equipment Level 2: Light Vehicles (90)                              │
│ esc Zoom out  r Reset  s Selection  q Quit                          │
└─────────────────────────────────────────────────────────────────────┘

Clicking a rectangle zooms into it, clicking a breadcrumb segment jumps back
up, and hovering names the node's category. The selection panel rebuilds
the hierarchy on every change; the zoom is kept when the branch survives.
"""

from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, VerticalScroll
from textual.widget import Widget
from textual.widgets import Footer, SelectionList, Static

from ..config import TreemapConfig
from ..exceptions import RiskMapError
from ..logging_config import get_logger, setup_logging
from ..session import TreemapSession
from ..taxonomy import EquipmentSelection, RiskCatalog, SelectionState
from ..treemap import LayoutResult, TextMetrics, format_value
from ..visualization import CELL_OPTIONS, EMPTY_MESSAGE, ROOT_HINT, paint_cells, to_rich_text
from . import app
from ._common import (
    build_selection,
    console,
    parse_zoom_path,
    resolve_catalog,
    resolve_config,
    zoom_target,
)

logger = get_logger(__name__)

EQUIPMENT_SEPARATOR = "/"


# ══════════════════════════════════════════════════════════════════════════════
# Treemap Widget
# ══════════════════════════════════════════════════════════════════════════════


class TreemapView(Widget):
    """Paints the session's current layout; forwards clicks and resizes."""

    DEFAULT_CSS = """
    TreemapView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, session: TreemapSession, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session

    def render(self) -> Text:
        result = self.session.result
        if result.is_empty:
            return Text(EMPTY_MESSAGE, style="dim", justify="center")
        return to_rich_text(paint_cells(result, self.session.metrics))

    def on_resize(self, event: events.Resize) -> None:
        self.session.viewport_resized(event.size.width, event.size.height)
        self.app.refresh_view()

    def on_click(self, event: events.Click) -> None:
        before = self.session.current_root
        self.session.click_at(event.x, event.y)
        if self.session.current_root is not before:
            self.app.refresh_view()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        hit = self.session.result.hit_test(event.x, event.y)
        self.app.show_hover(hit.ref if hit is not None else None)

    def on_leave(self, event: events.Leave) -> None:
        self.app.show_hover(None)


# ══════════════════════════════════════════════════════════════════════════════
# Main Application
# ══════════════════════════════════════════════════════════════════════════════


class RiskMapApp(App):
    """riskmap TUI - click to zoom, breadcrumb to go back."""

    TITLE = "riskmap"

    CSS = """
    Screen {
        background: $surface;
    }

    #header-bar {
        dock: top;
        height: 3;
        padding: 0 1;
        background: $primary-background;
    }

    #breadcrumb {
        width: 100%;
        color: $text-muted;
    }

    #body {
        width: 100%;
        height: 1fr;
    }

    #selection-panel {
        width: 42;
        height: 100%;
        border-left: solid $primary;
    }

    #selection-panel SelectionList {
        height: auto;
        max-height: 14;
    }

    .panel-title {
        padding: 1 1 0 1;
        text-style: bold;
    }

    #hover {
        dock: bottom;
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    .hidden {
        display: none;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "zoom_out", "Zoom out", priority=True),
        Binding("b", "zoom_out", "Zoom out", show=False),
        Binding("r", "reset", "Reset"),
        Binding("s", "toggle_selection", "Selection"),
        Binding("plus", "deeper", "More tiers"),
        Binding("minus", "shallower", "Fewer tiers"),
    ]

    def __init__(self, session: TreemapSession) -> None:
        super().__init__()
        self.session = session

    @property
    def catalog(self) -> RiskCatalog:
        return self.session.catalog

    def compose(self) -> ComposeResult:
        with Container(id="header-bar"):
            yield Static("", id="header-title")
            yield Static("", id="breadcrumb")

        with Horizontal(id="body"):
            yield TreemapView(self.session, id="treemap")
            with VerticalScroll(id="selection-panel", classes="hidden"):
                yield Static("Operating contexts", classes="panel-title")
                yield SelectionList[str](*self._context_options(), id="contexts")
                yield Static("Equipment", classes="panel-title")
                yield SelectionList[str](*self._equipment_options(), id="equipment")
                yield Static("Damaging energy mechanisms", classes="panel-title")
                yield SelectionList[str](*self._mechanism_options(), id="mechanisms")

        yield Static("", id="hover")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()
        self.notify(
            "Click to zoom · breadcrumb to go back · s to edit the selection",
            title="riskmap",
            timeout=5,
        )

    # ── View updates ──────────────────────────────────────────────────

    def refresh_view(self) -> None:
        result = self.session.result
        self.query_one("#header-title", Static).update(self._title_markup(result))
        self.query_one("#breadcrumb", Static).update(self._breadcrumb_markup(result))
        self.query_one("#treemap", TreemapView).refresh()

    def show_hover(self, node) -> None:
        hover = self.query_one("#hover", Static)
        if node is None:
            hover.update("")
            return
        label = node.name if node.is_leaf else f"{node.name} ({format_value(node.value)})"
        hover.update(f"[bold]{escape(node.category)}[/bold]: {escape(label)}")

    def _title_markup(self, result: LayoutResult) -> str:
        tree = result.tree
        depth = "all tiers" if self.session.max_depth is None else f"{self.session.max_depth} tiers"
        return (
            f"[bold]{escape(tree.name.upper())}[/bold] - "
            f"{len(tree.children)} contexts · {tree.leaf_count()} scenarios · {depth}"
        )

    def _breadcrumb_markup(self, result: LayoutResult) -> str:
        if result.at_true_root:
            return escape(ROOT_HINT)
        parts = [
            f"[@click=app.breadcrumb({i})]{escape(node.name)}[/]"
            for i, node in enumerate(result.breadcrumb_segments())
        ]
        parts.append(f"[bold]{escape(result.current_root.name)}[/bold]")
        return " / ".join(parts)

    # ── Actions ──────────────────────────────────────────────────────

    def action_breadcrumb(self, index: int) -> None:
        segments = self.session.result.breadcrumb_segments()
        if 0 <= index < len(segments):
            self.session.breadcrumb_clicked(segments[index])
            self.refresh_view()

    def action_zoom_out(self) -> None:
        panel = self.query_one("#selection-panel")
        if not panel.has_class("hidden"):
            panel.add_class("hidden")
            return
        self.session.zoom_out()
        self.refresh_view()

    def action_reset(self) -> None:
        self.session.reset()
        self.refresh_view()

    def action_toggle_selection(self) -> None:
        self.query_one("#selection-panel").toggle_class("hidden")

    def action_deeper(self) -> None:
        if self.session.max_depth is not None:
            self.session.set_max_depth(self.session.max_depth + 1)
            self.refresh_view()

    def action_shallower(self) -> None:
        current = self.session.max_depth
        if current is None:
            current = self.session.current_root.height + 1
        if current > 1:
            self.session.set_max_depth(current - 1)
            self.refresh_view()

    # ── Selection panel ──────────────────────────────────────────────

    def on_selection_list_selected_changed(self, event: SelectionList.SelectedChanged) -> None:
        chosen = set(event.selection_list.selected)
        list_id = event.selection_list.id
        if list_id == "contexts":
            self.session.apply(lambda s: s.with_contexts(chosen))
        elif list_id == "equipment":
            pairs = [tuple(value.split(EQUIPMENT_SEPARATOR, 1)) for value in chosen]
            equipment = EquipmentSelection.from_pairs(self.catalog, pairs)
            self.session.apply(lambda s: s.with_equipment(equipment))
        elif list_id == "mechanisms":
            self.session.apply(lambda s: s.with_mechanisms(chosen, self.catalog))
        logger.debug("Selection panel '%s' changed: %d checked", list_id, len(chosen))
        self.refresh_view()

    def _context_options(self) -> list[tuple[str, str, bool]]:
        selection = self.session.selection
        return [(name, name, name in selection.contexts) for name in self.catalog.contexts]

    def _equipment_options(self) -> list[tuple[str, str, bool]]:
        equipment = self.session.selection.equipment
        return [
            (
                f"{e.name} › {child}",
                f"{e.name}{EQUIPMENT_SEPARATOR}{child}",
                equipment.is_selected(e.name, child),
            )
            for e in self.catalog.equipment
            for child in e.children
        ]

    def _mechanism_options(self) -> list[tuple[str, str, bool]]:
        scenarios = self.session.selection.scenarios
        return [
            (m.name, m.name, any(s in scenarios for s in m.scenarios))
            for m in self.catalog.mechanisms
        ]


# ══════════════════════════════════════════════════════════════════════════════
# Runner
# ══════════════════════════════════════════════════════════════════════════════


def cell_session(
    settings: TreemapConfig,
    selection: Optional[SelectionState] = None,
    catalog: Optional[RiskCatalog] = None,
) -> TreemapSession:
    """A session measured in terminal cells rather than pixels."""
    return TreemapSession(
        replace(settings, min_viewport=1),
        selection=selection,
        catalog=catalog,
        options=CELL_OPTIONS,
        metrics=TextMetrics.cells(),
    )


def run_tui(session: TreemapSession) -> None:
    """Launch the TUI for ``session``."""
    import sys

    if not sys.stdin.isatty():
        console.print("[red]TUI requires interactive terminal. Use 'riskmap show' instead.[/]")
        raise typer.Exit(1)

    RiskMapApp(session).run()


@app.command()
def tui(
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
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[str] = typer.Option(
        None, "--log-file", help="Write logs to a file (the terminal is taken by the TUI)"
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
    Explore the treemap interactively.

    Click a rectangle to zoom in, click a breadcrumb segment to go back up.
    Press [bold]s[/bold] to edit the selection, [bold]esc[/bold] to zoom
    out, [bold]r[/bold] to reset and [bold]q[/bold] to quit.

    [bold cyan]Examples:[/bold cyan]

      riskmap tui

      riskmap tui --context Surface --max-depth 2

      riskmap tui --mechanism "Vehicle to person"
    """
    setup_logging(verbose=verbose, log_file=log_file, to_console=False)

    try:
        settings = resolve_config(config=config, max_depth=max_depth, verbose=verbose)
        catalog = resolve_catalog(settings)
        selection = build_selection(catalog, context, equipment, scenario, mechanism)
        session = cell_session(settings, selection, catalog)
        path = parse_zoom_path(zoom)
        if path:
            session.node_clicked(zoom_target(session.tree, path))
    except RiskMapError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    try:
        run_tui(session)
    except KeyboardInterrupt:
        console.print("\n[dim]Exited.[/]")
