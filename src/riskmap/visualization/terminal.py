"""Paint a LayoutResult onto a character grid.

The layout has to be computed in cell units (viewport = columns x rows, text
metrics from :meth:`TextMetrics.cells`) for the output to line up. Items are
painted in order, so descendants cover their ancestors' backgrounds and
leave the ancestors' header rows visible.
"""

from __future__ import annotations

from typing import NamedTuple

from rich.style import Style
from rich.text import Text

from ..treemap.colors import text_color_for
from ..treemap.labels import TextMetrics
from ..treemap.models import LayoutOptions, LayoutResult, RenderItem
from .svg import EMPTY_MESSAGE

# Character cells have no room for pixel padding: one cell of frame, one
# header row and no gutter.
CELL_OPTIONS = LayoutOptions(padding_outer=1, padding_top=1, padding_inner=0)


class Cell(NamedTuple):
    char: str
    background: str
    foreground: str
    bold: bool = False


BLANK = Cell(" ", "default", "default")

Grid = list[list[Cell]]


def paint_cells(result: LayoutResult, metrics: TextMetrics = TextMetrics.cells()) -> Grid:
    """Rasterize ``result`` to ``viewport.height`` rows of ``viewport.width`` cells."""
    width, height = result.viewport.width, result.viewport.height
    grid: Grid = [[BLANK] * width for _ in range(height)]

    if result.is_empty:
        _write(grid, max(0, (width - len(EMPTY_MESSAGE)) // 2), height // 2, EMPTY_MESSAGE, BLANK)
        return grid

    for item in result.items:
        _paint_item(grid, item, metrics)
    return grid


def to_rich_text(grid: Grid) -> Text:
    """Convert a painted grid into styled rich Text, one line per row."""
    text = Text(no_wrap=True, overflow="crop")
    for row_index, row in enumerate(grid):
        if row_index:
            text.append("\n")
        run: list[str] = []
        run_cell = None
        for cell in row:
            key = (cell.background, cell.foreground, cell.bold)
            if run_cell is not None and key != run_cell:
                text.append("".join(run), _style(*run_cell))
                run = []
            run_cell = key
            run.append(cell.char)
        if run_cell is not None:
            text.append("".join(run), _style(*run_cell))
    return text


def _paint_item(grid: Grid, item: RenderItem, metrics: TextMetrics) -> None:
    rows, cols = len(grid), len(grid[0]) if grid else 0
    x0, y0 = max(0, int(item.x)), max(0, int(item.y))
    x1, y1 = min(cols, int(item.x + item.width)), min(rows, int(item.y + item.height))
    fill = Cell(" ", item.fill, text_color_for(item.fill), item.is_interactive)
    for y in range(y0, y1):
        for x in range(x0, x1):
            grid[y][x] = fill

    top = int(item.y + metrics.first_baseline - 1)
    left = int(item.x + metrics.inset)
    for offset, line in enumerate(item.label_lines):
        row = top + int(offset * metrics.line_advance)
        if y0 <= row < y1:
            _write(grid, left, row, line[: max(0, x1 - left)], fill)


def _write(grid: Grid, x: int, y: int, text: str, template: Cell) -> None:
    row = grid[y]
    for i, char in enumerate(text):
        if 0 <= x + i < len(row):
            row[x + i] = template._replace(char=char)


def _style(background: str, foreground: str, bold: bool) -> Style:
    return Style(
        bgcolor=None if background == "default" else background,
        color=None if foreground == "default" else foreground,
        bold=bold,
    )
