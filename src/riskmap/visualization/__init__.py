"""Visualization layer: SVG documents, HTML reports and terminal painting."""

from .report import generate_report
from .svg import EMPTY_MESSAGE, ROOT_HINT, breadcrumb_text, render_svg
from .terminal import CELL_OPTIONS, Cell, paint_cells, to_rich_text

__all__ = [
    "generate_report",
    "EMPTY_MESSAGE",
    "ROOT_HINT",
    "breadcrumb_text",
    "render_svg",
    "CELL_OPTIONS",
    "Cell",
    "paint_cells",
    "to_rich_text",
]
