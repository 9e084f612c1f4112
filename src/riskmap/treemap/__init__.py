"""Treemap layout engine: tiling, colour scale, label fitting."""

from .colors import fill_for_height
from .labels import TextMetrics, fit_label, format_value
from .layout import layout, resolve_root, subtree_sums
from .models import LayoutNode, LayoutOptions, LayoutResult, RenderItem, Viewport
from .squarify import squarify

__all__ = [
    "fill_for_height",
    "TextMetrics",
    "fit_label",
    "format_value",
    "layout",
    "resolve_root",
    "subtree_sums",
    "LayoutNode",
    "LayoutOptions",
    "LayoutResult",
    "RenderItem",
    "Viewport",
    "squarify",
]
