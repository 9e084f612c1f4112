"""Treemap layout engine.

One pass turns ``(tree, current root, viewport, max depth)`` into positioned
rectangles and draw calls:

1. Re-derive subtree sums below the current root.
2. Position nodes top-down: each node is inset by the padding its parent
   assigned, then its children are squarified into what is left after the
   header band and outer padding. Boundaries are rounded to whole units.
3. Keep nodes at most ``max_depth`` tiers below the current root. Deeper
   nodes are never positioned, but their weight still sizes their ancestors.
4. Colour by height and fit labels.

Degenerate rectangles (no width or no height left after padding) are
dropped from the output; nothing in a pass raises for acyclic,
non-negative input.
"""

from __future__ import annotations

import math
from typing import Optional

from ..hierarchy.models import WeightedNode
from ..logging_config import get_logger
from .colors import fill_for_height
from .labels import TextMetrics, fit_label
from .models import LayoutNode, LayoutOptions, LayoutResult, RenderItem, Viewport
from .squarify import squarify

logger = get_logger(__name__)


class _Cell:
    """Mutable working record for one node during a pass."""

    __slots__ = ("node", "value", "rel_depth", "x0", "y0", "x1", "y1", "children")

    def __init__(self, node: WeightedNode, value: float, rel_depth: int) -> None:
        self.node = node
        self.value = value
        self.rel_depth = rel_depth
        self.x0 = self.y0 = self.x1 = self.y1 = 0.0
        self.children: list[_Cell] = []


def layout(
    tree: WeightedNode,
    current_root: Optional[WeightedNode] = None,
    viewport: Viewport = Viewport(960, 600),
    max_depth: Optional[int] = None,
    options: LayoutOptions = LayoutOptions(),
    metrics: TextMetrics = TextMetrics(),
) -> LayoutResult:
    """Lay out the subtree under ``current_root`` inside ``viewport``.

    Args:
        tree: The full hierarchy (true root)
        current_root: Zoom target inside ``tree``; matched by path, so a node
            from an earlier build resolves to its counterpart. Defaults to the
            true root, which is also the fallback when the path is gone.
        viewport: Drawing surface
        max_depth: Tiers to show below the current root (None = all)
        options: Padding and rounding
        metrics: Text measurement for label fitting

    Returns:
        LayoutResult; ``is_empty`` when the current root weighs nothing or
        the viewport leaves it no area.
    """
    current = resolve_root(tree, current_root)
    breadcrumb = tree.trail(current.path) or (tree,)
    empty = LayoutResult(
        tree=tree,
        current_root=current,
        breadcrumb_path=breadcrumb,
        viewport=viewport,
        max_depth=max_depth,
    )

    sums, heights = _aggregate(current)
    if sums[id(current)] <= 0:
        logger.debug("Nothing to lay out under '%s' (total value 0)", current.name)
        return empty

    cells = _position(current, sums, viewport, max_depth, options)
    if options.round:
        for cell in cells:
            cell.x0 = _round(cell.x0)
            cell.y0 = _round(cell.y0)
            cell.x1 = _round(cell.x1)
            cell.y1 = _round(cell.y1)

    nodes = [
        LayoutNode(
            ref=cell.node,
            depth=current.depth + cell.rel_depth,
            height=heights[id(cell.node)],
            x0=cell.x0,
            y0=cell.y0,
            x1=cell.x1,
            y1=cell.y1,
            visible=max_depth is None or cell.rel_depth <= max_depth,
            relative_depth=cell.rel_depth,
        )
        for cell in cells
    ]
    frame = nodes[0]
    if frame.is_degenerate:
        logger.debug("Viewport %dx%d leaves no room to draw", viewport.width, viewport.height)
        return empty
    rects = tuple(n for n in nodes[1:] if n.visible and not n.is_degenerate)
    suppressed = len(nodes) - 1 - len(rects)
    if suppressed:
        logger.debug("Suppressed %d degenerate rectangle(s)", suppressed)

    items = tuple(
        _render_item(n, current, max_depth, metrics, sums[id(n.ref)]) for n in (frame,) + rects
    )
    return LayoutResult(
        tree=tree,
        current_root=current,
        breadcrumb_path=breadcrumb,
        viewport=viewport,
        max_depth=max_depth,
        frame=frame,
        rects=rects,
        items=items,
    )


def resolve_root(tree: WeightedNode, node: Optional[WeightedNode]) -> WeightedNode:
    """Find ``node``'s counterpart in ``tree``, falling back to the true root."""
    if node is None:
        return tree
    found = tree.find(node.path)
    if found is None:
        logger.info("Zoom target %s not found in current tree; using the root", "/".join(node.path))
        return tree
    return found


def subtree_sums(root: WeightedNode) -> dict[int, float]:
    """Leaf-weight totals for every node under ``root``, keyed by ``id``."""
    return _aggregate(root)[0]


def _aggregate(root: WeightedNode) -> tuple[dict[int, float], dict[int, int]]:
    """Subtree sums and heights for every node under ``root``, keyed by ``id``."""
    sums: dict[int, float] = {}
    heights: dict[int, int] = {}
    # Reversed pre-order visits every child before its parent.
    for node in reversed(list(root.iter_nodes())):
        if node.children:
            sums[id(node)] = sum(sums[id(c)] for c in node.children)
            heights[id(node)] = 1 + max(heights[id(c)] for c in node.children)
        else:
            sums[id(node)] = node.value
            heights[id(node)] = 0
    return sums, heights


def _position(
    root: WeightedNode,
    sums: dict[int, float],
    viewport: Viewport,
    max_depth: Optional[int],
    options: LayoutOptions,
) -> list[_Cell]:
    """Position cells in pre-order; returns them parents-first."""
    root_cell = _Cell(root, sums[id(root)], 0)
    root_cell.x1 = float(viewport.width)
    root_cell.y1 = float(viewport.height)

    padding = {0: 0.0}
    order: list[_Cell] = []
    stack = [root_cell]
    while stack:
        cell = stack.pop()
        p = padding[cell.rel_depth]
        x0, y0, x1, y1 = cell.x0 + p, cell.y0 + p, cell.x1 - p, cell.y1 - p
        if x1 < x0:
            x0 = x1 = (x0 + x1) / 2
        if y1 < y0:
            y0 = y1 = (y0 + y1) / 2
        cell.x0, cell.y0, cell.x1, cell.y1 = x0, y0, x1, y1
        order.append(cell)

        if not cell.node.children:
            continue
        if max_depth is not None and cell.rel_depth >= max_depth:
            continue

        p = padding[cell.rel_depth + 1] = options.padding_inner / 2
        x0 += options.padding_outer - p
        y0 += options.padding_top - p
        x1 -= options.padding_outer - p
        y1 -= options.padding_outer - p
        if x1 < x0:
            x0 = x1 = (x0 + x1) / 2
        if y1 < y0:
            y0 = y1 = (y0 + y1) / 2

        children = sorted(cell.node.children, key=lambda c: sums[id(c)], reverse=True)
        cell.children = [_Cell(c, sums[id(c)], cell.rel_depth + 1) for c in children]
        tiles = squarify([c.value for c in cell.children], x0, y0, x1, y1, options.ratio)
        for child, (cx0, cy0, cx1, cy1) in zip(cell.children, tiles):
            child.x0, child.y0, child.x1, child.y1 = cx0, cy0, cx1, cy1
        stack.extend(reversed(cell.children))
    return order


def _render_item(
    node: LayoutNode,
    current: WeightedNode,
    max_depth: Optional[int],
    metrics: TextMetrics,
    value: float,
) -> RenderItem:
    ref = node.ref
    at_cutoff = bool(ref.children) and max_depth is not None and node.relative_depth == max_depth
    wrap = ref.is_leaf or at_cutoff
    lines = fit_label(
        ref.name,
        value,
        node.dx,
        node.dy,
        wrap=wrap,
        metrics=metrics,
        show_value=not ref.is_leaf,
    )
    return RenderItem(
        x=node.x0,
        y=node.y0,
        width=node.dx,
        height=node.dy,
        depth=node.depth,
        fill_color_index=node.height,
        fill=fill_for_height(node.height),
        label_lines=lines,
        is_leaf=ref.is_leaf,
        is_interactive=bool(ref.children) and ref is not current,
        category=ref.category,
        path=ref.path,
        value=value,
    )


def _round(v: float) -> float:
    # Half-up, matching browser rounding of raster coordinates.
    return float(math.floor(v + 0.5))
