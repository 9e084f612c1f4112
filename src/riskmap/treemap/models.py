"""Data models produced by one layout pass.

Everything here is ephemeral: a new LayoutResult is computed for every
selection change, zoom, breadcrumb click or resize, and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..hierarchy.models import NodePath, WeightedNode

GOLDEN_RATIO = (1 + 5**0.5) / 2


@dataclass(frozen=True)
class Viewport:
    """Size of the drawing surface in raster units."""

    width: int
    height: int

    def clamped(self, minimum: int) -> "Viewport":
        return Viewport(max(self.width, minimum), max(self.height, minimum))


@dataclass(frozen=True)
class LayoutOptions:
    """Geometry of the nested rectangles.

    Attributes:
        padding_outer: Inset between a node's frame and its children (left,
            right, bottom)
        padding_top: Header band above the children, reserved for the label
        padding_inner: Gutter between sibling rectangles
        round: Snap boundaries to whole raster units
        ratio: Target aspect ratio of the squarified rows
    """

    padding_outer: float = 3
    padding_top: float = 19
    padding_inner: float = 1
    round: bool = True
    ratio: float = GOLDEN_RATIO


@dataclass(frozen=True)
class LayoutNode:
    """A positioned node.

    ``depth`` is absolute (from the true root) and ``height`` is the distance
    to the deepest descendant; both survive zooming unchanged.
    """

    ref: WeightedNode
    depth: int
    height: int
    x0: float
    y0: float
    x1: float
    y1: float
    visible: bool = True
    relative_depth: int = 0

    @property
    def dx(self) -> float:
        return self.x1 - self.x0

    @property
    def dy(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return max(0.0, self.dx) * max(0.0, self.dy)

    @property
    def is_degenerate(self) -> bool:
        return self.dx <= 0 or self.dy <= 0

    def contains(self, x: float, y: float) -> bool:
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1


@dataclass(frozen=True)
class RenderItem:
    """Draw call for one rectangle and its label."""

    x: float
    y: float
    width: float
    height: float
    depth: int
    fill_color_index: int
    fill: str
    label_lines: tuple[str, ...]
    is_leaf: bool
    is_interactive: bool
    category: str
    path: NodePath
    value: float

    @property
    def label(self) -> str:
        return "\n".join(self.label_lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "fillColorIndex": self.fill_color_index,
            "fill": self.fill,
            "label": self.label,
            "isLeaf": self.is_leaf,
            "isInteractive": self.is_interactive,
            "category": self.category,
            "path": list(self.path),
            "value": self.value,
        }


@dataclass(frozen=True)
class LayoutResult:
    """Output of one layout pass.

    ``frame`` is the current root's own rectangle (the backdrop); ``rects``
    are its visible, non-degenerate descendants in painting order (parents
    before children). ``items`` holds the draw calls for the frame followed
    by the rects.
    """

    tree: WeightedNode
    current_root: WeightedNode
    breadcrumb_path: tuple[WeightedNode, ...]
    viewport: Viewport
    max_depth: Optional[int] = None
    frame: Optional[LayoutNode] = None
    rects: tuple[LayoutNode, ...] = ()
    items: tuple[RenderItem, ...] = field(default=())

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw and the placeholder applies."""
        return self.frame is None

    @property
    def at_true_root(self) -> bool:
        return self.current_root is self.tree

    def breadcrumb_segments(self) -> tuple[WeightedNode, ...]:
        """Clickable trail entries: every ancestor of the current root."""
        return self.breadcrumb_path[:-1]

    def hit_test(self, x: float, y: float) -> Optional[LayoutNode]:
        """Deepest drawn node under the point, or None outside the frame."""
        if self.frame is None:
            return None
        # Painting order puts descendants after their ancestors.
        for node in reversed(self.rects):
            if node.contains(x, y):
                return node
        if self.frame.contains(x, y):
            return self.frame
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
            "maxDepth": self.max_depth,
            "currentRoot": list(self.current_root.path),
            "breadcrumb": [node.name for node in self.breadcrumb_path],
            "empty": self.is_empty,
            "items": [item.to_dict() for item in self.items],
        }
