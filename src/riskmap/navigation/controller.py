"""Zoom and breadcrumb navigation over a rebuildable hierarchy.

States:
  AtTrueRoot       current root is the tree's root
  ZoomedIn(node)   current root is an internal node below it

The controller never patches state in place: every transition swaps in a
new NavigationState. Nodes are matched by their structural path, so the
zoom survives a rebuild whenever the same branch still exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..hierarchy.models import WeightedNode
from ..logging_config import get_logger

logger = get_logger(__name__)

AT_TRUE_ROOT = "AtTrueRoot"
ZOOMED_IN = "ZoomedIn"


@dataclass(frozen=True)
class NavigationState:
    """Current root plus the trail from the true root down to it."""

    tree: WeightedNode
    current_root: WeightedNode
    breadcrumb_path: tuple[WeightedNode, ...]

    @classmethod
    def at_root(cls, tree: WeightedNode) -> "NavigationState":
        return cls(tree=tree, current_root=tree, breadcrumb_path=(tree,))

    @property
    def phase(self) -> str:
        return AT_TRUE_ROOT if self.current_root is self.tree else ZOOMED_IN


class NavigationController:
    """Owns the current root for one treemap."""

    def __init__(self, tree: WeightedNode) -> None:
        self._state = NavigationState.at_root(tree)

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def tree(self) -> WeightedNode:
        return self._state.tree

    @property
    def current_root(self) -> WeightedNode:
        return self._state.current_root

    @property
    def breadcrumb_path(self) -> tuple[WeightedNode, ...]:
        return self._state.breadcrumb_path

    @property
    def at_true_root(self) -> bool:
        return self._state.phase == AT_TRUE_ROOT

    @property
    def phase(self) -> str:
        return self._state.phase

    def zoom_into(self, node: WeightedNode) -> bool:
        """Make ``node`` the current root. Only nodes with children qualify.

        Returns True if the current root changed.
        """
        if not node.children:
            return False
        target = self._locate(node)
        if target is None or not target.children:
            logger.info("Zoom target %s not in current tree; ignoring", _describe(node))
            return False
        return self._anchor(target)

    def zoom_to(self, ancestor: WeightedNode) -> bool:
        """Breadcrumb click: jump to an ancestor of the current root.

        Clicking the current root itself, or anything off the trail, does
        nothing.
        """
        trail = self._state.breadcrumb_path
        depth = len(ancestor.path)
        if depth >= len(trail) - 1 or trail[depth].path != ancestor.path:
            return False
        return self._anchor(trail[depth])

    def zoom_out(self) -> bool:
        """Go up one tier (the last breadcrumb segment)."""
        trail = self._state.breadcrumb_path
        if len(trail) < 2:
            return False
        return self._anchor(trail[-2])

    def reset(self) -> bool:
        return self._anchor(self._state.tree)

    def on_hierarchy_rebuilt(self, new_tree: WeightedNode) -> bool:
        """Swap in a rebuilt tree and re-anchor the current root by path.

        Returns True if the zoom was kept, False if it fell back to the new
        true root.
        """
        path = self._state.current_root.path
        trail = new_tree.trail(path)
        if trail is not None and (not path or trail[-1].children):
            self._state = NavigationState(new_tree, trail[-1], trail)
            return True
        logger.info("Branch %s no longer exists; zoom reset to the root", "/".join(path))
        self._state = NavigationState.at_root(new_tree)
        return False

    def _locate(self, node: WeightedNode) -> Optional[WeightedNode]:
        return self._state.tree.find(node.path)

    def _anchor(self, target: WeightedNode) -> bool:
        if target is self._state.current_root:
            return False
        trail = self._state.tree.trail(target.path)
        if trail is None:
            logger.info("No trail to %s; staying put", _describe(target))
            return False
        self._state = NavigationState(self._state.tree, target, trail)
        logger.debug("Current root is now %s", _describe(target))
        return True


def _describe(node: WeightedNode) -> str:
    return "/".join(node.path) or f"<root {node.name}>"
