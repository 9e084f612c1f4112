"""Weighted hierarchy model.

Tiers of the risk taxonomy:
  Depth 0: Risk (the true root, labelled with the map title)
  Depth 1: Operating context
  Depth 2: Equipment level 1
  Depth 3: Equipment level 2
  Depth 4: Damaging energy mechanism
  Depth 5: Scenario (leaf, weight 1)

Nodes are immutable and rebuilt wholesale on every selection change. The
only identity that survives a rebuild is the structural ``path``: the names
from (but excluding) the true root down to the node.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any, Iterator, Mapping, Optional, Sequence

from ..exceptions import MalformedNodeError, NegativeValueError
from ..taxonomy.catalog import NODE_CATEGORIES, category_for_depth

NodePath = tuple[str, ...]


class Tier(Enum):
    """Fixed depth schema of the taxonomy."""

    ROOT = 0
    OPERATING_CONTEXT = 1
    EQUIPMENT_L1 = 2
    EQUIPMENT_L2 = 3
    MECHANISM = 4
    SCENARIO = 5

    @property
    def label(self) -> str:
        return NODE_CATEGORIES[self.value]

    @classmethod
    def for_depth(cls, depth: int) -> Optional["Tier"]:
        for tier in cls:
            if tier.value == depth:
                return tier
        return None


@dataclass(frozen=True, eq=False)
class WeightedNode:
    """One taxonomy entity with its aggregated weight.

    Leaves carry their own weight; every other node carries the sum of its
    children's weights. Equality is identity: two builds never share nodes.
    """

    name: str
    value: float = 0
    children: tuple["WeightedNode", ...] = ()
    path: NodePath = ()

    @classmethod
    def leaf(cls, name: str, path: NodePath, value: float = 1) -> "WeightedNode":
        _check_weight(path, value)
        return cls(name=name, value=value, path=path)

    @classmethod
    def branch(
        cls, name: str, path: NodePath, children: Sequence["WeightedNode"]
    ) -> "WeightedNode":
        children = tuple(children)
        return cls(name=name, value=sum(c.value for c in children), children=children, path=path)

    # -- structure --------------------------------------------------------

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def tier(self) -> Optional[Tier]:
        return Tier.for_depth(self.depth)

    @property
    def category(self) -> str:
        return category_for_depth(self.depth)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @cached_property
    def height(self) -> int:
        """Distance to the deepest descendant (0 for a leaf)."""
        return subtree_heights(self)[id(self)]

    @cached_property
    def _index(self) -> dict[str, "WeightedNode"]:
        index: dict[str, WeightedNode] = {}
        for child in self.children:
            index.setdefault(child.name, child)
        return index

    def child(self, name: str) -> Optional["WeightedNode"]:
        return self._index.get(name)

    def find(self, path: Sequence[str]) -> Optional["WeightedNode"]:
        """Resolve a path relative to this node, one direct lookup per tier."""
        node: Optional[WeightedNode] = self
        for name in path:
            node = node.child(name)
            if node is None:
                return None
        return node

    def trail(self, path: Sequence[str]) -> Optional[tuple["WeightedNode", ...]]:
        """Nodes from this one down to ``path`` inclusive, or None on a miss."""
        nodes = [self]
        for name in path:
            nxt = nodes[-1].child(name)
            if nxt is None:
                return None
            nodes.append(nxt)
        return tuple(nodes)

    def iter_nodes(self) -> Iterator["WeightedNode"]:
        """Pre-order traversal."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def leaves(self) -> Iterator["WeightedNode"]:
        return (node for node in self.iter_nodes() if node.is_leaf)

    def leaf_count(self) -> int:
        return sum(1 for _ in self.leaves())

    def is_consistent(self) -> bool:
        """Check the aggregation invariant over the whole subtree."""
        for node in self.iter_nodes():
            if node.children and not math.isclose(
                node.value, sum(c.value for c in node.children)
            ):
                return False
        return True

    def to_dict(self) -> dict[str, Any]:
        root: dict[str, Any] = {"name": self.name, "value": self.value}
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            if not node.children:
                continue
            out["children"] = []
            for child in node.children:
                child_out = {"name": child.name, "value": child.value}
                out["children"].append(child_out)
                stack.append((child, child_out))
        return root

    def __repr__(self) -> str:
        return f"WeightedNode(name={self.name!r}, value={self.value}, path={self.path!r})"


def from_mapping(data: Mapping[str, Any], path: NodePath = ()) -> WeightedNode:
    """Build a weighted tree from producer input shaped ``{name, value?, children?}``.

    Leaf weights default to 0 when absent. An internal node's own ``value``
    is validated but replaced by the sum of its children so the aggregation
    invariant holds no matter what the producer sent. Input is assumed to be
    acyclic.

    Raises:
        MalformedNodeError: Missing name, non-numeric value, bad children.
        NegativeValueError: A negative weight anywhere in the input.
    """
    # Validate in pre-order, then assemble bottom-up; depth is bounded by
    # memory, not by the interpreter's recursion limit.
    parsed: list[tuple[str, Optional[float], NodePath, int]] = []
    stack = [(data, path)]
    while stack:
        raw, node_path = stack.pop()
        name, value, raw_children = _parse_node(raw, node_path)
        parsed.append((name, value, node_path, len(raw_children)))
        # The root is addressed by the empty path; descendants by their names.
        for child in reversed(raw_children):
            child_name = child.get("name") if isinstance(child, Mapping) else None
            stack.append((child, node_path + (str(child_name),)))

    built: list[WeightedNode] = []
    for name, value, node_path, child_count in reversed(parsed):
        if not child_count:
            built.append(WeightedNode(name=name, value=value or 0, path=node_path))
            continue
        # Reversed pre-order leaves the first child on top of the stack.
        children = built[-child_count:][::-1]
        del built[-child_count:]
        built.append(WeightedNode.branch(name, node_path, children))
    return built[0]


def subtree_heights(root: WeightedNode) -> dict[int, int]:
    """Height of every node under ``root``, keyed by ``id``."""
    heights: dict[int, int] = {}
    # Reversed pre-order visits every child before its parent.
    for node in reversed(list(root.iter_nodes())):
        if node.children:
            heights[id(node)] = 1 + max(heights[id(c)] for c in node.children)
        else:
            heights[id(node)] = 0
    return heights


def _parse_node(
    data: Any, path: NodePath
) -> tuple[str, Optional[float], Sequence[Any]]:
    if not isinstance(data, Mapping):
        raise MalformedNodeError(path, f"expected a mapping, got {type(data).__name__}")
    name = data.get("name")
    if not isinstance(name, str):
        raise MalformedNodeError(path, "missing or non-string 'name'")

    value = data.get("value")
    if value is not None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedNodeError(path, f"non-numeric value {value!r}")
        _check_weight(path, value)

    raw_children = data.get("children") or ()
    if isinstance(raw_children, (str, bytes, Mapping)) or not isinstance(
        raw_children, Sequence
    ):
        raise MalformedNodeError(path, "'children' must be a list")
    return name, value, raw_children


def _check_weight(path: Sequence[str], value: float) -> None:
    if math.isnan(value):
        raise MalformedNodeError(path, "value is NaN")
    if value < 0:
        raise NegativeValueError(path, value)
