"""Weighted hierarchy: model and builder."""

from .builder import build_from_selection, build_hierarchy
from .models import NodePath, Tier, WeightedNode, from_mapping

__all__ = [
    "build_hierarchy",
    "build_from_selection",
    "from_mapping",
    "NodePath",
    "Tier",
    "WeightedNode",
]
