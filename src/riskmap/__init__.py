"""
riskmap - Interactive risk treemap for vehicle incident scenarios

Turns checkbox selections over a fixed risk taxonomy (operating context,
equipment, damaging energy mechanism, scenario) into a weighted hierarchy
and lays it out as a zoomable, squarified treemap.
"""

__version__ = "0.1.0"

from .config import TreemapConfig, load_config
from .hierarchy import WeightedNode, build_hierarchy
from .navigation import NavigationController
from .session import TreemapSession
from .taxonomy import DEFAULT_CATALOG, RiskCatalog, SelectionState
from .treemap import LayoutResult, Viewport, layout

__all__ = [
    "TreemapSession",  # Main entry point
    "TreemapConfig",
    "load_config",
    "WeightedNode",
    "build_hierarchy",
    "NavigationController",
    "DEFAULT_CATALOG",
    "RiskCatalog",
    "SelectionState",
    "LayoutResult",
    "Viewport",
    "layout",
]
