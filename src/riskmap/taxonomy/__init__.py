"""Risk taxonomy catalog and the selection state built from it."""

from .catalog import (
    DEFAULT_CATALOG,
    NODE_CATEGORIES,
    EquipmentType,
    Mechanism,
    RiskCatalog,
    category_for_depth,
    load_catalog,
)
from .selection import EquipmentChild, EquipmentItem, EquipmentSelection, SelectionState

__all__ = [
    "DEFAULT_CATALOG",
    "NODE_CATEGORIES",
    "EquipmentType",
    "Mechanism",
    "RiskCatalog",
    "category_for_depth",
    "load_catalog",
    "EquipmentChild",
    "EquipmentItem",
    "EquipmentSelection",
    "SelectionState",
]
