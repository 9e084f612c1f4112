"""Exception hierarchy for riskmap."""

from .base import RiskMapError
from .config import ConfigurationError, InvalidConfigError
from .hierarchy import CatalogError, HierarchyError, MalformedNodeError, NegativeValueError

__all__ = [
    "RiskMapError",
    "ConfigurationError",
    "InvalidConfigError",
    "HierarchyError",
    "NegativeValueError",
    "MalformedNodeError",
    "CatalogError",
]
