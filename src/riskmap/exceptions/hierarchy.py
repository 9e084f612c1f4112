"""Hierarchy and catalog exceptions: malformed producer input."""

from typing import Any, Sequence

from .base import RiskMapError


class HierarchyError(RiskMapError):
    """Base class for weighted-hierarchy errors."""

    pass


class NegativeValueError(HierarchyError):
    """Raised when a producer hands over a node with a negative weight."""

    def __init__(self, path: Sequence[str], value: Any):
        location = "/".join(path) or "<root>"
        super().__init__(
            f"Negative value for node {location}",
            details={"path": location, "value": str(value)},
        )
        self.path = tuple(path)
        self.value = value


class MalformedNodeError(HierarchyError):
    """Raised when a producer node is not shaped like ``{name, value?, children?}``."""

    def __init__(self, path: Sequence[str], reason: str):
        location = "/".join(path) or "<root>"
        super().__init__(
            f"Malformed node at {location}",
            details={"path": location, "reason": reason},
        )
        self.path = tuple(path)
        self.reason = reason


class CatalogError(RiskMapError):
    """Raised when a taxonomy catalog definition cannot be loaded."""

    def __init__(self, reason: str, source: str = ""):
        details = {"reason": reason}
        if source:
            details["source"] = source
        super().__init__(f"Invalid catalog: {reason}", details=details)
        self.reason = reason
        self.source = source
