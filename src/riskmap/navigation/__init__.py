"""Current-root navigation and breadcrumb trail."""

from .controller import AT_TRUE_ROOT, ZOOMED_IN, NavigationController, NavigationState

__all__ = ["AT_TRUE_ROOT", "ZOOMED_IN", "NavigationController", "NavigationState"]
