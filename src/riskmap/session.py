"""One interactive treemap: selection in, laid-out draw calls out.

TreemapSession owns the mutable parts of the screen (selection, viewport,
zoom) and turns each external event into exactly one pass::

    selection change  -> rebuild tree -> re-anchor zoom -> layout
    node click        ->                 zoom into      -> layout
    breadcrumb click  ->                 zoom to        -> layout
    viewport resize   ->                                   layout

Events are handled synchronously; ``result`` always reflects the last one.
"""

from __future__ import annotations

from typing import Callable, Optional

from .config import TreemapConfig
from .hierarchy import WeightedNode, build_from_selection
from .logging_config import get_logger
from .navigation import NavigationController
from .taxonomy import DEFAULT_CATALOG, RiskCatalog, SelectionState, load_catalog
from .treemap import LayoutResult, Viewport, layout
from .treemap.labels import TextMetrics
from .treemap.models import LayoutOptions

logger = get_logger(__name__)


class TreemapSession:
    """Event loop state for one treemap view.

    Args:
        config: Presentation, geometry and text settings
        selection: Initial selection; everything ticked when omitted
        catalog: Taxonomy universe. Defaults to ``config.catalog_file`` if
            set, else the built-in vehicle incident catalog
        options: Override the padding derived from ``config``
        metrics: Override the text metrics derived from ``config``
    """

    def __init__(
        self,
        config: Optional[TreemapConfig] = None,
        selection: Optional[SelectionState] = None,
        catalog: Optional[RiskCatalog] = None,
        options: Optional[LayoutOptions] = None,
        metrics: Optional[TextMetrics] = None,
    ) -> None:
        self.config = config or TreemapConfig()
        if catalog is None:
            catalog = (
                load_catalog(self.config.catalog_file)
                if self.config.catalog_file
                else DEFAULT_CATALOG
            )
        self.catalog = catalog
        self.options = options or self.config.layout_options
        self.metrics = metrics or self.config.text_metrics
        self.max_depth = self.config.max_depth
        self.viewport = self.config.viewport

        self.selection = selection if selection is not None else SelectionState.everything(catalog)
        self.controller = NavigationController(self._build())
        self._result = self._layout()

    @property
    def result(self) -> LayoutResult:
        return self._result

    @property
    def tree(self) -> WeightedNode:
        return self.controller.tree

    @property
    def current_root(self) -> WeightedNode:
        return self.controller.current_root

    # -- events -----------------------------------------------------------

    def update_selection(self, selection: SelectionState) -> LayoutResult:
        """Replace the selection, rebuild and keep the zoom where possible."""
        self.selection = selection
        kept = self.controller.on_hierarchy_rebuilt(self._build())
        logger.debug("Selection v%d applied (zoom kept: %s)", selection.version, kept)
        return self._relayout()

    def apply(self, transition: Callable[[SelectionState], SelectionState]) -> LayoutResult:
        """Shorthand for ``update_selection(transition(selection))``."""
        return self.update_selection(transition(self.selection))

    def node_clicked(self, node: WeightedNode) -> LayoutResult:
        if self.controller.zoom_into(node):
            return self._relayout()
        return self._result

    def click_at(self, x: float, y: float) -> LayoutResult:
        """Click at raster coordinates; zooms into the deepest drawn node."""
        hit = self._result.hit_test(x, y)
        if hit is None:
            return self._result
        return self.node_clicked(hit.ref)

    def breadcrumb_clicked(self, node: WeightedNode) -> LayoutResult:
        if self.controller.zoom_to(node):
            return self._relayout()
        return self._result

    def zoom_out(self) -> LayoutResult:
        if self.controller.zoom_out():
            return self._relayout()
        return self._result

    def reset(self) -> LayoutResult:
        if self.controller.reset():
            return self._relayout()
        return self._result

    def viewport_resized(self, width: int, height: int) -> LayoutResult:
        viewport = Viewport(int(width), int(height)).clamped(self.config.min_viewport)
        if viewport == self.viewport:
            return self._result
        self.viewport = viewport
        return self._relayout()

    def set_max_depth(self, max_depth: Optional[int]) -> LayoutResult:
        self.max_depth = max_depth
        return self._relayout()

    # -- internals --------------------------------------------------------

    def _build(self) -> WeightedNode:
        return build_from_selection(self.config.title, self.selection, self.catalog)

    def _layout(self) -> LayoutResult:
        return layout(
            self.controller.tree,
            self.controller.current_root,
            viewport=self.viewport,
            max_depth=self.max_depth,
            options=self.options,
            metrics=self.metrics,
        )

    def _relayout(self) -> LayoutResult:
        self._result = self._layout()
        return self._result
