"""Render a LayoutResult as a standalone SVG document.

The document has a header band (title and breadcrumb trail) above the
treemap. Each drawn node becomes a ``<g>`` holding its rectangle, a
``<title>`` tooltip naming its category and one ``<tspan>`` per label line.
"""

from html import escape

from ..treemap.colors import HIGHLIGHT_COLOR, text_color_for
from ..treemap.labels import TextMetrics
from ..treemap.models import LayoutResult, RenderItem

HEADER_HEIGHT = 45

ROOT_HINT = "Click on a node to navigate the model or hover on the node to show its category"
EMPTY_MESSAGE = (
    "Add at least one scenario, operating context, and equipment "
    "to display the interactive model."
)
BREADCRUMB_SEPARATOR = " / "

FONT_FAMILY = "sans-serif"


def breadcrumb_text(result: LayoutResult) -> str:
    """Breadcrumb line: the trail joined by slashes, or the hint at the root."""
    if result.at_true_root:
        return ROOT_HINT
    return BREADCRUMB_SEPARATOR.join(node.name for node in result.breadcrumb_path)


def render_svg(result: LayoutResult, title: str = "", metrics: TextMetrics = TextMetrics()) -> str:
    """Serialize ``result`` to an SVG string.

    ``metrics`` should be the ones the layout was fitted with so the label
    lines land where they were measured.
    """
    width = result.viewport.width
    height = result.viewport.height + HEADER_HEIGHT
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" font-family="{FONT_FAMILY}">',
        _header(result, title),
    ]

    if result.is_empty:
        parts.append(_placeholder(result))
    else:
        parts.append(f'<g class="treemap" transform="translate(0,{HEADER_HEIGHT})">')
        for item in result.items:
            parts.append(_item(item, metrics))
        parts.append("</g>")

    parts.append("</svg>")
    return "\n".join(parts)


def _header(result: LayoutResult, title: str) -> str:
    lines = ['<g class="header">']
    if title:
        lines.append(
            f'<text x="4" y="16" font-size="14" font-weight="bold">{escape(title)}</text>'
        )
    if result.at_true_root:
        lines.append(
            f'<text class="breadcrumb" x="4" y="36" font-size="11" fill="#4a5568">'
            f"{escape(ROOT_HINT)}</text>"
        )
    else:
        # Every ancestor of the current root is a link target; the last
        # segment is where we are and is drawn plain.
        spans = []
        trail = result.breadcrumb_path
        for i, node in enumerate(trail):
            if i:
                spans.append(f"<tspan>{escape(BREADCRUMB_SEPARATOR)}</tspan>")
            if i < len(trail) - 1:
                spans.append(
                    f'<tspan class="segment" data-path="{escape("/".join(node.path))}" '
                    f'fill="{HIGHLIGHT_COLOR}">{escape(node.name)}</tspan>'
                )
            else:
                spans.append(f'<tspan font-weight="bold">{escape(node.name)}</tspan>')
        lines.append(f'<text class="breadcrumb" x="4" y="36" font-size="11">{"".join(spans)}</text>')
    lines.append("</g>")
    return "\n".join(lines)


def _placeholder(result: LayoutResult) -> str:
    cx = result.viewport.width / 2
    cy = HEADER_HEIGHT + result.viewport.height / 2
    return (
        f'<text class="placeholder" x="{cx:g}" y="{cy:g}" text-anchor="middle" '
        f'font-size="13" fill="#718096">{escape(EMPTY_MESSAGE)}</text>'
    )


def _item(item: RenderItem, metrics: TextMetrics) -> str:
    classes = ["node"]
    if item.is_leaf:
        classes.append("leaf")
    if item.is_interactive:
        classes.append("interactive")
    cursor = ' cursor="pointer"' if item.is_interactive else ""

    out = [
        f'<g class="{" ".join(classes)}" data-path="{escape("/".join(item.path))}" '
        f'data-depth="{item.depth}"{cursor}>',
        f"<title>{escape(item.category)}</title>",
        f'<rect x="{item.x:g}" y="{item.y:g}" width="{item.width:g}" '
        f'height="{item.height:g}" fill="{item.fill}"/>',
    ]
    if item.label_lines:
        color = text_color_for(item.fill)
        spans = "".join(
            f'<tspan x="{item.x + metrics.inset:g}" dy="{0 if i == 0 else metrics.line_advance:g}">'
            f"{escape(line)}</tspan>"
            for i, line in enumerate(item.label_lines)
        )
        out.append(
            f'<text y="{item.y + metrics.first_baseline:g}" '
            f'font-size="{metrics.font_size:g}" fill="{color}">{spans}</text>'
        )
    out.append("</g>")
    return "\n".join(out)
