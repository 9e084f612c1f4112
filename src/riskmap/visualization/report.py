"""Generate a self-contained HTML report of the risk treemap.

The report inlines the SVG produced by :func:`render_svg` and embeds the
layout as a JSON blob inside a ``<script>`` tag, so it can be opened from
any local file:// path without a server.
"""

import json
from html import escape
from pathlib import Path

from ..treemap.labels import TextMetrics
from ..treemap.models import LayoutResult
from .svg import breadcrumb_text, render_svg


def generate_report(
    result: LayoutResult,
    title: str = "Vehicle Incident",
    output_path: str = "riskmap-report.html",
    metrics: TextMetrics = TextMetrics(),
) -> str:
    """Write the treemap for ``result`` to an HTML file.

    Parameters
    ----------
    result:
        The laid-out treemap to embed.
    title:
        Heading of the page and the map.
    output_path:
        Where to write the HTML file.
    metrics:
        Text metrics the layout was fitted with.

    Returns
    -------
    str
        Absolute path to the generated HTML file.
    """
    summary = {
        "title": title,
        "total": result.current_root.value,
        "leaves": result.current_root.leaf_count(),
        "rectangles": len(result.rects),
        "breadcrumb": breadcrumb_text(result),
    }
    data_json = json.dumps({"summary": summary, "layout": result.to_dict()})
    # A literal "</" inside the script block would end it early.
    data_json = data_json.replace("</", "<\\/")

    html = _build_html(title, render_svg(result, title, metrics), data_json)

    out = Path(output_path).resolve()
    out.write_text(html, encoding="utf-8")
    return str(out)


# ── Private helpers ──────────────────────────────────────────────────


def _build_html(title: str, svg: str, data_json: str) -> str:
    """Build the page around the pre-rendered SVG.

    The script only adds a hover tooltip with each rectangle's category and
    value; the geometry is fixed at generation time.
    """
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{escape(title)}</title>
<style>
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; background: #fffaf0; color: #1a202c; }}
#header {{ padding: 24px 32px; border-bottom: 1px solid #feebc8; }}
#header h1 {{ font-size: 24px; color: #c05621; margin-bottom: 8px; }}
#summary {{ display: flex; gap: 24px; font-size: 14px; color: #4a5568; flex-wrap: wrap; }}
.stat {{ background: #ffffff; padding: 8px 16px; border-radius: 6px; border: 1px solid #feebc8; }}
.stat-value {{ font-size: 20px; font-weight: 600; color: #1a202c; }}
.stat-label {{ font-size: 12px; text-transform: uppercase; letter-spacing: 0.5px; }}
#treemap-container {{ padding: 16px 32px; position: relative; }}
#treemap-container svg {{ background: #ffffff; border: 1px solid #feebc8; border-radius: 8px; }}
#treemap-container rect {{ stroke: #ffffff; stroke-width: 0; }}
#treemap-container g.interactive:hover > rect {{ stroke: #DD6B20; stroke-width: 2px; }}
.tooltip {{ position: absolute; background: #ffffff; border: 1px solid #fbd38d; padding: 8px 12px; border-radius: 6px; font-size: 13px; pointer-events: none; z-index: 100; box-shadow: 0 4px 12px rgba(0,0,0,0.15); display: none; }}
.tooltip .tt-category {{ color: #c05621; font-weight: 600; }}
footer {{ padding: 24px 32px; text-align: center; color: #a0aec0; font-size: 12px; border-top: 1px solid #feebc8; margin-top: 32px; }}
</style>
</head>
<body>
<div id="header">
  <h1>{escape(title)}</h1>
  <div id="summary"></div>
</div>
<div id="treemap-container">
{svg}
<div class="tooltip" id="tooltip"></div>
</div>
<footer>Generated by riskmap</footer>

<script>
// Layout data embedded at generation time.
const DATA = {data_json};

// ── Summary ──────────────────────────────────────────────────────
(function() {{
  var s = DATA.summary;
  var stats = [
    ["Scenarios", s.leaves],
    ["Total", s.total.toLocaleString()],
    ["Rectangles", s.rectangles],
  ];
  document.getElementById("summary").innerHTML = stats.map(function(pair) {{
    return '<div class="stat"><div class="stat-value">' + pair[1] + '</div><div class="stat-label">' + pair[0] + '</div></div>';
  }}).join("");
}})();

// ── Tooltip ──────────────────────────────────────────────────────
(function() {{
  var byPath = {{}};
  DATA.layout.items.forEach(function(item) {{ byPath[item.path.join("/")] = item; }});
  var tip = document.getElementById("tooltip");
  var container = document.getElementById("treemap-container");
  container.querySelectorAll("g.node").forEach(function(g) {{
    var item = byPath[g.getAttribute("data-path")];
    if (!item) return;
    g.addEventListener("mousemove", function(ev) {{
      ev.stopPropagation();
      var box = container.getBoundingClientRect();
      tip.innerHTML = '<div class="tt-category">' + escapeHtml(item.category) + '</div>' +
        '<div>' + escapeHtml(item.path[item.path.length - 1] || DATA.summary.title) +
        ' (' + item.value.toLocaleString() + ')</div>';
      tip.style.left = (ev.clientX - box.left + 12) + "px";
      tip.style.top = (ev.clientY - box.top + 12) + "px";
      tip.style.display = "block";
    }});
    g.addEventListener("mouseleave", function() {{ tip.style.display = "none"; }});
  }});
}})();

// ── Utility ──────────────────────────────────────────────────────
function escapeHtml(str) {{
  var div = document.createElement("div");
  div.appendChild(document.createTextNode(str));
  return div.innerHTML;
}}
</script>
</body>
</html>"""
