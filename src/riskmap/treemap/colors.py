"""Sequential orange colour scale keyed by node height.

Height is the distance to the deepest leaf, so the true root and other
shallow nodes get the deepest shades and scenarios the lightest. The scale is
a pure function of height: two renders of the same tree are identical.
"""

from functools import lru_cache

import numpy as np

# ColorBrewer "Oranges" 9-class, light to dark.
ORANGES = (
    "#fff5eb",
    "#fee6ce",
    "#fdd0a2",
    "#fdae6b",
    "#fd8d3c",
    "#f16913",
    "#d94801",
    "#a63603",
    "#7f2704",
)

# Heights are mapped linearly from this domain onto the palette.
COLOR_DOMAIN = (0, 9)

HIGHLIGHT_COLOR = "#DD6B20"

_STOPS = np.array([[int(c[i : i + 2], 16) for i in (1, 3, 5)] for c in ORANGES], dtype=float)
_POSITIONS = np.linspace(0.0, 1.0, len(ORANGES))


@lru_cache(maxsize=64)
def fill_for_height(height: int) -> str:
    """Hex fill colour for a node of the given height."""
    lo, hi = COLOR_DOMAIN
    t = float(np.clip((height - lo) / (hi - lo), 0.0, 1.0))
    rgb = [int(round(float(np.interp(t, _POSITIONS, _STOPS[:, ch])))) for ch in range(3)]
    return "#{:02x}{:02x}{:02x}".format(*rgb)


def text_color_for(fill: str) -> str:
    """Black or white, whichever reads better on ``fill``."""
    r, g, b = (int(fill[i : i + 2], 16) for i in (1, 3, 5))
    luminance = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return "#000000" if luminance > 140 else "#ffffff"
