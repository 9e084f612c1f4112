"""Label fitting for treemap rectangles.

Text is measured with a fixed average glyph advance, which keeps fitting a
pure function of the string (no font rasterizer involved). The same code
serves pixel surfaces (SVG) and character-cell surfaces (terminal) through
different ``TextMetrics``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

ELLIPSIS = "…"


@dataclass(frozen=True)
class TextMetrics:
    """How text occupies a rectangle.

    Attributes:
        font_size: Font size in raster units
        char_width: Average glyph advance in em
        line_height: Distance between wrapped lines in em
        inset: Horizontal gap between the rectangle edge and the text
        first_baseline: Distance from the rectangle top to the first baseline
    """

    font_size: float = 10.0
    char_width: float = 0.6
    line_height: float = 1.1
    inset: float = 3.0
    first_baseline: float = 13.0

    @classmethod
    def cells(cls) -> "TextMetrics":
        """Metrics for a terminal grid: one glyph per cell, one line per row."""
        return cls(font_size=1.0, char_width=1.0, line_height=1.0, inset=1.0, first_baseline=1.0)

    @property
    def line_advance(self) -> float:
        return self.font_size * self.line_height

    def text_width(self, text: str) -> float:
        return len(text) * self.font_size * self.char_width

    def available_width(self, rect_width: float) -> float:
        return rect_width - 2 * self.inset

    def max_lines(self, rect_height: float) -> int:
        if rect_height < self.first_baseline:
            return 0
        return int(math.floor((rect_height - self.first_baseline) / self.line_advance + 1e-9)) + 1

    def fits(self, text: str, width: float) -> bool:
        return self.text_width(text) <= width


def format_value(value: float) -> str:
    """Aggregate value with thousands separators, e.g. ``1,152``."""
    return f"{int(math.floor(value + 0.5)):,}"


def fit_label(
    name: str,
    value: float,
    width: float,
    height: float,
    wrap: bool,
    metrics: TextMetrics,
    show_value: bool = True,
) -> tuple[str, ...]:
    """Lines of text to draw inside a ``width`` x ``height`` rectangle.

    With ``wrap`` the text is broken at whitespace onto as many lines as the
    height allows. Without it the text stays on one line. Either way, text
    that still does not fit is cut and ends with ``"… (<value>)"``.
    """
    available = metrics.available_width(width)
    max_lines = metrics.max_lines(height)
    if available <= 0 or max_lines <= 0:
        return ()

    formatted = format_value(value)
    text = f"{name} ({formatted})" if show_value else name
    suffix = f"{ELLIPSIS} ({formatted})"

    if not wrap:
        if metrics.fits(text, available):
            return (text,)
        return _nonempty(_truncate(name, suffix, available, metrics))

    lines = wrap_words(text, available, metrics)
    if len(lines) <= max_lines and all(metrics.fits(line, available) for line in lines):
        return tuple(lines)

    kept: list[str] = []
    for line in lines:
        if len(kept) == max_lines - 1 or not metrics.fits(line, available):
            break
        kept.append(line)
    remaining = " ".join(lines[len(kept) :])
    if show_value and remaining.endswith(f" ({formatted})"):
        remaining = remaining[: -len(f" ({formatted})")]
    return tuple(kept) + _nonempty(_truncate(remaining, suffix, available, metrics))


def wrap_words(text: str, width: float, metrics: TextMetrics) -> list[str]:
    """Greedy whitespace wrapping; a single over-long word keeps its own line."""
    lines: list[str] = []
    current: list[str] = []
    for word in text.split():
        candidate = " ".join(current + [word])
        if current and not metrics.fits(candidate, width):
            lines.append(" ".join(current))
            current = [word]
        else:
            current.append(word)
    if current:
        lines.append(" ".join(current))
    return lines


def _truncate(text: str, suffix: str, width: float, metrics: TextMetrics) -> str:
    for end in range(len(text), 0, -1):
        candidate = text[:end].rstrip() + suffix
        if metrics.fits(candidate, width):
            return candidate
    if metrics.fits(suffix, width):
        return suffix
    if metrics.fits(ELLIPSIS, width):
        return ELLIPSIS
    return ""


def _nonempty(line: str) -> tuple[str, ...]:
    return (line,) if line else ()
