"""Squarified treemap tiling (Bruls-Huizing-van Wijk).

Children are packed into rows along the shorter side of the remaining
region; a row keeps growing while its worst aspect ratio does not get worse
than the target ``ratio``. Rows are laid out with slice (vertical stacking)
or dice (horizontal stacking) depending on the region's orientation.
"""

from typing import List, Sequence, Tuple

from .models import GOLDEN_RATIO

Rect = Tuple[float, float, float, float]


def squarify(
    values: Sequence[float],
    x0: float,
    y0: float,
    x1: float,
    y1: float,
    ratio: float = GOLDEN_RATIO,
) -> List[Rect]:
    """Tile ``(x0, y0, x1, y1)`` with one rectangle per value.

    Values should be sorted descending for good aspect ratios. Zero values
    get zero-area rectangles. Returns ``(x0, y0, x1, y1)`` tuples in input
    order.
    """
    n = len(values)
    rects: List[Rect] = [(x0, y0, x0, y0)] * n
    value = float(sum(values))
    if n == 0 or value <= 0:
        return rects

    i0 = i1 = 0
    while i0 < n:
        dx, dy = x1 - x0, y1 - y0
        if dx <= 0 or dy <= 0:
            # Nothing left to share; the remaining rectangles collapse.
            for i in range(i0, n):
                rects[i] = (x0, y0, x1 if dx > 0 else x0, y1 if dy > 0 else y0)
            break

        # Find the next non-empty node.
        sum_value = values[i1]
        i1 += 1
        while not sum_value and i1 < n:
            sum_value = values[i1]
            i1 += 1
        if not sum_value:
            break

        min_value = max_value = sum_value
        alpha = max(dy / dx, dx / dy) / (value * ratio)
        beta = sum_value * sum_value * alpha
        min_ratio = max(max_value / beta, beta / min_value)

        # Keep adding nodes while the aspect ratio maintains or improves.
        while i1 < n:
            node_value = values[i1]
            sum_value += node_value
            if node_value < min_value:
                min_value = node_value
            if node_value > max_value:
                max_value = node_value
            beta = sum_value * sum_value * alpha
            new_ratio = max(max_value / beta, beta / min_value) if min_value else float("inf")
            if new_ratio > min_ratio:
                sum_value -= node_value
                break
            min_ratio = new_ratio
            i1 += 1

        row = range(i0, i1)
        if dx < dy:
            y_end = y0 + dy * sum_value / value if value else y1
            _dice(values, row, sum_value, x0, y0, x1, y_end, rects)
            y0 = y_end
        else:
            x_end = x0 + dx * sum_value / value if value else x1
            _slice(values, row, sum_value, x0, y0, x_end, y1, rects)
            x0 = x_end
        value -= sum_value
        i0 = i1

    return rects


def _dice(values, row, row_value, x0, y0, x1, y1, rects: List[Rect]) -> None:
    """Lay the row out left to right."""
    k = (x1 - x0) / row_value if row_value else 0.0
    x = x0
    for i in row:
        nxt = x + values[i] * k
        rects[i] = (x, y0, nxt, y1)
        x = nxt


def _slice(values, row, row_value, x0, y0, x1, y1, rects: List[Rect]) -> None:
    """Lay the row out top to bottom."""
    k = (y1 - y0) / row_value if row_value else 0.0
    y = y0
    for i in row:
        nxt = y + values[i] * k
        rects[i] = (x0, y, x1, nxt)
        y = nxt
