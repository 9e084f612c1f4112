"""Tests for treemap/squarify.py - squarified tiling."""

import pytest

from riskmap.treemap import squarify


def _area(rect):
    x0, y0, x1, y1 = rect
    return (x1 - x0) * (y1 - y0)


class TestSquarify:
    """Tiling a region with weighted rectangles."""

    def test_known_tiling(self):
        """[2, 1, 1] in a 40x40 square: one row of two, then one column."""
        rects = squarify([2, 1, 1], 0, 0, 40, 40)
        assert rects[0] == pytest.approx((0, 0, 30, 80 / 3))
        assert rects[1] == pytest.approx((0, 80 / 3, 30, 40))
        assert rects[2] == pytest.approx((30, 0, 40, 40))

    def test_areas_proportional(self):
        values = [50, 25, 12, 8, 5]
        rects = squarify(values, 0, 0, 200, 100)
        total = 200 * 100
        for value, rect in zip(values, rects):
            assert _area(rect) == pytest.approx(total * value / sum(values))

    def test_rectangles_stay_inside_region(self):
        rects = squarify([7, 5, 3, 3, 2, 1], 10, 20, 110, 80)
        for x0, y0, x1, y1 in rects:
            assert 10 <= x0 <= x1 <= 110 + 1e-9
            assert 20 <= y0 <= y1 <= 80 + 1e-9

    def test_single_value_fills_region(self):
        assert squarify([3], 0, 0, 50, 20) == [pytest.approx((0, 0, 50, 20))]

    def test_empty_values(self):
        assert squarify([], 0, 0, 10, 10) == []

    def test_all_zero_values_collapse(self):
        rects = squarify([0, 0], 0, 0, 10, 10)
        assert all(_area(r) == 0 for r in rects)

    def test_zero_value_gets_no_area(self):
        rects = squarify([4, 0, 4], 0, 0, 80, 40)
        assert _area(rects[1]) == pytest.approx(0)
        assert _area(rects[0]) + _area(rects[2]) == pytest.approx(80 * 40)

    def test_zero_width_region(self):
        rects = squarify([1, 1], 5, 0, 5, 10)
        assert all(_area(r) == 0 for r in rects)

    def test_aspect_ratios_reasonable(self):
        """Equal values in a square region should tile into near-squares."""
        rects = squarify([1] * 16, 0, 0, 100, 100)
        for x0, y0, x1, y1 in rects:
            w, h = x1 - x0, y1 - y0
            assert max(w / h, h / w) < 3
