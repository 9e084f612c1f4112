"""Tests for treemap/layout.py - one full layout pass."""

import pytest

from riskmap.hierarchy import WeightedNode, from_mapping
from riskmap.treemap import LayoutOptions, TextMetrics, Viewport, layout, subtree_sums
from riskmap.treemap.colors import fill_for_height

FLAT = LayoutOptions(padding_outer=0, padding_top=0, padding_inner=0, round=False)


def _chain(depth):
    """Root followed by ``depth`` single-child tiers, built without recursion."""
    path = tuple(f"n{i}" for i in range(1, depth + 1))
    node = WeightedNode.leaf(path[-1], path, 1)
    for i in range(depth - 1, -1, -1):
        node = WeightedNode.branch(path[i - 1] if i else "root", path[:i], [node])
    return node


class TestLayoutBasics:
    """Positions and visibility."""

    def test_frame_is_current_root(self, full_tree):
        result = layout(full_tree)
        assert result.frame.ref is full_tree
        assert (result.frame.x0, result.frame.y0) == (0, 0)
        assert (result.frame.x1, result.frame.y1) == (960, 600)
        assert all(node.ref is not full_tree for node in result.rects)

    def test_unbounded_shows_every_node(self, full_tree):
        result = layout(full_tree, viewport=Viewport(4000, 3000))
        assert {n.relative_depth for n in result.rects} == {1, 2, 3, 4, 5}

    def test_max_depth_window(self, full_tree):
        result = layout(full_tree, max_depth=2)
        assert result.rects
        assert max(n.relative_depth for n in result.rects) == 2
        assert all(n.depth <= 2 for n in result.rects)

    def test_max_depth_relative_to_current_root(self, full_tree):
        surface = full_tree.find(("Surface", "Passenger"))
        result = layout(full_tree, surface, max_depth=1)
        assert {n.depth for n in result.rects} == {3}
        assert {n.ref.category for n in result.rects} == {"Equipment Level 2"}

    def test_children_nested_in_parents(self, full_tree):
        result = layout(full_tree, max_depth=3)
        by_path = {n.ref.path: n for n in (result.frame,) + result.rects}
        for node in result.rects:
            parent = by_path[node.ref.path[:-1]]
            assert parent.x0 <= node.x0 and node.x1 <= parent.x1
            assert parent.y0 <= node.y0 and node.y1 <= parent.y1

    def test_header_band_reserved(self, full_tree):
        result = layout(full_tree, max_depth=1)
        for node in result.rects:
            assert node.y0 >= 19

    def test_boundaries_rounded(self, full_tree):
        result = layout(full_tree, max_depth=3)
        for node in result.rects:
            for v in (node.x0, node.y0, node.x1, node.y1):
                assert v == int(v)

    def test_breadcrumb(self, full_tree):
        target = full_tree.find(("Offsite", "Passenger"))
        result = layout(full_tree, target)
        assert [n.name for n in result.breadcrumb_path] == [
            "Vehicle Incident",
            "Offsite",
            "Passenger",
        ]
        assert result.breadcrumb_segments() == result.breadcrumb_path[:-1]
        assert not result.at_true_root


class TestLayoutGeometry:
    """Area and ordering properties."""

    def test_areas_proportional_without_padding(self, flat_tree):
        result = layout(flat_tree, viewport=Viewport(100, 100), options=FLAT)
        areas = {n.ref.name: n.area for n in result.rects}
        assert areas["a"] == pytest.approx(6000)
        assert areas["b"] == pytest.approx(3000)
        assert areas["c"] == pytest.approx(1000)

    def test_larger_siblings_first(self):
        tree = from_mapping(
            {"name": "r", "children": [{"name": "small", "value": 1}, {"name": "big", "value": 9}]}
        )
        result = layout(tree, viewport=Viewport(100, 100), options=FLAT)
        assert [n.ref.name for n in result.rects] == ["big", "small"]
        assert result.rects[0].x0 == 0 and result.rects[0].y0 == 0

    def test_single_path_rectangles(self, single_path_tree):
        """Leaf plus its four ancestors below the root, each covering the leaf."""
        result = layout(single_path_tree)
        assert len(result.rects) == 5
        leaf = [n for n in result.rects if n.ref.is_leaf]
        assert len(leaf) == 1
        for node in result.rects:
            assert node.area >= leaf[0].area > 0

    def test_deterministic(self, full_tree):
        a = layout(full_tree, max_depth=3)
        b = layout(full_tree, max_depth=3)
        assert a.to_dict() == b.to_dict()

    def test_deep_nodes_weigh_in_but_are_not_drawn(self):
        tree = from_mapping(
            {
                "name": "r",
                "children": [
                    {"name": "a", "children": [{"name": "a1", "value": 3}]},
                    {"name": "b", "children": [{"name": "b1", "value": 1}]},
                ],
            }
        )
        result = layout(tree, viewport=Viewport(100, 100), max_depth=1, options=FLAT)
        assert [n.ref.name for n in result.rects] == ["a", "b"]
        assert result.rects[0].area == pytest.approx(3 * result.rects[1].area)


class TestLayoutEdgeCases:
    """Empty, degenerate and stale input."""

    def test_empty_tree(self, everything, catalog):
        from riskmap.hierarchy import build_from_selection

        tree = build_from_selection("Vehicle Incident", everything.with_contexts(()), catalog)
        result = layout(tree)
        assert result.is_empty
        assert result.frame is None
        assert result.rects == ()
        assert result.items == ()

    def test_zero_weight_subtree(self):
        tree = from_mapping({"name": "r", "children": [{"name": "a", "value": 0}]})
        assert layout(tree).is_empty

    def test_zero_weight_sibling_suppressed(self):
        tree = from_mapping(
            {"name": "r", "children": [{"name": "a", "value": 5}, {"name": "z", "value": 0}]}
        )
        result = layout(tree, viewport=Viewport(100, 100))
        assert [n.ref.name for n in result.rects] == ["a"]

    def test_tiny_viewport_drops_degenerate(self, full_tree):
        result = layout(full_tree, viewport=Viewport(20, 20))
        assert all(n.dx > 0 and n.dy > 0 for n in result.rects)

    def test_stale_root_falls_back_to_true_root(self, full_tree, single_path_tree):
        stale = full_tree.find(("Offsite", "Passenger"))
        result = layout(single_path_tree, stale)
        assert result.current_root is single_path_tree
        assert result.at_true_root

    def test_root_from_earlier_build_resolves_by_path(self, full_tree, everything, catalog):
        from riskmap.hierarchy import build_from_selection

        rebuilt = build_from_selection("Vehicle Incident", everything, catalog)
        old = full_tree.find(("Surface",))
        result = layout(rebuilt, old)
        assert result.current_root is rebuilt.find(("Surface",))

    def test_zero_width_viewport_draws_nothing(self):
        result = layout(_chain(3), viewport=Viewport(0, 600))
        assert result.is_empty
        assert result.frame is None
        assert result.items == ()

    def test_deep_chain_with_depth_window(self):
        tree = _chain(3000)
        result = layout(tree, viewport=Viewport(960, 600), max_depth=3)
        assert [n.relative_depth for n in result.rects] == [1, 2, 3]
        assert result.frame.height == 3000
        assert result.items[0].fill == fill_for_height(9)

    def test_deep_chain_unbounded(self):
        result = layout(_chain(3000))
        assert result.rects
        assert all(not n.is_degenerate for n in result.rects)


class TestRenderItems:
    """Draw calls derived from the layout."""

    def test_frame_item_first(self, full_tree):
        result = layout(full_tree, max_depth=2)
        assert len(result.items) == len(result.rects) + 1
        assert result.items[0].path == ()
        assert not result.items[0].is_interactive

    def test_fill_by_height(self, full_tree):
        result = layout(full_tree, max_depth=2)
        for node, item in zip(result.rects, result.items[1:]):
            assert item.fill_color_index == node.height
            assert item.fill == fill_for_height(node.height)

    def test_leaves_not_interactive(self, single_path_tree):
        result = layout(single_path_tree)
        for item in result.items[1:]:
            assert item.is_interactive == (not item.is_leaf)

    def test_branch_labels_carry_value(self, full_tree):
        result = layout(full_tree, max_depth=1, viewport=Viewport(1600, 1000))
        labels = {item.path: item.label for item in result.items[1:]}
        assert labels[("Surface",)] == "Surface (105)"

    def test_leaf_labels_are_bare_names(self, single_path_tree):
        result = layout(single_path_tree, viewport=Viewport(1600, 1000))
        leaf = [item for item in result.items if item.is_leaf][0]
        assert "(" not in leaf.label.splitlines()[0]
        assert leaf.label.replace("\n", " ").startswith("Vehicle in control")

    def test_labels_fit_their_rectangles(self, full_tree):
        metrics = TextMetrics()
        result = layout(full_tree, max_depth=3, metrics=metrics)
        for item in result.items:
            for line in item.label_lines:
                assert metrics.text_width(line) <= item.width - 2 * metrics.inset

    def test_to_dict_camel_case(self, flat_tree):
        item = layout(flat_tree).items[1].to_dict()
        assert {"fillColorIndex", "isLeaf", "isInteractive", "category"} <= set(item)


class TestSubtreeSums:
    def test_sums_match_values(self, full_tree):
        sums = subtree_sums(full_tree)
        for node in full_tree.iter_nodes():
            assert sums[id(node)] == node.value
