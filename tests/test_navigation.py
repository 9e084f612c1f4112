"""Tests for navigation/controller.py - zoom, breadcrumb, re-anchoring."""

from riskmap.hierarchy import build_from_selection
from riskmap.navigation import AT_TRUE_ROOT, ZOOMED_IN, NavigationController

ROOT = "Vehicle Incident"


class TestZoom:
    """Zooming in and out."""

    def test_starts_at_true_root(self, full_tree):
        nav = NavigationController(full_tree)
        assert nav.current_root is full_tree
        assert nav.breadcrumb_path == (full_tree,)
        assert nav.phase == AT_TRUE_ROOT
        assert nav.at_true_root

    def test_zoom_into_branch(self, full_tree):
        nav = NavigationController(full_tree)
        surface = full_tree.child("Surface")
        assert nav.zoom_into(surface)
        assert nav.current_root is surface
        assert nav.breadcrumb_path == (full_tree, surface)
        assert nav.phase == ZOOMED_IN

    def test_zoom_into_leaf_is_noop(self, single_path_tree):
        nav = NavigationController(single_path_tree)
        leaf = next(single_path_tree.leaves())
        assert not nav.zoom_into(leaf)
        assert nav.at_true_root

    def test_zoom_into_deep_node_builds_full_trail(self, full_tree):
        nav = NavigationController(full_tree)
        target = full_tree.find(("Underground", "Passenger", "Light Vehicles"))
        nav.zoom_into(target)
        assert [n.name for n in nav.breadcrumb_path] == [
            ROOT,
            "Underground",
            "Passenger",
            "Light Vehicles",
        ]
        assert nav.breadcrumb_path[-1] is nav.current_root

    def test_zoom_round_trip(self, full_tree):
        """Zooming in then clicking the root segment restores the initial state."""
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.find(("Offsite", "Passenger")))
        assert nav.zoom_to(full_tree)
        assert nav.current_root is full_tree
        assert nav.breadcrumb_path == (full_tree,)

    def test_zoom_to_middle_segment(self, full_tree):
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.find(("Offsite", "Passenger", "Light Vehicles")))
        offsite = nav.breadcrumb_path[1]
        assert nav.zoom_to(offsite)
        assert nav.current_root is offsite
        assert len(nav.breadcrumb_path) == 2

    def test_zoom_to_current_root_is_noop(self, full_tree):
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.child("Surface"))
        before = nav.state
        assert not nav.zoom_to(nav.current_root)
        assert nav.state is before

    def test_zoom_to_off_trail_node_is_noop(self, full_tree):
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.find(("Surface", "Passenger")))
        assert not nav.zoom_to(full_tree.child("Offsite"))
        assert nav.current_root.path == ("Surface", "Passenger")

    def test_zoom_out_and_reset(self, full_tree):
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.find(("Surface", "Passenger", "Light Vehicles")))
        assert nav.zoom_out()
        assert nav.current_root.path == ("Surface", "Passenger")
        assert nav.reset()
        assert nav.at_true_root
        assert not nav.zoom_out()

    def test_zoom_into_foreign_node_resolves_by_path(self, full_tree, everything, catalog):
        other = build_from_selection(ROOT, everything, catalog)
        nav = NavigationController(full_tree)
        assert nav.zoom_into(other.child("Surface"))
        assert nav.current_root is full_tree.child("Surface")


class TestRebuild:
    """Re-anchoring after the selection changes."""

    def test_zoom_kept_when_branch_survives(self, full_tree, everything, catalog):
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.find(("Surface", "Passenger")))

        rebuilt = build_from_selection(ROOT, everything.remove_context("Offsite"), catalog)
        assert nav.on_hierarchy_rebuilt(rebuilt)
        assert nav.tree is rebuilt
        assert nav.current_root is rebuilt.find(("Surface", "Passenger"))
        assert nav.breadcrumb_path[0] is rebuilt

    def test_falls_back_to_root_when_branch_removed(self, full_tree, everything, catalog):
        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.find(("Surface", "Passenger")))

        rebuilt = build_from_selection(ROOT, everything.remove_context("Surface"), catalog)
        assert not nav.on_hierarchy_rebuilt(rebuilt)
        assert nav.current_root is rebuilt
        assert nav.breadcrumb_path == (rebuilt,)

    def test_rebuild_at_root_stays_at_root(self, full_tree, everything, catalog):
        nav = NavigationController(full_tree)
        rebuilt = build_from_selection(ROOT, everything.with_contexts(()), catalog)
        assert nav.on_hierarchy_rebuilt(rebuilt)
        assert nav.at_true_root

    def test_fallback_is_logged(self, full_tree, everything, catalog, caplog):
        import logging

        nav = NavigationController(full_tree)
        nav.zoom_into(full_tree.child("Surface"))
        rebuilt = build_from_selection(ROOT, everything.remove_context("Surface"), catalog)
        with caplog.at_level(logging.INFO, logger="riskmap"):
            nav.on_hierarchy_rebuilt(rebuilt)
        assert "no longer exists" in caplog.text
