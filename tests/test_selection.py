"""Tests for taxonomy/selection.py - picker state and transitions."""

import pytest

from riskmap.taxonomy import EquipmentChild, EquipmentItem, EquipmentSelection, SelectionState
from riskmap.taxonomy.catalog import V2E_SCENARIOS, V2P_SCENARIOS, V2V_SCENARIOS


class TestEquipmentItem:
    """Parent checkbox follows its children."""

    def test_parent_selected_when_any_child_selected(self):
        item = EquipmentItem(
            "Passenger",
            (EquipmentChild("Light Vehicles", True), EquipmentChild("High Occupancy Vehicles")),
        ).with_derived_selection()
        assert item.selected

    def test_parent_deselected_when_last_child_deselected(self):
        item = EquipmentItem(
            "Passenger", (EquipmentChild("Light Vehicles", True),), selected=True
        )
        item = item.with_child("Light Vehicles", False)
        assert not item.selected
        assert item.selected_children == ()

    def test_childless_parent_keeps_explicit_flag(self):
        """A parent without subtypes is selected only if set explicitly."""
        assert EquipmentItem("Trailer", (), selected=True).with_derived_selection().selected
        assert not EquipmentItem("Trailer", (), selected=False).with_derived_selection().selected

    def test_toggle_child(self):
        item = EquipmentItem("Passenger", (EquipmentChild("Light Vehicles"),))
        item = item.with_child("Light Vehicles", None)
        assert item.is_child_selected("Light Vehicles")
        item = item.with_child("Light Vehicles", None)
        assert not item.is_child_selected("Light Vehicles")


class TestEquipmentSelection:
    """Two-level equipment picker."""

    def test_from_catalog_all_selected(self, catalog):
        selection = EquipmentSelection.from_catalog(catalog, selected=True)
        assert len(selection.selected_pairs()) == 7
        assert all(item.selected for item in selection.items)

    def test_from_pairs_with_wildcard(self, catalog):
        selection = EquipmentSelection.from_pairs(
            catalog, [("Passenger", None), ("Heavy Mobile Equipment", "Tracked Heavy Vehicle")]
        )
        assert selection.selected_pairs() == [
            ("Passenger", "Light Vehicles"),
            ("Passenger", "High Occupancy Vehicles"),
            ("Heavy Mobile Equipment", "Tracked Heavy Vehicle"),
        ]
        assert not selection.is_selected("Highway Goods Vehicle")

    def test_remove_last_child_deselects_parent(self, catalog):
        selection = EquipmentSelection.from_pairs(catalog, [("Passenger", "Light Vehicles")])
        selection = selection.remove("Passenger", "Light Vehicles")
        assert not selection.is_selected("Passenger")

    def test_unknown_parent_is_not_selected(self, catalog):
        selection = EquipmentSelection.from_catalog(catalog, selected=True)
        assert not selection.is_selected("Hovercraft")
        assert selection.item("Hovercraft") is None


class TestSelectionState:
    """Versioned selection snapshots."""

    def test_everything(self, everything, catalog):
        assert everything.contexts == frozenset(catalog.contexts)
        assert len(everything.scenarios) == 15
        assert everything.version == 0

    def test_nothing(self, catalog):
        state = SelectionState.nothing(catalog)
        assert not state.contexts
        assert not state.scenarios
        assert state.selected_equipment() == []

    def test_transitions_bump_version(self, everything):
        state = everything.toggle_context("Surface")
        assert state.version == 1
        state = state.remove_scenario(V2P_SCENARIOS[0])
        assert state.version == 2
        state = state.toggle_equipment("Passenger", "Light Vehicles")
        assert state.version == 3

    def test_transitions_do_not_mutate(self, everything):
        everything.remove_context("Surface")
        assert "Surface" in everything.contexts
        assert everything.version == 0

    def test_toggle_context_round_trip(self, everything):
        state = everything.toggle_context("Offsite").toggle_context("Offsite")
        assert state.contexts == everything.contexts
        assert state.version == 2

    def test_remove_equipment_cascades_to_parent(self, everything):
        state = everything.remove_equipment("Highway Goods Vehicle", "Road going and road used")
        assert not state.equipment.is_selected("Highway Goods Vehicle")
        assert [item.name for item, _ in state.selected_equipment()] == [
            "Passenger",
            "Non Heavy Mobile Equipment",
            "Heavy Mobile Equipment",
        ]

    def test_grouped_scenarios_in_catalog_order(self, catalog):
        state = SelectionState(
            scenarios=frozenset({V2E_SCENARIOS[1], V2P_SCENARIOS[2], V2P_SCENARIOS[0]})
        )
        grouped = state.grouped_scenarios(catalog)
        assert grouped["Vehicle to person"] == [V2P_SCENARIOS[0], V2P_SCENARIOS[2]]
        assert grouped["Vehicle to vehicle"] == []
        assert grouped["Vehicle to environment"] == [V2E_SCENARIOS[1]]

    def test_group_labels_are_not_scenarios(self, catalog):
        state = SelectionState(scenarios=frozenset({"Vehicle to vehicle", V2V_SCENARIOS[0]}))
        assert state.grouped_scenarios(catalog)["Vehicle to vehicle"] == [V2V_SCENARIOS[0]]

    def test_ticking_a_mechanism_keeps_partial_picks(self, catalog):
        state = SelectionState(scenarios=frozenset({V2P_SCENARIOS[0], V2P_SCENARIOS[2]}))
        state = state.with_mechanisms(["Vehicle to person", "Vehicle to vehicle"], catalog)
        grouped = state.grouped_scenarios(catalog)
        assert grouped["Vehicle to person"] == [V2P_SCENARIOS[0], V2P_SCENARIOS[2]]
        assert grouped["Vehicle to vehicle"] == list(V2V_SCENARIOS)
        assert grouped["Vehicle to environment"] == []

    def test_unticking_a_mechanism_drops_its_scenarios(self, everything, catalog):
        state = everything.remove_scenario(V2P_SCENARIOS[0])
        state = state.with_mechanisms(["Vehicle to person", "Vehicle to environment"], catalog)
        grouped = state.grouped_scenarios(catalog)
        assert grouped["Vehicle to person"] == list(V2P_SCENARIOS[1:])
        assert grouped["Vehicle to vehicle"] == []
        assert state.version == everything.version + 2


class TestCatalog:
    """Built-in taxonomy and JSON round trip."""

    def test_mechanism_lookup(self, catalog):
        assert catalog.mechanism_of(V2V_SCENARIOS[2]) == "Vehicle to vehicle"
        assert catalog.mechanism_of("Meteor strike") is None

    def test_duplicate_names_rejected(self):
        from riskmap.exceptions import CatalogError
        from riskmap.taxonomy import RiskCatalog

        with pytest.raises(CatalogError):
            RiskCatalog(contexts=("Surface", "Surface"), equipment=(), mechanisms=())

    def test_load_catalog_from_json(self, tmp_path, catalog):
        import json

        from riskmap.taxonomy import load_catalog

        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog.to_dict()), encoding="utf-8")
        loaded = load_catalog(path)
        assert loaded.contexts == catalog.contexts
        assert loaded.all_scenarios == catalog.all_scenarios

    def test_load_catalog_missing_section(self, tmp_path):
        from riskmap.exceptions import CatalogError
        from riskmap.taxonomy import load_catalog

        path = tmp_path / "catalog.json"
        path.write_text('{"contexts": ["Surface"]}', encoding="utf-8")
        with pytest.raises(CatalogError) as exc_info:
            load_catalog(path)
        assert exc_info.value.source == str(path)
