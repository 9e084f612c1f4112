"""Shared test fixtures for riskmap tests."""

import pytest

from riskmap.hierarchy import build_from_selection, from_mapping
from riskmap.taxonomy import DEFAULT_CATALOG, EquipmentSelection, SelectionState
from riskmap.taxonomy.catalog import V2P_SCENARIOS, V2V_SCENARIOS

ROOT = "Vehicle Incident"


@pytest.fixture
def catalog():
    """The built-in vehicle incident taxonomy."""
    return DEFAULT_CATALOG


@pytest.fixture
def everything(catalog):
    """Initial screen state: every checkbox ticked."""
    return SelectionState.everything(catalog)


@pytest.fixture
def full_tree(everything, catalog):
    """Hierarchy for the fully selected taxonomy (420 scenario leaves)."""
    return build_from_selection(ROOT, everything, catalog)


@pytest.fixture
def single_path_selection(catalog):
    """One context, one equipment pair, one scenario."""
    return SelectionState(
        contexts=frozenset({"Surface"}),
        equipment=EquipmentSelection.from_pairs(catalog, [("Passenger", "Light Vehicles")]),
        scenarios=frozenset({V2P_SCENARIOS[0]}),
    )


@pytest.fixture
def single_path_tree(single_path_selection, catalog):
    return build_from_selection(ROOT, single_path_selection, catalog)


@pytest.fixture
def two_context_selection(catalog):
    """Surface and Underground, Passenger only, V2P plus the first V2V scenario."""
    return SelectionState(
        contexts=frozenset({"Surface", "Underground"}),
        equipment=EquipmentSelection.from_pairs(catalog, [("Passenger", None)]),
        scenarios=frozenset(V2P_SCENARIOS + V2V_SCENARIOS[:1]),
    )


@pytest.fixture
def flat_tree():
    """Root with three weighted leaves, as an external producer would send it."""
    return from_mapping(
        {
            "name": "root",
            "children": [
                {"name": "a", "value": 6},
                {"name": "b", "value": 3},
                {"name": "c", "value": 1},
            ],
        }
    )
