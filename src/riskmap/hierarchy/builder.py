"""Derive the weighted risk hierarchy from the current selections.

The tree is the cross product of the selections, walked in catalog order::

    Vehicle Incident
    └── Surface                                   (operating context)
        └── Passenger                             (equipment level 1)
            └── Light Vehicles                    (equipment level 2)
                └── Vehicle to person             (damaging energy mechanism)
                    └── Head-on, dove tailing...  (scenario, value 1)

Any branch that ends up without a scenario leaf is pruned, so removing the
last scenario under a mechanism removes the mechanism and every ancestor
left empty by it.
"""

from __future__ import annotations

from typing import AbstractSet, Optional

from ..logging_config import get_logger
from ..taxonomy.catalog import DEFAULT_CATALOG, RiskCatalog
from ..taxonomy.selection import EquipmentSelection, SelectionState
from .models import NodePath, WeightedNode

logger = get_logger(__name__)

SCENARIO_WEIGHT = 1


def build_hierarchy(
    root_label: str,
    selected_contexts: AbstractSet[str],
    selected_equipment: EquipmentSelection,
    selected_scenarios: AbstractSet[str],
    catalog: RiskCatalog = DEFAULT_CATALOG,
) -> WeightedNode:
    """Build the weighted tree for one selection snapshot.

    Args:
        root_label: Name of the true root (the map title)
        selected_contexts: Operating context names
        selected_equipment: Two-level equipment checkbox state
        selected_scenarios: Scenario names; DEM labels may appear too and
            qualify their group, but only scenarios become leaves
        catalog: Taxonomy universe to walk

    Returns:
        The root node. Its value is 0 with no children when nothing
        qualifies; callers render the empty state for that.
    """
    _log_unknown(selected_contexts, set(catalog.contexts), "operating context")
    _log_unknown(
        selected_scenarios,
        set(catalog.all_scenarios) | set(catalog.mechanism_names),
        "scenario",
    )

    contexts = []
    for context in catalog.contexts:
        if context not in selected_contexts:
            continue
        node = _context_node(context, (context,), selected_equipment, selected_scenarios, catalog)
        if node is not None:
            contexts.append(node)

    root = WeightedNode.branch(root_label, (), contexts)
    logger.debug(
        "Built hierarchy '%s': %d contexts, total value %s", root_label, len(contexts), root.value
    )
    return root


def build_from_selection(
    root_label: str,
    selection: SelectionState,
    catalog: RiskCatalog = DEFAULT_CATALOG,
) -> WeightedNode:
    return build_hierarchy(
        root_label, selection.contexts, selection.equipment, selection.scenarios, catalog
    )


def _context_node(
    name: str,
    path: NodePath,
    equipment: EquipmentSelection,
    scenarios: AbstractSet[str],
    catalog: RiskCatalog,
) -> Optional[WeightedNode]:
    tier1_nodes = []
    for equipment_type in catalog.equipment:
        if not equipment.is_selected(equipment_type.name):
            continue
        tier1_path = path + (equipment_type.name,)
        tier2_nodes = []
        for subtype in equipment_type.children:
            if not equipment.is_selected(equipment_type.name, subtype):
                continue
            tier2 = _tier2_node(subtype, tier1_path + (subtype,), scenarios, catalog)
            if tier2 is not None:
                tier2_nodes.append(tier2)
        if tier2_nodes:
            tier1_nodes.append(WeightedNode.branch(equipment_type.name, tier1_path, tier2_nodes))
    if not tier1_nodes:
        return None
    return WeightedNode.branch(name, path, tier1_nodes)


def _tier2_node(
    name: str, path: NodePath, scenarios: AbstractSet[str], catalog: RiskCatalog
) -> Optional[WeightedNode]:
    """Tier-2 equipment node holding every mechanism with a selected scenario."""
    mechanisms = []
    for mechanism in catalog.mechanisms:
        chosen = [s for s in mechanism.scenarios if s in scenarios]
        if not chosen:
            # A selected group label with no selected scenario still has no leaves.
            continue
        mechanism_path = path + (mechanism.name,)
        leaves = [
            WeightedNode.leaf(s, mechanism_path + (s,), SCENARIO_WEIGHT) for s in chosen
        ]
        mechanisms.append(WeightedNode.branch(mechanism.name, mechanism_path, leaves))
    if not mechanisms:
        return None
    return WeightedNode.branch(name, path, mechanisms)


def _log_unknown(selected: AbstractSet[str], known: set[str], kind: str) -> None:
    unknown = sorted(set(selected) - known)
    if unknown:
        logger.debug("Ignoring unknown %s selection(s): %s", kind, ", ".join(unknown))
