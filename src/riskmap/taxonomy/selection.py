"""Selection state produced by the picker widgets.

Three independent pickers feed the hierarchy: operating contexts, a two-level
equipment picker and the scenario picker. Their combined output is one
immutable, versioned struct; every transition returns a new struct with the
version bumped, and each new struct triggers exactly one rebuild downstream.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from .catalog import DEFAULT_CATALOG, RiskCatalog


@dataclass(frozen=True)
class EquipmentChild:
    """A tier-2 equipment entry with its checkbox state."""

    name: str
    selected: bool = False


@dataclass(frozen=True)
class EquipmentItem:
    """A tier-1 equipment entry.

    ``selected`` is derived from the children by :meth:`with_derived_selection`:
    selected if any child is selected, or, for a childless item, whatever it
    was explicitly set to.
    """

    name: str
    children: tuple[EquipmentChild, ...] = ()
    selected: bool = False

    def with_derived_selection(self) -> "EquipmentItem":
        has_selected_child = any(child.selected for child in self.children)
        return replace(
            self, selected=has_selected_child or (not self.children and self.selected)
        )

    def with_child(self, child_name: str, selected: Optional[bool]) -> "EquipmentItem":
        """Set (or toggle when ``selected`` is None) one child, then re-derive."""
        children = tuple(
            replace(child, selected=(not child.selected if selected is None else selected))
            if child.name == child_name
            else child
            for child in self.children
        )
        return replace(self, children=children).with_derived_selection()

    def is_child_selected(self, child_name: str) -> bool:
        return any(c.name == child_name and c.selected for c in self.children)

    @property
    def selected_children(self) -> tuple[EquipmentChild, ...]:
        return tuple(c for c in self.children if c.selected)


@dataclass(frozen=True)
class EquipmentSelection:
    """Checkbox state of the two-level equipment picker."""

    items: tuple[EquipmentItem, ...] = ()

    @classmethod
    def from_catalog(cls, catalog: RiskCatalog, selected: bool) -> "EquipmentSelection":
        return cls(
            tuple(
                EquipmentItem(
                    name=e.name,
                    children=tuple(EquipmentChild(c, selected) for c in e.children),
                    selected=selected,
                )
                for e in catalog.equipment
            )
        )

    @classmethod
    def from_pairs(
        cls, catalog: RiskCatalog, pairs: Iterable[tuple[str, Optional[str]]]
    ) -> "EquipmentSelection":
        """Select ``(tier1, tier2)`` pairs; a None tier-2 selects every subtype.

        A childless tier-1 item given as ``(name, None)`` is marked selected
        explicitly.
        """
        wanted: dict[str, set[Optional[str]]] = {}
        for parent, child in pairs:
            wanted.setdefault(parent, set()).add(child)

        items = []
        for e in catalog.equipment:
            chosen = wanted.get(e.name, set())
            everything = None in chosen
            children = tuple(EquipmentChild(c, everything or c in chosen) for c in e.children)
            item = EquipmentItem(e.name, children, selected=everything and not e.children)
            items.append(item.with_derived_selection())
        return cls(tuple(items))

    def item(self, name: str) -> Optional[EquipmentItem]:
        for item in self.items:
            if item.name == name:
                return item
        return None

    def is_selected(self, parent: str, child: Optional[str] = None) -> bool:
        item = self.item(parent)
        if item is None:
            return False
        if child is None:
            return item.selected
        return item.is_child_selected(child)

    def toggle(self, parent: str, child: str) -> "EquipmentSelection":
        return self._update(parent, child, None)

    def remove(self, parent: str, child: str) -> "EquipmentSelection":
        return self._update(parent, child, False)

    def selected_pairs(self) -> list[tuple[str, str]]:
        return [
            (item.name, child.name)
            for item in self.items
            if item.selected
            for child in item.children
            if child.selected
        ]

    def _update(
        self, parent: str, child: str, selected: Optional[bool]
    ) -> "EquipmentSelection":
        return EquipmentSelection(
            tuple(
                item.with_child(child, selected) if item.name == parent else item
                for item in self.items
            )
        )


@dataclass(frozen=True)
class SelectionState:
    """Everything the HierarchyBuilder consumes, as one versioned value."""

    contexts: frozenset[str] = frozenset()
    equipment: EquipmentSelection = field(default_factory=EquipmentSelection)
    scenarios: frozenset[str] = frozenset()
    version: int = 0

    @classmethod
    def everything(cls, catalog: RiskCatalog = DEFAULT_CATALOG) -> "SelectionState":
        """The initial state of the screen: every checkbox ticked."""
        return cls(
            contexts=frozenset(catalog.contexts),
            equipment=EquipmentSelection.from_catalog(catalog, selected=True),
            scenarios=frozenset(catalog.all_scenarios),
        )

    @classmethod
    def nothing(cls, catalog: RiskCatalog = DEFAULT_CATALOG) -> "SelectionState":
        return cls(equipment=EquipmentSelection.from_catalog(catalog, selected=False))

    # -- transitions ------------------------------------------------------

    def toggle_context(self, name: str) -> "SelectionState":
        return self.with_contexts(self.contexts ^ {name})

    def remove_context(self, name: str) -> "SelectionState":
        return self.with_contexts(self.contexts - {name})

    def toggle_scenario(self, name: str) -> "SelectionState":
        return self.with_scenarios(self.scenarios ^ {name})

    def remove_scenario(self, name: str) -> "SelectionState":
        return self.with_scenarios(self.scenarios - {name})

    def toggle_equipment(self, parent: str, child: str) -> "SelectionState":
        return self.with_equipment(self.equipment.toggle(parent, child))

    def remove_equipment(self, parent: str, child: str) -> "SelectionState":
        return self.with_equipment(self.equipment.remove(parent, child))

    def with_contexts(self, contexts: Iterable[str]) -> "SelectionState":
        return replace(self, contexts=frozenset(contexts), version=self.version + 1)

    def with_scenarios(self, scenarios: Iterable[str]) -> "SelectionState":
        return replace(self, scenarios=frozenset(scenarios), version=self.version + 1)

    def with_equipment(self, equipment: EquipmentSelection) -> "SelectionState":
        return replace(self, equipment=equipment, version=self.version + 1)

    def with_mechanisms(
        self, mechanisms: Iterable[str], catalog: RiskCatalog = DEFAULT_CATALOG
    ) -> "SelectionState":
        """Tick or untick whole DEM groups.

        A mechanism is on while any of its scenarios is selected. Only the
        groups whose state flips gain or lose all their scenarios; the rest
        keep whatever subset was picked individually.
        """
        chosen = set(mechanisms)
        scenarios = set(self.scenarios)
        for mechanism in catalog.mechanisms:
            was_on = any(s in self.scenarios for s in mechanism.scenarios)
            is_on = mechanism.name in chosen
            if is_on and not was_on:
                scenarios.update(mechanism.scenarios)
            elif was_on and not is_on:
                scenarios.difference_update(mechanism.scenarios)
        return self.with_scenarios(scenarios)

    # -- queries ----------------------------------------------------------

    def grouped_scenarios(self, catalog: RiskCatalog = DEFAULT_CATALOG) -> dict[str, list[str]]:
        """Selected scenarios grouped under their DEM, in catalog order.

        DEM group labels that sit in the scenario set are skipped; they are
        tags, not scenarios.
        """
        grouped: dict[str, list[str]] = {m.name: [] for m in catalog.mechanisms}
        for mechanism in catalog.mechanisms:
            for scenario in mechanism.scenarios:
                if scenario in self.scenarios:
                    grouped[mechanism.name].append(scenario)
        return grouped

    def selected_equipment(self) -> list[tuple[EquipmentItem, tuple[EquipmentChild, ...]]]:
        """Selected tier-1 items that still have at least one selected subtype."""
        return [
            (item, item.selected_children)
            for item in self.equipment.items
            if item.selected and item.selected_children
        ]
