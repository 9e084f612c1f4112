"""Static risk taxonomy: operating contexts, equipment tiers, damaging energy mechanisms.

The catalog is the universe the selection widgets pick from. Every operating
context offers the same two-level equipment list, and every equipment pair is
exposed to every damaging energy mechanism (DEM) and its scenarios.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..exceptions import CatalogError

# Category label per absolute depth, used for tooltips only.
NODE_CATEGORIES = (
    "Risk",
    "Operating Context",
    "Equipment Level 1",
    "Equipment Level 2",
    "Damaging Energy Mechanism",
    "Scenario",
)

FALLBACK_CATEGORY = "Category"


def category_for_depth(depth: int) -> str:
    """Tooltip category of a node at ``depth`` below the true root."""
    if 0 <= depth < len(NODE_CATEGORIES):
        return NODE_CATEGORIES[depth]
    return FALLBACK_CATEGORY


V2P_SCENARIOS = (
    "Vehicle in control contacts person involved in the task",
    "Vehicle in control contacts person not involved in the task",
    "Vehicle not in control / moves unexpectedly contacting person including rollaway",
    "Person in footprint of vehicle including rollaway",
    "Merging, overtaking, path crossover, junction, intersection crossover",
    "Head-on, dove tailing, rear end, blind approach",
)

V2V_SCENARIOS = (
    "Collision between two vehicles at an intersection or junction",
    "Rear-end collision due to sudden braking or inattention",
    "Side-swipe collision while merging or changing lanes",
    "Head-on collision due to wrong-way entry or overtaking misjudgment",
    "T-bone collision at a crossroad or stop sign violation",
)

V2E_SCENARIOS = (
    "Vehicle impacts stationary object (barrier, bollard, tree, pole)",
    "Vehicle collides with building or site infrastructure",
    "Vehicle leaves the roadway and enters an exclusion zone",
    "Vehicle skids or loses control due to environmental conditions",
)


@dataclass(frozen=True)
class EquipmentType:
    """A tier-1 equipment class and its tier-2 subtypes."""

    name: str
    children: tuple[str, ...] = ()


@dataclass(frozen=True)
class Mechanism:
    """A damaging energy mechanism grouping its scenarios."""

    name: str
    scenarios: tuple[str, ...] = ()


@dataclass(frozen=True)
class RiskCatalog:
    """The full taxonomy universe, in display order."""

    contexts: tuple[str, ...]
    equipment: tuple[EquipmentType, ...]
    mechanisms: tuple[Mechanism, ...]

    def __post_init__(self) -> None:
        _require_unique("operating context", self.contexts)
        _require_unique("equipment", [e.name for e in self.equipment])
        _require_unique("mechanism", [m.name for m in self.mechanisms])
        for item in self.equipment:
            _require_unique(f"equipment '{item.name}' subtype", item.children)
        _require_unique(
            "scenario", [s for m in self.mechanisms for s in m.scenarios]
        )

    @property
    def mechanism_names(self) -> tuple[str, ...]:
        return tuple(m.name for m in self.mechanisms)

    @property
    def all_scenarios(self) -> tuple[str, ...]:
        return tuple(s for m in self.mechanisms for s in m.scenarios)

    def equipment_named(self, name: str) -> Optional[EquipmentType]:
        for item in self.equipment:
            if item.name == name:
                return item
        return None

    def mechanism_named(self, name: str) -> Optional[Mechanism]:
        for mechanism in self.mechanisms:
            if mechanism.name == name:
                return mechanism
        return None

    def mechanism_of(self, scenario: str) -> Optional[str]:
        """Name of the DEM a scenario belongs to, or None if unknown."""
        for mechanism in self.mechanisms:
            if scenario in mechanism.scenarios:
                return mechanism.name
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "contexts": list(self.contexts),
            "equipment": [
                {"name": e.name, "children": list(e.children)} for e in self.equipment
            ],
            "mechanisms": [
                {"name": m.name, "scenarios": list(m.scenarios)} for m in self.mechanisms
            ],
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], source: str = "") -> "RiskCatalog":
        """Build a catalog from ``to_dict()``-shaped data.

        Raises:
            CatalogError: If a section is missing or has the wrong shape.
        """
        try:
            contexts = tuple(str(c) for c in data["contexts"])
            equipment = tuple(
                EquipmentType(str(e["name"]), tuple(str(c) for c in e.get("children", ())))
                for e in data["equipment"]
            )
            mechanisms = tuple(
                Mechanism(str(m["name"]), tuple(str(s) for s in m.get("scenarios", ())))
                for m in data["mechanisms"]
            )
        except KeyError as e:
            raise CatalogError(f"missing key {e}", source=source)
        except (TypeError, AttributeError) as e:
            raise CatalogError(f"unexpected structure: {e}", source=source)
        return cls(contexts=contexts, equipment=equipment, mechanisms=mechanisms)


def load_catalog(path: Union[str, Path]) -> RiskCatalog:
    """Load a JSON catalog file.

    Raises:
        CatalogError: If the file is unreadable or malformed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CatalogError(f"cannot read file: {e.strerror}", source=str(path))
    except json.JSONDecodeError as e:
        raise CatalogError(f"invalid JSON: {e.msg}", source=str(path))
    if not isinstance(data, dict):
        raise CatalogError("top level must be an object", source=str(path))
    return RiskCatalog.from_mapping(data, source=str(path))


def _require_unique(kind: str, names) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise CatalogError(f"duplicate {kind} name '{name}'")
        seen.add(name)


DEFAULT_CATALOG = RiskCatalog(
    contexts=("Non-mining onsite", "Offsite", "Surface", "Underground"),
    equipment=(
        EquipmentType("Passenger", ("Light Vehicles", "High Occupancy Vehicles")),
        EquipmentType("Highway Goods Vehicle", ("Road going and road used",)),
        EquipmentType(
            "Non Heavy Mobile Equipment",
            ("Road going but not normally road used", "Operational Vehicles"),
        ),
        EquipmentType(
            "Heavy Mobile Equipment", ("Rubber Tyre Heavy Vehicle", "Tracked Heavy Vehicle")
        ),
    ),
    mechanisms=(
        Mechanism("Vehicle to person", V2P_SCENARIOS),
        Mechanism("Vehicle to vehicle", V2V_SCENARIOS),
        Mechanism("Vehicle to environment", V2E_SCENARIOS),
    ),
)
