"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console

from ..config import TreemapConfig, load_config
from ..hierarchy import WeightedNode
from ..taxonomy import (
    DEFAULT_CATALOG,
    EquipmentSelection,
    RiskCatalog,
    SelectionState,
    load_catalog,
)

console = Console()

PATH_SEPARATOR = "/"


def resolve_config(
    config: Optional[Path] = None,
    title: Optional[str] = None,
    max_depth: Optional[str] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    catalog_file: Optional[Path] = None,
    verbose: bool = False,
) -> TreemapConfig:
    """Build configuration from CLI options."""
    overrides = {
        "title": title,
        "max_depth": max_depth,
        "width": width,
        "height": height,
        "catalog_file": str(catalog_file) if catalog_file else None,
    }
    if verbose:
        overrides["verbose"] = True
    return load_config(config_file=config, **overrides)


def resolve_catalog(settings: TreemapConfig) -> RiskCatalog:
    if settings.catalog_file:
        return load_catalog(settings.catalog_file)
    return DEFAULT_CATALOG


def build_selection(
    catalog: RiskCatalog,
    contexts: Optional[Sequence[str]] = None,
    equipment: Optional[Sequence[str]] = None,
    scenarios: Optional[Sequence[str]] = None,
    mechanisms: Optional[Sequence[str]] = None,
) -> SelectionState:
    """Selection from repeatable CLI options.

    A group with no options given is fully selected. ``equipment`` entries
    are ``"Level 1"`` (every subtype) or ``"Level 1/Level 2"``.
    ``mechanisms`` select every scenario of the named DEM and combine with
    ``scenarios``.
    """
    selection = SelectionState.everything(catalog)

    if contexts:
        _check_known("operating context", contexts, catalog.contexts)
        selection = selection.with_contexts(contexts)

    if equipment:
        pairs = []
        for entry in equipment:
            parent, _, child = (part.strip() for part in entry.partition(PATH_SEPARATOR))
            known = catalog.equipment_named(parent)
            if known is None:
                _unknown("equipment", parent, [e.name for e in catalog.equipment])
            if child and child not in known.children:
                _unknown(f"{parent} subtype", child, known.children)
            pairs.append((parent, child or None))
        selection = selection.with_equipment(EquipmentSelection.from_pairs(catalog, pairs))

    if scenarios or mechanisms:
        chosen: list[str] = []
        for name in mechanisms or ():
            mechanism = catalog.mechanism_named(name)
            if mechanism is None:
                _unknown("damaging energy mechanism", name, catalog.mechanism_names)
            chosen.extend(mechanism.scenarios)
        if scenarios:
            _check_known("scenario", scenarios, catalog.all_scenarios)
            chosen.extend(scenarios)
        selection = selection.with_scenarios(chosen)

    return selection


def parse_zoom_path(zoom: Optional[str]) -> tuple[str, ...]:
    """``"Surface/Passenger"`` -> ``("Surface", "Passenger")``."""
    if not zoom:
        return ()
    return tuple(part.strip() for part in zoom.split(PATH_SEPARATOR) if part.strip())


def zoom_target(tree: WeightedNode, path: tuple[str, ...]) -> WeightedNode:
    """Resolve a ``--zoom`` path, rejecting paths that are missing or end at a leaf."""
    node = tree.find(path)
    if node is None:
        raise typer.BadParameter(
            f"'{PATH_SEPARATOR.join(path)}' is not in the current hierarchy", param_hint="--zoom"
        )
    if path and not node.children:
        raise typer.BadParameter(
            f"'{PATH_SEPARATOR.join(path)}' is a scenario and cannot be zoomed into",
            param_hint="--zoom",
        )
    return node


def _check_known(kind: str, names: Sequence[str], known: Sequence[str]) -> None:
    for name in names:
        if name not in known:
            _unknown(kind, name, known)


def _unknown(kind: str, name: str, known: Sequence[str]):
    choices = ", ".join(f"'{k}'" for k in known)
    raise typer.BadParameter(f"unknown {kind} '{name}' (choose from {choices})")
