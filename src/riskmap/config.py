"""Configuration loading and management for riskmap.

Configuration sources are merged in priority order:
    1. Defaults (defined in TreemapConfig)
    2. Global config (~/.riskmap.toml)
    3. Project config (./riskmap.toml)
    4. Explicit config file
    5. Environment variables (RISKMAP_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(max_depth=3, title="Vehicle Incident")
    >>> config.max_depth
    3
    >>> config.viewport
    Viewport(width=960, height=600)
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .treemap.labels import TextMetrics
from .treemap.models import LayoutOptions, Viewport

Verbosity = Literal["quiet", "normal", "verbose"]

_UNBOUNDED = {"unbounded", "inf", "infinity", "none", ""}


@dataclass(frozen=True)
class TreemapConfig:
    """Configuration for building and drawing the risk treemap.

    Attributes:
        Presentation:
            title: Label of the true root node and the map heading
            max_depth: Tiers shown below the current root (None = unbounded)

        Viewport:
            width, height: Initial drawing surface size in raster units
            min_viewport: Lower bound applied to every resize notification

        Geometry (raster units):
            padding_outer: Inset between a node's frame and its children
            padding_top: Header band reserved for a node's own label
            padding_inner: Gutter between sibling rectangles

        Text measurement:
            font_size: Label font size
            char_width: Average glyph advance, in em
            line_height: Distance between wrapped lines, in em

        Misc:
            catalog_file: Optional JSON taxonomy replacing the built-in one
            verbosity: Logging verbosity level
    """

    title: str = "Vehicle Incident"
    max_depth: Optional[int] = None

    width: int = 960
    height: int = 600
    min_viewport: int = 100

    padding_outer: int = 3
    padding_top: int = 19
    padding_inner: int = 1

    font_size: float = 10.0
    char_width: float = 0.6
    line_height: float = 1.1

    catalog_file: Optional[str] = None
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.title.strip():
            raise InvalidConfigError("title", self.title, "must not be blank")
        if self.max_depth is not None and self.max_depth < 1:
            raise InvalidConfigError("max_depth", self.max_depth, "must be at least 1")

        if self.min_viewport < 1:
            raise InvalidConfigError("min_viewport", self.min_viewport, "must be at least 1")
        for name in ("width", "height"):
            if getattr(self, name) < 1:
                raise InvalidConfigError(name, getattr(self, name), "must be at least 1")

        for name in ("padding_outer", "padding_top", "padding_inner"):
            if getattr(self, name) < 0:
                raise InvalidConfigError(name, getattr(self, name), "must be non-negative")

        for name in ("font_size", "char_width", "line_height"):
            if getattr(self, name) <= 0:
                raise InvalidConfigError(name, getattr(self, name), "must be positive")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )

    @property
    def viewport(self) -> Viewport:
        """Initial viewport, clamped to the configured minimum."""
        return Viewport(self.width, self.height).clamped(self.min_viewport)

    @property
    def layout_options(self) -> LayoutOptions:
        return LayoutOptions(
            padding_outer=self.padding_outer,
            padding_top=self.padding_top,
            padding_inner=self.padding_inner,
        )

    @property
    def text_metrics(self) -> TextMetrics:
        return TextMetrics(
            font_size=self.font_size,
            char_width=self.char_width,
            line_height=self.line_height,
        )


def load_config(config_file: Optional[Path] = None, **overrides) -> TreemapConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options never mask a file value.

    Returns:
        Validated TreemapConfig instance

    Raises:
        ConfigurationError: If a config file is unreadable or has unknown keys
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".riskmap.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global"))

    project_config = Path.cwd() / "riskmap.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(
                f"Config file not found: {config_file}", details={"path": str(config_file)}
            )
        merged.update(_read_config_file(config_file, "explicit"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "max_depth" in merged:
        merged["max_depth"] = _parse_max_depth(merged["max_depth"])

    try:
        return TreemapConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _read_config_file(path: Path, scope: str) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Invalid {scope} config '{path}'", details={"path": str(path), "reason": str(e)}
        )
    # A [riskmap] table is accepted so the settings can live in a shared file.
    section = data.get("riskmap")
    if isinstance(section, dict):
        return dict(section)
    return data


def _parse_max_depth(value: Any) -> Optional[int]:
    """Normalize ``max_depth`` from TOML, environment or CLI input.

    TOML has no infinity literal, so the strings ``"unbounded"``/``"inf"``
    stand for an unlimited depth window.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidConfigError("max_depth", value, "expected an integer or 'unbounded'")
    if isinstance(value, str):
        if value.strip().lower() in _UNBOUNDED:
            return None
        try:
            return int(value)
        except ValueError:
            raise InvalidConfigError("max_depth", value, "expected an integer or 'unbounded'")
    if isinstance(value, float):
        if math.isinf(value):
            return None
        if not value.is_integer():
            raise InvalidConfigError("max_depth", value, "expected a whole number")
        return int(value)
    if isinstance(value, int):
        return value
    raise InvalidConfigError("max_depth", value, "expected an integer or 'unbounded'")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from RISKMAP_* environment variables.

    Every TreemapConfig field can be set this way, e.g. ``RISKMAP_TITLE``,
    ``RISKMAP_MAX_DEPTH`` (integer or ``unbounded``), ``RISKMAP_WIDTH``,
    ``RISKMAP_PADDING_TOP``.

    Returns:
        Dict of field_name -> parsed_value for any RISKMAP_* vars found.
    """
    type_hints = get_type_hints(TreemapConfig)

    result: dict[str, Any] = {}

    for field_name in TreemapConfig.__dataclass_fields__:
        env_key = f"RISKMAP_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        if field_name == "max_depth":
            result[field_name] = env_value
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
