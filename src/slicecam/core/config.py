"""
Configuration management for SliceCAM.

Defines the machining settings record consumed by every generation step and
a loader for named machining presets stored as YAML files.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from slicecam.core.exceptions import ConfigurationError


class OffsetMode(str, Enum):
    """Which side of the contour the tool centre runs on."""

    INSIDE = "inside"
    OUTSIDE = "outside"
    CENTER = "center"


class MillingDirection(str, Enum):
    """Cutting direction relative to feed and spindle rotation."""

    CLIMB = "climb"
    CONVENTIONAL = "conventional"


class PolygonOffsetMethod(str, Enum):
    """Algorithm used to offset arbitrary polygons."""

    RADIAL = "radial"  # Centroid projection (fast approximation)
    MITER = "miter"  # True polygon offset via pyclipper


class MachiningSettings(BaseModel):
    """
    Machining settings for one toolpath generation call.

    Accepts both snake_case field names and the camelCase keys used by the
    CAD front-end (``toolDiameter``, ``safeHeight``, ...).

    Example:
        >>> settings = MachiningSettings.from_dict({
        ...     "toolDiameter": 6, "depth": 20, "stepdown": 10,
        ...     "feedrate": 500, "plungerate": 100, "offset": "outside",
        ... })
        >>> settings.offset_distance
        3.0
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tool_diameter: float = Field(alias="toolDiameter", gt=0)
    depth: float = Field(ge=0)
    stepdown: float = Field(gt=0)
    feedrate: float = Field(gt=0)
    plungerate: float = Field(gt=0)
    offset: OffsetMode = OffsetMode.CENTER
    direction: MillingDirection = MillingDirection.CLIMB
    safe_height: float = Field(default=5.0, alias="safeHeight", ge=0)
    polygon_offset: PolygonOffsetMethod = Field(
        default=PolygonOffsetMethod.RADIAL, alias="polygonOffset"
    )
    min_segments: int = Field(default=36, alias="minSegments", ge=3)

    @property
    def tool_radius(self) -> float:
        return self.tool_diameter / 2.0

    @property
    def offset_distance(self) -> float:
        """Signed contour offset: positive outward, negative inward."""
        if self.offset == OffsetMode.OUTSIDE:
            return self.tool_radius
        if self.offset == OffsetMode.INSIDE:
            return -self.tool_radius
        return 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MachiningSettings":
        """
        Build settings from a plain mapping.

        Raises:
            ConfigurationError: If any field is missing or out of range
                (e.g. ``stepdown <= 0``).
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(
                "Invalid machining settings",
                details={"errors": e.errors(include_url=False)},
            ) from e


@dataclass
class ConfigManager:
    """
    Loader for named machining presets.

    Presets live in ``<config_dir>/machining/*.yaml``, each with a top-level
    ``machining:`` mapping.

    Example:
        >>> config = ConfigManager(config_dir=Path("config"))
        >>> settings = config.get_preset("aluminium_6mm")
    """

    config_dir: Path
    _presets: dict[str, MachiningSettings] = field(default_factory=dict, init=False)
    _loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir)
        if not self.config_dir.exists():
            raise ConfigurationError(
                f"Configuration directory not found: {self.config_dir}"
            )

    def load(self) -> None:
        """Load all presets from disk."""
        presets_dir = self.config_dir / "machining"
        if presets_dir.exists():
            for config_file in sorted(presets_dir.glob("*.yaml")):
                self._load_preset(config_file)
        self._loaded = True

    def _load_preset(self, config_file: Path) -> None:
        try:
            with open(config_file) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to load machining preset: {config_file}",
                details={"error": str(e)},
            )

        if not data or "machining" not in data:
            return

        try:
            self._presets[config_file.stem] = MachiningSettings.from_dict(
                data["machining"]
            )
        except ConfigurationError as e:
            raise ConfigurationError(
                f"Failed to load machining preset: {config_file}",
                details=e.details,
            )

    def get_preset(self, name: str) -> MachiningSettings:
        """
        Get machining settings by preset name.

        Args:
            name: Preset name (without .yaml extension)

        Raises:
            ConfigurationError: If the preset is not found
        """
        if not self._loaded:
            self.load()

        if name not in self._presets:
            raise ConfigurationError(
                f"Machining preset not found: {name}",
                details={"available": list(self._presets.keys())},
            )
        return self._presets[name]

    def list_presets(self) -> list[str]:
        """List available machining presets."""
        if not self._loaded:
            self.load()
        return list(self._presets.keys())
