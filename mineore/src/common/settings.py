"""Per-run player choices for a placement run."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Optional

from .constants import (
    DEFAULT_CONFIG,
    DEFAULT_MAX_BOOSTERS_PER_UNIT,
    DEFAULT_PREFERRED_BOOSTERS_PER_UNIT,
    DEFAULT_QUALITY,
    MAX_BOOSTERS_PER_UNIT_LIMIT,
    PlannerConfig,
)
from .geometry import Facing


class DensityMode(Enum):
    """How tightly units are packed along a transport line."""

    DENSE = "dense"  # units touch edge to edge
    SPARSE = "sparse"  # units spaced by their mining diameter, staggered rows

    @classmethod
    def parse(cls, value: "str | DensityMode") -> "DensityMode":
        if isinstance(value, DensityMode):
            return value
        text = str(value).strip().lower()
        # Names used by the in-game tool
        aliases = {"productivity": "dense", "efficient": "sparse", "normal": "sparse"}
        text = aliases.get(text, text)
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown density mode '{value}'")


@dataclass
class PlannerSettings:
    """The settings record the configuration collaborator hands over.

    Empty prototype names disable the matching stage.
    """

    unit_type: str
    transporter_type: Optional[str] = None
    relay_type: Optional[str] = None
    booster_type: Optional[str] = None
    booster_module: Optional[str] = None
    booster_module_count: Optional[int] = None
    unit_module: Optional[str] = None
    unit_module_count: Optional[int] = None
    pipe_type: Optional[str] = None
    deposit_type: Optional[str] = None
    density_mode: DensityMode = DensityMode.DENSE
    flow_direction: Facing = Facing.SOUTH
    quality_tier: str = DEFAULT_QUALITY
    transporter_quality: Optional[str] = None
    relay_quality: Optional[str] = None
    booster_quality: Optional[str] = None
    conservative_mode: bool = False
    per_unit_booster_quota: int = DEFAULT_PREFERRED_BOOSTERS_PER_UNIT
    max_boosters_per_unit: int = DEFAULT_MAX_BOOSTERS_PER_UNIT

    def __post_init__(self) -> None:
        if not self.unit_type:
            raise ValueError("A unit type is required")
        self.density_mode = DensityMode.parse(self.density_mode)
        self.flow_direction = Facing.parse(self.flow_direction)
        if not 1 <= self.max_boosters_per_unit <= MAX_BOOSTERS_PER_UNIT_LIMIT:
            raise ValueError(
                f"max_boosters_per_unit must be between 1 and {MAX_BOOSTERS_PER_UNIT_LIMIT}"
            )
        if not 0 <= self.per_unit_booster_quota <= MAX_BOOSTERS_PER_UNIT_LIMIT:
            raise ValueError(
                f"per_unit_booster_quota must be between 0 and {MAX_BOOSTERS_PER_UNIT_LIMIT}"
            )
        for name in ("booster_module_count", "unit_module_count"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative")

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], config: PlannerConfig = DEFAULT_CONFIG
    ) -> "PlannerSettings":
        """Build settings from a plain mapping, ignoring unknown keys.

        Quality and booster limits missing from ``data`` come from ``config``.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values.setdefault("quality_tier", config.default_quality)
        values.setdefault("per_unit_booster_quota", config.default_preferred_boosters)
        values.setdefault("max_boosters_per_unit", config.default_max_boosters)
        return cls(**values)

    @property
    def effective_booster_quota(self) -> int:
        """Quota for the greedy booster pass.

        The preferred count applies when it is set and below the maximum; 0
        means "no preference" and falls back to the maximum.
        """
        if 0 < self.per_unit_booster_quota < self.max_boosters_per_unit:
            return self.per_unit_booster_quota
        return self.max_boosters_per_unit

    def quality_for(self, stage_quality: Optional[str]) -> str:
        return stage_quality or self.quality_tier or DEFAULT_QUALITY
