from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from mineore.src.common.constants import DEFAULT_QUALITY, PLACEMENT_STAGES
from mineore.src.common.geometry import BoundingBox, Facing, Position

"""Placeholder markers and per-stage placement accounting."""


@dataclass(frozen=True)
class ModuleRequest:
    """Modules the host should deliver into a marker once it is built."""

    name: str
    count: int
    quality: str = DEFAULT_QUALITY


@dataclass
class PlaceholderMarker:
    """A deferred-construction record handed to the placement sink."""

    name: str  # entity prototype to build
    position: Position
    direction: Optional[Facing] = None
    quality: str = DEFAULT_QUALITY
    footprint: Tuple[int, int] = (1, 1)  # north-facing (width, height)
    module_requests: List[ModuleRequest] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)
    stage: Optional[str] = None

    @property
    def oriented_footprint(self) -> Tuple[int, int]:
        width, height = self.footprint
        if self.direction is not None and self.direction.is_horizontal:
            return (height, width)
        return (width, height)

    @property
    def area(self) -> BoundingBox:
        """Exact tile footprint of the marker."""
        width, height = self.oriented_footprint
        return BoundingBox.from_center(self.position, width, height)


@dataclass
class StageResult:
    """Placed and skipped counters for one stage."""

    stage: str
    placed: int = 0
    skipped: int = 0

    def record(self, was_placed: bool) -> None:
        if was_placed:
            self.placed += 1
        else:
            self.skipped += 1

    def as_tuple(self) -> Tuple[int, int]:
        return (self.placed, self.skipped)


@dataclass
class PlacementReport:
    """Everything a placement run produced."""

    stages: Dict[str, StageResult] = field(
        default_factory=lambda: {name: StageResult(name) for name in PLACEMENT_STAGES}
    )
    markers: List[PlaceholderMarker] = field(default_factory=list)

    def stage(self, name: str) -> StageResult:
        return self.stages[name]

    def counts(self) -> Dict[str, Tuple[int, int]]:
        return {name: result.as_tuple() for name, result in self.stages.items()}

    @property
    def total_placed(self) -> int:
        return sum(result.placed for result in self.stages.values())

    @property
    def total_skipped(self) -> int:
        return sum(result.skipped for result in self.stages.values())

    def record(self, marker: PlaceholderMarker, was_placed: bool) -> None:
        """Count a placement attempt against the marker's stage."""
        self.stages[marker.stage].record(was_placed)
        if was_placed:
            self.markers.append(marker)

    def markers_for(self, stage: str) -> List[PlaceholderMarker]:
        return [marker for marker in self.markers if marker.stage == stage]

    def format_summary(self) -> str:
        """One-line summary in the style of the in-game flying text."""
        units = self.stages[PLACEMENT_STAGES[0]]
        if units.placed == 0:
            return "No valid positions for miners."

        extras = [
            f"{result.placed} {name}"
            for name, result in self.stages.items()
            if name != units.stage and result.placed > 0
        ]
        summary = f"Placed {units.placed} miners"
        if extras:
            summary += " with " + ", ".join(extras)
        if self.total_skipped:
            summary += f" ({self.total_skipped} skipped)"
        return summary + "."
