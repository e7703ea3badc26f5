from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from mineore.src.common.geometry import Axis, BoundingBox, Facing, Position

"""Data structures produced by the grid calculator."""

NEAR_SIDE = "near"  # west side of NS lines, north side of EW lines
FAR_SIDE = "far"


@dataclass(frozen=True)
class PlacementEntry:
    """One unit the calculator decided to place."""

    position: Position
    direction: Facing
    side: str = NEAR_SIDE
    pair_index: int = 0


@dataclass
class TransportLine:
    """The belt corridor between the two sides of one unit pair.

    ``center`` is the perpendicular coordinate of the corridor's middle;
    ``near_positions``/``far_positions`` are the sorted along-axis centers of
    the units on each side and ``along_positions`` their sorted union.
    """

    axis: Axis
    center: float
    pair_index: int
    near_positions: List[float] = field(default_factory=list)
    far_positions: List[float] = field(default_factory=list)

    @property
    def along_positions(self) -> List[float]:
        return sorted(set(self.near_positions) | set(self.far_positions))

    @property
    def along_min(self) -> float:
        return self.along_positions[0]

    @property
    def along_max(self) -> float:
        return self.along_positions[-1]

    @property
    def is_empty(self) -> bool:
        return not self.near_positions and not self.far_positions

    def side_positions(self, side: str) -> List[float]:
        return self.near_positions if side == NEAR_SIDE else self.far_positions

    def first_in_flow(self, flow: Facing) -> int:
        """1-based index into ``along_positions`` of the unit the flow starts at."""
        return 1 if flow.away_from_origin else len(self.along_positions)


@dataclass
class GridLayout:
    """Complete calculator output: unit placements plus corridor metadata."""

    axis: Axis
    flow: Facing
    along_size: int  # unit footprint along the transport line
    cross_size: int  # unit footprint across the transport line
    gap: int = 1
    entries: List[PlacementEntry] = field(default_factory=list)
    lines: List[TransportLine] = field(default_factory=list)
    # Small units only: cross positions of relay columns
    outer_edge_positions: List[float] = field(default_factory=list)
    relay_gap_positions: List[float] = field(default_factory=list)
    relay_gap: int = 0
    booster_width: int = 0
    is_small_unit: bool = False
    bounds: Optional[BoundingBox] = None

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def near_edge(self, line: TransportLine) -> float:
        """Cross coordinate of the outer edge of the near side's units."""
        return line.center - self.gap / 2.0 - self.cross_size

    def far_edge(self, line: TransportLine) -> float:
        """Cross coordinate of the outer edge of the far side's units."""
        return line.center + self.gap / 2.0 + self.cross_size

    def along_extent(self, positions: List[float]) -> Tuple[float, float]:
        """Span from the first unit's near edge to the last unit's far edge."""
        half = self.along_size / 2.0
        return (min(positions) - half, max(positions) + half)
