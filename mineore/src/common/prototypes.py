"""Immutable prototype specs consumed by the layout engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

from .constants import SMALL_UNIT_MAX_SIZE
from .geometry import Facing, TileAlignment


def _oriented(width: int, height: int, facing: Optional[Facing]) -> Tuple[int, int]:
    if facing is not None and facing.is_horizontal:
        return (height, width)
    return (width, height)


@dataclass(frozen=True)
class UnitSpec:
    """A mining drill: footprint in its north-facing orientation plus radius."""

    name: str
    width: int
    height: int
    radius: float
    has_fluid_input: bool = False
    module_slots: int = 0
    resource_categories: FrozenSet[str] = field(default_factory=frozenset)

    def footprint(self, facing: Optional[Facing] = None) -> Tuple[int, int]:
        """(width, height) in tiles when facing ``facing``."""
        return _oriented(self.width, self.height, facing)

    @property
    def max_size(self) -> int:
        return max(self.width, self.height)

    def is_small(self, max_size: int = SMALL_UNIT_MAX_SIZE) -> bool:
        """Small units get plain belts and edge relays instead of undergrounds."""
        return self.max_size <= max_size

    @property
    def mining_diameter(self) -> int:
        """Side length in tiles of the square the unit can mine."""
        return 2 * math.floor(self.radius) + 1


@dataclass(frozen=True)
class RelaySpec:
    """An electric pole or substation."""

    name: str
    width: int = 1
    height: int = 1
    supply_distance: float = 2.5
    wire_reach: float = 9.0

    @property
    def alignment_x(self) -> TileAlignment:
        return TileAlignment.for_size(self.width)

    @property
    def alignment_y(self) -> TileAlignment:
        return TileAlignment.for_size(self.height)


@dataclass(frozen=True)
class BoosterSpec:
    """A beacon."""

    name: str
    width: int = 3
    height: int = 3
    supply_distance: float = 3.0
    module_slots: int = 2

    @property
    def alignment_x(self) -> TileAlignment:
        return TileAlignment.for_size(self.width)

    @property
    def alignment_y(self) -> TileAlignment:
        return TileAlignment.for_size(self.height)


@dataclass(frozen=True)
class TransporterSpec:
    """A belt tier and its derived underground variant (if the game has one)."""

    name: str
    underground_name: Optional[str] = None
    max_underground_distance: int = 5


@dataclass(frozen=True)
class PipeSpec:
    """A pipe and its derived pipe-to-ground variant."""

    name: str
    underground_name: Optional[str] = None
    max_underground_distance: int = 10
