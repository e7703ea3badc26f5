"""Tile-grid geometry primitives shared by every stage.

Coordinates follow the game's convention: x grows east, y grows south, an
entity's position is the center of its footprint and tile ``(tx, ty)`` spans
``[tx, tx + 1) x [ty, ty + 1)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

Tile = Tuple[int, int]


class Axis(Enum):
    """Orientation of a transport line."""

    NS = "NS"  # line runs north-south, pairs are walked along x
    EW = "EW"  # line runs east-west, pairs are walked along y


class Facing(Enum):
    """The four cardinal directions an entity can face or a belt can flow."""

    NORTH = "north"
    EAST = "east"
    SOUTH = "south"
    WEST = "west"

    @classmethod
    def parse(cls, value: "str | Facing") -> "Facing":
        """Accept a Facing or a case-insensitive direction name ('n' works too)."""
        if isinstance(value, Facing):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.value[0]):
                return member
        raise ValueError(f"Unknown direction '{value}'")

    @property
    def axis(self) -> Axis:
        return Axis.NS if self in (Facing.NORTH, Facing.SOUTH) else Axis.EW

    @property
    def sign(self) -> int:
        """+1 when moving away from the origin (south/east), -1 otherwise."""
        return 1 if self in (Facing.SOUTH, Facing.EAST) else -1

    @property
    def away_from_origin(self) -> bool:
        return self.sign > 0

    @property
    def opposite(self) -> "Facing":
        return _OPPOSITES[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Facing.EAST, Facing.WEST)


_OPPOSITES = {
    Facing.NORTH: Facing.SOUTH,
    Facing.SOUTH: Facing.NORTH,
    Facing.EAST: Facing.WEST,
    Facing.WEST: Facing.EAST,
}


class TileAlignment(Enum):
    """Where an entity's center sits on the tile grid along one axis.

    Odd-sized entities are centered on a tile (``n + 0.5``); even-sized ones
    sit on a tile boundary (``n``).
    """

    CENTER = "center"
    EDGE = "edge"

    @classmethod
    def for_size(cls, size: int) -> "TileAlignment":
        return cls.EDGE if size % 2 == 0 else cls.CENTER

    def snap(self, value: float) -> float:
        """Snap a coordinate onto this alignment, rounding toward -inf."""
        if self is TileAlignment.EDGE:
            return float(math.floor(value))
        return math.floor(value) + 0.5

    def center_from_edge(self, edge: int, size: int) -> float:
        """Center coordinate of an entity whose near edge lies on tile ``edge``."""
        return self.snap(edge + size / 2.0)


@dataclass(frozen=True)
class Position:
    """A map position in (possibly fractional) tile coordinates."""

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def along(self, axis: Axis) -> float:
        """Coordinate along the transport-line axis."""
        return self.y if axis is Axis.NS else self.x

    def cross(self, axis: Axis) -> float:
        """Coordinate perpendicular to the transport-line axis."""
        return self.x if axis is Axis.NS else self.y

    @classmethod
    def from_axes(cls, axis: Axis, along: float, cross: float) -> "Position":
        if axis is Axis.NS:
            return cls(cross, along)
        return cls(along, cross)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle; also used for selection bounds."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_corners(
        cls, left_top: Tuple[float, float], right_bottom: Tuple[float, float]
    ) -> "BoundingBox":
        return cls(left_top[0], left_top[1], right_bottom[0], right_bottom[1])

    @classmethod
    def from_center(cls, center: Position, width: float, height: float) -> "BoundingBox":
        half_w = width / 2.0
        half_h = height / 2.0
        return cls(center.x - half_w, center.y - half_h, center.x + half_w, center.y + half_h)

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Position:
        return Position((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def shrink(self, margin: float) -> "BoundingBox":
        return BoundingBox(
            self.left + margin,
            self.top + margin,
            self.right - margin,
            self.bottom - margin,
        )

    def intersects(self, other: "BoundingBox") -> bool:
        """True when the interiors overlap; touching edges do not count."""
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def tile_range(self) -> Tuple[int, int, int, int]:
        """Inclusive integer tile range ``(x_min, y_min, x_max, y_max)`` covered."""
        return (
            math.floor(self.left),
            math.floor(self.top),
            math.ceil(self.right) - 1,
            math.ceil(self.bottom) - 1,
        )

    def tiles(self) -> Iterator[Tile]:
        x_min, y_min, x_max, y_max = self.tile_range()
        for tx in range(x_min, x_max + 1):
            for ty in range(y_min, y_max + 1):
                yield (tx, ty)

    def to_tile_grid(self) -> "BoundingBox":
        """Expand outward to whole tiles."""
        return BoundingBox(
            math.floor(self.left),
            math.floor(self.top),
            math.ceil(self.right),
            math.ceil(self.bottom),
        )
