"""The host world as seen by the placers.

Placers never touch global state: they receive a :class:`WorldSurface` and
talk to it through three calls. :class:`InMemorySurface` is the host used by
the command line tool and the tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from mineore.src.common.geometry import BoundingBox, Tile

from .obstacles import Obstacle, ObstacleClass

if TYPE_CHECKING:
    from mineore.src.placement.markers import PlaceholderMarker

logger = logging.getLogger(__name__)


class WorldSurface(ABC):
    """Query/command capability the host provides to the engine."""

    @abstractmethod
    def find_obstacles(self, area: BoundingBox) -> List[Obstacle]:
        """Everything whose footprint overlaps ``area``."""

    @abstractmethod
    def order_removal(self, obstacle: Obstacle) -> None:
        """Mark ``obstacle`` for removal by the host."""

    @abstractmethod
    def place_marker(self, marker: PlaceholderMarker) -> bool:
        """Hand a marker to the host; False if the host refuses it."""


class InMemorySurface(WorldSurface):
    """A surface that keeps obstacles and markers in memory.

    Markers are refused when they overlap another marker or an obstacle that
    is still standing (not exempt and not ordered for removal). Ground-level
    transit infrastructure is never removed, so it refuses markers in both
    conflict modes.
    """

    def __init__(self, obstacles: Optional[Iterable[Obstacle]] = None) -> None:
        self.obstacles: List[Obstacle] = list(obstacles or [])
        self.markers: List[PlaceholderMarker] = []
        self.removals: List[Obstacle] = []
        self._marker_tiles: Dict[Tile, PlaceholderMarker] = {}

    def add_obstacle(self, obstacle: Obstacle) -> Obstacle:
        self.obstacles.append(obstacle)
        return obstacle

    def find_obstacles(self, area: BoundingBox) -> List[Obstacle]:
        found = [obstacle for obstacle in self.obstacles if obstacle.area.intersects(area)]

        seen = set()
        for tile in area.tiles():
            marker = self._marker_tiles.get(tile)
            if marker is None or id(marker) in seen:
                continue
            seen.add(id(marker))
            if marker.area.intersects(area):
                found.append(
                    Obstacle(
                        name=marker.name,
                        entity_type="entity-ghost",
                        area=marker.area,
                        obstacle_class=ObstacleClass.PLACEHOLDER,
                    )
                )
        return found

    def order_removal(self, obstacle: Obstacle) -> None:
        if obstacle.removal_ordered:
            return
        obstacle.removal_ordered = True
        self.removals.append(obstacle)

    def place_marker(self, marker: PlaceholderMarker) -> bool:
        area = marker.area
        for tile in area.tiles():
            if tile in self._marker_tiles:
                logger.debug("Refused %s at %s: marker overlap", marker.name, marker.position)
                return False

        for obstacle in self.obstacles:
            if obstacle.removal_ordered or obstacle.obstacle_class.is_exempt:
                continue
            if obstacle.area.intersects(area):
                logger.debug(
                    "Refused %s at %s: blocked by %s", marker.name, marker.position, obstacle.name
                )
                return False

        self.markers.append(marker)
        for tile in area.tiles():
            self._marker_tiles[tile] = marker
        return True
