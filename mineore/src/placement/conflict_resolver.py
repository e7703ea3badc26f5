"""Clear a footprint and hand a marker to the surface."""

from __future__ import annotations

import logging
from enum import Enum
from typing import List

from mineore.src.common.constants import CONFLICT_MARGIN
from mineore.src.world.obstacles import Obstacle, ObstacleClass
from mineore.src.world.surface import WorldSurface

from .markers import PlaceholderMarker

logger = logging.getLogger(__name__)


class PlacementOutcome(Enum):
    PLACED = "placed"
    BLOCKED = "blocked"  # conservative mode found something it won't remove
    REFUSED = "refused"  # the surface rejected the marker

    @property
    def ok(self) -> bool:
        return self is PlacementOutcome.PLACED


class ConflictResolver:
    """Decide what to clear before placing a marker, then place it.

    Forced mode orders removal of every natural obstacle and structure in
    the footprint. Conservative mode only removes natural obstacles and
    gives up as soon as a structure or ground-level rail is in the way; the
    decision is made before any removal is ordered, so a blocked placement
    leaves the surface untouched.
    """

    def __init__(
        self,
        surface: WorldSurface,
        conservative: bool = False,
        margin: float = CONFLICT_MARGIN,
    ) -> None:
        self.surface = surface
        self.conservative = conservative
        self.margin = margin
        self.removals_ordered = 0

    def _classify(self, obstacles: List[Obstacle]) -> "tuple[List[Obstacle], bool]":
        to_remove: List[Obstacle] = []
        blocked = False
        for obstacle in obstacles:
            kind = obstacle.obstacle_class
            if kind.is_exempt or obstacle.removal_ordered:
                continue
            if kind.is_natural:
                to_remove.append(obstacle)
            elif kind is ObstacleClass.GROUND_TRANSIT:
                if self.conservative:
                    blocked = True
            elif self.conservative:
                blocked = True
            else:
                to_remove.append(obstacle)
        return to_remove, blocked

    def place(self, marker: PlaceholderMarker) -> PlacementOutcome:
        """Clear ``marker``'s footprint according to the mode and place it."""
        query = marker.area.shrink(self.margin)
        to_remove, blocked = self._classify(self.surface.find_obstacles(query))

        if blocked:
            logger.debug("Blocked %s at %s", marker.name, marker.position.as_tuple())
            return PlacementOutcome.BLOCKED

        for obstacle in to_remove:
            self.surface.order_removal(obstacle)
            self.removals_ordered += 1

        if not self.surface.place_marker(marker):
            return PlacementOutcome.REFUSED
        return PlacementOutcome.PLACED
