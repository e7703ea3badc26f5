"""Obstacle classification for conflict resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Optional

from mineore.src.common.geometry import BoundingBox, Position


class ObstacleClass(Enum):
    """Closed set of obstacle kinds the conflict resolver distinguishes."""

    VEGETATION = "vegetation"
    DEBRIS = "debris"
    GROUND_TRANSIT = "ground-transit"
    ELEVATED_TRANSIT = "elevated-transit"
    ACTOR = "actor"
    DEPOSIT = "deposit"
    PLACEHOLDER = "placeholder"
    STRUCTURE = "structure"

    @property
    def is_exempt(self) -> bool:
        """Never removed and never blocks placement."""
        return self in _EXEMPT

    @property
    def is_natural(self) -> bool:
        """Removed even in conservative mode."""
        return self in (ObstacleClass.VEGETATION, ObstacleClass.DEBRIS)


_EXEMPT = frozenset(
    {
        ObstacleClass.DEPOSIT,
        ObstacleClass.ACTOR,
        ObstacleClass.PLACEHOLDER,
        # Elevated rails are in the air and don't touch ground footprints
        ObstacleClass.ELEVATED_TRANSIT,
    }
)

# Host entity type -> obstacle class. Anything unlisted is a structure.
ENTITY_TYPE_CLASSES = {
    "tree": ObstacleClass.VEGETATION,
    "plant": ObstacleClass.VEGETATION,
    "simple-entity": ObstacleClass.DEBRIS,  # rocks, stones, boulders
    "cliff": ObstacleClass.DEBRIS,
    "item-entity": ObstacleClass.DEBRIS,
    "rail-ramp": ObstacleClass.GROUND_TRANSIT,
    "rail-support": ObstacleClass.GROUND_TRANSIT,
    "elevated-straight-rail": ObstacleClass.ELEVATED_TRANSIT,
    "elevated-curved-rail-a": ObstacleClass.ELEVATED_TRANSIT,
    "elevated-curved-rail-b": ObstacleClass.ELEVATED_TRANSIT,
    "elevated-half-diagonal-rail": ObstacleClass.ELEVATED_TRANSIT,
    "character": ObstacleClass.ACTOR,
    "car": ObstacleClass.ACTOR,
    "spider-vehicle": ObstacleClass.ACTOR,
    "resource": ObstacleClass.DEPOSIT,
    "entity-ghost": ObstacleClass.PLACEHOLDER,
    "tile-ghost": ObstacleClass.PLACEHOLDER,
}


def classify_entity_type(entity_type: str) -> ObstacleClass:
    """Resolve a host entity type string to its obstacle class."""
    return ENTITY_TYPE_CLASSES.get(entity_type, ObstacleClass.STRUCTURE)


_obstacle_ids = count(1)


@dataclass
class Obstacle:
    """Something standing on the surface that may collide with a marker."""

    name: str
    entity_type: str
    area: BoundingBox
    obstacle_class: ObstacleClass
    removal_ordered: bool = False
    obstacle_id: int = field(default_factory=lambda: next(_obstacle_ids))

    @classmethod
    def from_entity(
        cls,
        name: str,
        entity_type: str,
        position: Position,
        size: tuple = (1, 1),
        obstacle_class: Optional[ObstacleClass] = None,
    ) -> "Obstacle":
        """Build an obstacle from a host entity, classifying it once."""
        return cls(
            name=name,
            entity_type=entity_type,
            area=BoundingBox.from_center(position, size[0], size[1]),
            obstacle_class=obstacle_class or classify_entity_type(entity_type),
        )
