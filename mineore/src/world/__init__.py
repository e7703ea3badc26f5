"""Host world capability injected into the placers."""

from .obstacles import ENTITY_TYPE_CLASSES, Obstacle, ObstacleClass, classify_entity_type
from .surface import InMemorySurface, WorldSurface

__all__ = [
    "ENTITY_TYPE_CLASSES",
    "Obstacle",
    "ObstacleClass",
    "classify_entity_type",
    "InMemorySurface",
    "WorldSurface",
]
