"""
Pytest configuration for the mineore project.
Ensures that the root directory is in the Python path so imports work correctly,
and provides a small hand-written prototype set for unit tests.
"""

import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from mineore.src.common.entity_data import PrototypeCatalog  # noqa: E402

# Minimal prototypes with the keys draftsman's data uses
TEST_PROTOTYPES = {
    "test-drill": {
        "type": "mining-drill",
        "tile_width": 3,
        "tile_height": 3,
        "resource_searching_radius": 2,
        "module_slots": 3,
        "resource_categories": ["basic-solid"],
    },
    "fluid-drill": {
        "type": "mining-drill",
        "tile_width": 3,
        "tile_height": 3,
        "resource_searching_radius": 2,
        "module_slots": 3,
        "resource_categories": ["basic-solid"],
        "input_fluid_box": {"production_type": "input"},
    },
    "small-drill": {
        "type": "mining-drill",
        "collision_box": [[-0.7, -0.7], [0.7, 0.7]],
        "resource_searching_radius": 0.99,
        "resource_categories": ["basic-solid"],
    },
    "hard-drill": {
        "type": "mining-drill",
        "tile_width": 5,
        "tile_height": 5,
        "resource_searching_radius": 6,
        "module_slots": 4,
        "resource_categories": ["hard-solid"],
    },
    "transport-belt": {"type": "transport-belt", "tile_width": 1, "tile_height": 1},
    "underground-belt": {"type": "underground-belt", "max_distance": 5},
    "express-transport-belt": {"type": "transport-belt"},
    "small-electric-pole": {
        "type": "electric-pole",
        "collision_box": [[-0.15, -0.15], [0.15, 0.15]],
        "supply_area_distance": 2.5,
        "maximum_wire_distance": 7.5,
    },
    "substation": {
        "type": "electric-pole",
        "collision_box": [[-0.7, -0.7], [0.7, 0.7]],
        "supply_area_distance": 9,
        "maximum_wire_distance": 18,
    },
    "beacon": {
        "type": "beacon",
        "collision_box": [[-1.2, -1.2], [1.2, 1.2]],
        "supply_area_distance": 3,
        "module_slots": 2,
    },
    "pipe": {"type": "pipe"},
    "pipe-to-ground": {
        "type": "pipe-to-ground",
        "fluid_box": {
            "pipe_connections": [
                {"direction": 0, "position": [0, 0]},
                {"connection_type": "underground", "max_underground_distance": 10},
            ]
        },
    },
    "iron-ore": {"type": "resource", "minable": {"result": "iron-ore"}},
    "uranium-ore": {
        "type": "resource",
        "category": "basic-solid",
        "minable": {"required_fluid": "sulfuric-acid"},
    },
    "tungsten-ore": {"type": "resource", "category": "hard-solid"},
}


@pytest.fixture
def catalog():
    """Prototype catalog over TEST_PROTOTYPES."""
    return PrototypeCatalog(TEST_PROTOTYPES)
