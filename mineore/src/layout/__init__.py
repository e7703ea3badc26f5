"""Layout Calculation Module
==========================

Pure geometry for a placement run: the grid calculator turns a unit spec,
a density mode and the deposit tiles of a selection into paired unit rows
and the transport lines between them. Nothing here touches the world; the
resulting :class:`GridLayout` is consumed by the placement package.
"""

from .calculator import (
    GridSpacing,
    calculate_layout,
    centred_starts,
    get_spacing,
    has_tiles_in_area,
    mining_area,
    oriented_sizes,
)
from .layout_plan import FAR_SIDE, NEAR_SIDE, GridLayout, PlacementEntry, TransportLine
from .tile_grid import TileGrid

__all__ = [
    "GridSpacing",
    "calculate_layout",
    "centred_starts",
    "get_spacing",
    "has_tiles_in_area",
    "mining_area",
    "oriented_sizes",
    "FAR_SIDE",
    "NEAR_SIDE",
    "GridLayout",
    "PlacementEntry",
    "TransportLine",
    "TileGrid",
]
