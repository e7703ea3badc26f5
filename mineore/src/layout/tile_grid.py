"""Simple tile occupancy tracking for marker placement."""

from typing import Iterable, Set

from mineore.src.common.geometry import BoundingBox, Tile


class TileGrid:
    """Tracks which tiles are blocked by already-placed markers.

    The booster placer uses it to pre-filter candidates before asking the
    surface, and grows it as boosters are placed:
    1. Rebuilt from the markers of earlier stages
    2. Marked with each booster's footprint once placed
    """

    def __init__(self):
        self._occupied: Set[Tile] = set()

    def __len__(self) -> int:
        return len(self._occupied)

    def __contains__(self, tile: Tile) -> bool:
        return tile in self._occupied

    def is_area_available(self, area: BoundingBox) -> bool:
        """Check that no tile covered by ``area`` is occupied."""
        return not any(tile in self._occupied for tile in area.tiles())

    def mark_area(self, area: BoundingBox) -> None:
        self._occupied.update(area.tiles())

    def rebuild_from_areas(self, areas: Iterable[BoundingBox]) -> None:
        """Rebuild occupancy from placed footprints.

        Used before booster placement to pick up everything the earlier
        stages put down.
        """
        self._occupied.clear()
        for area in areas:
            self.mark_area(area)
