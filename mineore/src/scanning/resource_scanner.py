"""Group resource tiles by type and find the units that can mine them."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from mineore.src.common.entity_data import PrototypeCatalog, get_default_catalog
from mineore.src.common.geometry import BoundingBox, Tile
from mineore.src.common.prototypes import UnitSpec

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_CATEGORY = "basic-solid"


@dataclass(frozen=True)
class ResourceInfo:
    """What the planner needs to know about a deposit type."""

    name: str
    category: str = DEFAULT_RESOURCE_CATEGORY
    required_fluid: Optional[str] = None


# Vanilla and Space Age resources. Used when the prototype data has no entry.
RESOURCE_TABLE: Dict[str, ResourceInfo] = {
    info.name: info
    for info in (
        ResourceInfo("iron-ore"),
        ResourceInfo("copper-ore"),
        ResourceInfo("coal"),
        ResourceInfo("stone"),
        ResourceInfo("uranium-ore", required_fluid="sulfuric-acid"),
        ResourceInfo("crude-oil", category="basic-fluid"),
        ResourceInfo("scrap"),
        ResourceInfo("tungsten-ore", category="hard-solid"),
        ResourceInfo("calcite", category="hard-solid"),
        ResourceInfo("lithium-brine", category="basic-fluid"),
        ResourceInfo("fluorine-vent", category="basic-fluid"),
        ResourceInfo("sulfuric-acid-geyser", category="basic-fluid"),
    )
}


def resource_info(name: str, catalog: Optional[PrototypeCatalog] = None) -> ResourceInfo:
    """Category and fluid requirement of ``name``.

    Prototype data wins over the built-in table; unknown names are solid
    resources that need no fluid.
    """
    proto = (catalog.raw if catalog is not None else {}).get(name)
    if proto and proto.get("type") == "resource":
        minable = proto.get("minable") or {}
        return ResourceInfo(
            name=name,
            category=proto.get("category", DEFAULT_RESOURCE_CATEGORY),
            required_fluid=minable.get("required_fluid"),
        )
    return RESOURCE_TABLE.get(name, ResourceInfo(name))


@dataclass
class ScanResult:
    """Deposit tiles per type, the selection bounds and compatible units."""

    deposits: Dict[str, Set[Tile]] = field(default_factory=dict)
    resources: Dict[str, ResourceInfo] = field(default_factory=dict)
    bounds: Optional[BoundingBox] = None
    compatible_units: List[UnitSpec] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.deposits

    @property
    def requires_fluid(self) -> bool:
        return any(info.required_fluid for info in self.resources.values())

    def deposit_types(self) -> List[str]:
        """Deposit types, largest first."""
        return sorted(self.deposits, key=lambda name: (-len(self.deposits[name]), name))

    def unit_names(self) -> List[str]:
        return [unit.name for unit in self.compatible_units]


def compute_bounds(tiles: Iterable[Tile]) -> Optional[BoundingBox]:
    """Axis-aligned box around every tile."""
    tiles = list(tiles)
    if not tiles:
        return None
    return BoundingBox(
        min(tile[0] for tile in tiles),
        min(tile[1] for tile in tiles),
        max(tile[0] for tile in tiles) + 1,
        max(tile[1] for tile in tiles) + 1,
    )


def find_compatible_units(categories: Set[str], catalog: PrototypeCatalog) -> List[UnitSpec]:
    """Mining units able to mine at least one of ``categories``, sorted by name."""
    return [unit for unit in catalog.mining_drills() if unit.resource_categories & categories]


def scan_resources(
    resource_tiles: Mapping[str, Iterable[Tile]],
    catalog: Optional[PrototypeCatalog] = None,
) -> ScanResult:
    """Build a :class:`ScanResult` from tiles grouped by deposit type."""
    catalog = catalog or get_default_catalog()
    result = ScanResult()

    for name, tiles in resource_tiles.items():
        tile_set = {(int(x), int(y)) for x, y in tiles}
        if not tile_set:
            continue
        result.deposits[name] = tile_set
        result.resources[name] = resource_info(name, catalog)

    if result.is_empty:
        return result

    all_tiles: Set[Tile] = set()
    for tiles in result.deposits.values():
        all_tiles.update(tiles)
    result.bounds = compute_bounds(all_tiles)

    categories = {info.category for info in result.resources.values()}
    result.compatible_units = find_compatible_units(categories, catalog)
    logger.debug(
        "Scanned %d deposit types, %d compatible units",
        len(result.deposits),
        len(result.compatible_units),
    )
    return result


def group_resource_entities(entities: Iterable[Mapping[str, Any]]) -> Dict[str, Set[Tile]]:
    """Group resource entities ``{"name", "position"}`` into tiles per name.

    Resource entities sit on tile centers, so flooring the position gives
    the tile.
    """
    groups: Dict[str, Set[Tile]] = {}
    for entity in entities:
        position = entity["position"]
        if isinstance(position, Mapping):
            x, y = position["x"], position["y"]
        else:
            x, y = position
        tile: Tuple[int, int] = (math.floor(x), math.floor(y))
        groups.setdefault(entity["name"], set()).add(tile)
    return groups
