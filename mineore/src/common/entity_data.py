"""Entity prototype lookup backed by draftsman's game data."""

from draftsman.data import entities as entity_data

from typing import Any, Dict, List, Mapping, Optional, Tuple
import math

from .prototypes import BoosterSpec, PipeSpec, RelaySpec, TransporterSpec, UnitSpec


# draftsman's raw data names the radius resource_searching_radius; the runtime
# API calls it mining_drill_radius
RADIUS_KEYS = ("resource_searching_radius", "mining_drill_radius")


def _drill_radius(proto: Mapping[str, Any]) -> Optional[float]:
    for key in RADIUS_KEYS:
        if proto.get(key) is not None:
            return float(proto[key])
    return None


def _module_slots(proto: Mapping[str, Any]) -> int:
    # 2.0 data has a top-level count, 1.1 nests it in module_specification
    slots = proto.get("module_slots")
    if slots is None:
        slots = (proto.get("module_specification") or {}).get("module_slots", 0)
    return int(slots or 0)


class PrototypeCatalog:
    """Turn raw entity prototypes into the specs the engine works with.

    The default data source is draftsman's ``entities.raw``; any mapping of
    prototype name to prototype dict with the same keys works, which keeps
    modded or hand-written prototype sets usable.
    """

    def __init__(self, raw: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self.raw: Mapping[str, Mapping[str, Any]] = (
            raw if raw is not None else entity_data.raw
        )

    def exists(self, name: Optional[str]) -> bool:
        return bool(name) and name in self.raw

    def get_footprint(self, prototype: str) -> Tuple[int, int]:
        """Get entity footprint size from prototype data.

        Args:
            prototype: Entity prototype name (e.g., "electric-mining-drill")

        Returns:
            (width, height) in tiles; (1, 1) for unknown prototypes
        """
        entity_info = self.raw.get(prototype, {})

        width = entity_info.get("tile_width")
        height = entity_info.get("tile_height")
        if width is not None and height is not None:
            return (max(1, int(width)), max(1, int(height)))

        collision_box = entity_info.get("collision_box")
        if collision_box:
            width = max(1, math.ceil(collision_box[1][0] - collision_box[0][0]))
            height = max(1, math.ceil(collision_box[1][1] - collision_box[0][1]))
            return (width, height)

        return (1, 1)

    def unit(self, name: Optional[str]) -> Optional[UnitSpec]:
        """Mining drill spec, or None if ``name`` is not a mining drill."""
        proto = self.raw.get(name or "")
        radius = _drill_radius(proto) if proto else None
        if radius is None:
            return None
        width, height = self.get_footprint(name)
        return UnitSpec(
            name=name,
            width=width,
            height=height,
            radius=radius,
            has_fluid_input="input_fluid_box" in proto,
            module_slots=_module_slots(proto),
            resource_categories=frozenset(
                proto.get("resource_categories") or ("basic-solid",)
            ),
        )

    def mining_drills(self) -> List[UnitSpec]:
        """All mining drill specs, sorted by name."""
        drills = []
        for name in sorted(self.raw):
            spec = self.unit(name)
            if spec is not None:
                drills.append(spec)
        return drills

    def relay(self, name: Optional[str]) -> Optional[RelaySpec]:
        proto = self.raw.get(name or "")
        if not proto or "supply_area_distance" not in proto:
            return None
        if proto.get("type", "electric-pole") != "electric-pole":
            return None
        width, height = self.get_footprint(name)
        return RelaySpec(
            name=name,
            width=width,
            height=height,
            supply_distance=float(proto["supply_area_distance"]),
            wire_reach=float(proto.get("maximum_wire_distance", 0.0)),
        )

    def booster(self, name: Optional[str]) -> Optional[BoosterSpec]:
        proto = self.raw.get(name or "")
        if not proto or "supply_area_distance" not in proto:
            return None
        if proto.get("type", "beacon") != "beacon":
            return None
        width, height = self.get_footprint(name)
        return BoosterSpec(
            name=name,
            width=width,
            height=height,
            supply_distance=float(proto["supply_area_distance"]),
            module_slots=_module_slots(proto),
        )

    def underground_belt_name(self, belt_name: str) -> Optional[str]:
        """Derive the underground tier of a belt by prototype naming convention.

        "transport-belt" -> "underground-belt",
        "fast-transport-belt" -> "fast-underground-belt".
        """
        if "transport-belt" not in belt_name:
            return None
        candidate = belt_name.replace("transport-belt", "underground-belt")
        return candidate if self.exists(candidate) else None

    def transporter(self, name: Optional[str]) -> Optional[TransporterSpec]:
        if not self.exists(name):
            return None
        underground = self.underground_belt_name(name)
        max_distance = 5
        if underground is not None:
            max_distance = int(self.raw[underground].get("max_distance", max_distance))
        return TransporterSpec(
            name=name,
            underground_name=underground,
            max_underground_distance=max_distance,
        )

    def pipe(self, name: Optional[str]) -> Optional[PipeSpec]:
        if not self.exists(name):
            return None
        underground = f"{name}-to-ground"
        if not self.exists(underground):
            return PipeSpec(name=name)
        return PipeSpec(
            name=name,
            underground_name=underground,
            max_underground_distance=self._max_pipe_underground(self.raw[underground]),
        )

    @staticmethod
    def _max_pipe_underground(proto: Mapping[str, Any]) -> int:
        fluid_box: Dict[str, Any] = proto.get("fluid_box") or {}
        for connection in fluid_box.get("pipe_connections") or []:
            distance = connection.get("max_underground_distance")
            if distance:
                return int(distance)
        return 10


DEFAULT_CATALOG: Optional[PrototypeCatalog] = None


def get_default_catalog() -> PrototypeCatalog:
    """Shared catalog over draftsman's vanilla data."""
    global DEFAULT_CATALOG
    if DEFAULT_CATALOG is None:
        DEFAULT_CATALOG = PrototypeCatalog()
    return DEFAULT_CATALOG
