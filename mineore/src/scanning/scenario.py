"""Scenario files: a selection, its deposits and what already stands there.

A scenario is a JSON object::

    {
        "bounds": [[0, 0], [10, 10]],
        "deposits": {
            "iron-ore": {"rects": [[0, 0, 10, 10]]},
            "coal": [[12, 3], [12, 4]]
        },
        "obstacles": [
            {"name": "stone-furnace", "type": "furnace", "position": [2, 2], "size": [2, 2]}
        ],
        "settings": {"unit_type": "electric-mining-drill", "flow_direction": "south"}
    }

Deposits are either a plain list of tiles or an object with ``tiles`` and/or
``rects`` (``[left, top, right, bottom]``, right/bottom exclusive). Bounds
default to the extent of all deposit tiles.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from mineore.src.common.geometry import BoundingBox, Position, Tile
from mineore.src.world.obstacles import Obstacle

from .resource_scanner import compute_bounds


@dataclass
class Scenario:
    deposits: Dict[str, Set[Tile]] = field(default_factory=dict)
    bounds: Optional[BoundingBox] = None
    obstacles: List[Obstacle] = field(default_factory=list)
    settings: Dict[str, Any] = field(default_factory=dict)
    name: str = "scenario"


def _parse_tiles(name: str, spec: Any) -> Set[Tile]:
    if isinstance(spec, Mapping):
        tiles = {(int(x), int(y)) for x, y in spec.get("tiles", [])}
        for rect in spec.get("rects", []):
            if len(rect) != 4:
                raise ValueError(f"Deposit '{name}': rect needs 4 numbers, got {rect!r}")
            left, top, right, bottom = (int(value) for value in rect)
            tiles.update((x, y) for x in range(left, right) for y in range(top, bottom))
        return tiles
    if isinstance(spec, list):
        return {(int(x), int(y)) for x, y in spec}
    raise ValueError(f"Deposit '{name}' must be a tile list or an object")


def _parse_bounds(spec: Any) -> BoundingBox:
    try:
        (left, top), (right, bottom) = spec
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Bounds must be [[left, top], [right, bottom]], got {spec!r}") from exc
    return BoundingBox(float(left), float(top), float(right), float(bottom))


def _parse_obstacle(spec: Mapping[str, Any]) -> Obstacle:
    if "name" not in spec or "position" not in spec:
        raise ValueError(f"Obstacle needs a name and a position: {spec!r}")
    x, y = spec["position"]
    width, height = spec.get("size", (1, 1))
    return Obstacle.from_entity(
        spec["name"],
        spec.get("type", spec["name"]),
        Position(float(x), float(y)),
        size=(width, height),
    )


def load_scenario(source: Union[str, Path, Mapping[str, Any]]) -> Scenario:
    """Load a scenario from a JSON file path or an already parsed mapping.

    Raises:
        ValueError: malformed scenario data
        OSError: the file cannot be read
    """
    name = "scenario"
    if isinstance(source, Mapping):
        data = source
    else:
        path = Path(source)
        name = path.stem
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: invalid JSON ({exc})") from exc

    if not isinstance(data, Mapping):
        raise ValueError("A scenario must be a JSON object")

    deposits = {
        deposit_name: _parse_tiles(deposit_name, spec)
        for deposit_name, spec in (data.get("deposits") or {}).items()
    }
    deposits = {deposit_name: tiles for deposit_name, tiles in deposits.items() if tiles}

    if data.get("bounds") is not None:
        bounds = _parse_bounds(data["bounds"])
    else:
        bounds = compute_bounds(tile for tiles in deposits.values() for tile in tiles)

    return Scenario(
        deposits=deposits,
        bounds=bounds,
        obstacles=[_parse_obstacle(spec) for spec in data.get("obstacles") or []],
        settings=dict(data.get("settings") or {}),
        name=str(data.get("name", name)),
    )
