"""Placement Module
================

Turns a :class:`GridLayout` into placeholder markers on a world surface.
Stages run in a fixed order and every marker goes through the
:class:`ConflictResolver`:

1. Units - one marker per calculator entry.
2. Transporters - plain belts or underground pairs along each line.
3. Pipes - gap bridging for fluid-fed units in sparse layouts.
4. Relays - fixed-interval poles tied to the unit grid.
5. Boosters - greedy coverage with per-unit quotas, then a fill pass.
"""

from .markers import ModuleRequest, PlaceholderMarker, PlacementReport, StageResult
from .conflict_resolver import ConflictResolver, PlacementOutcome
from .unit_placer import UnitPlacer, module_requests
from .belt_placer import TransporterPlacer
from .pipe_placer import PipePlacer
from .pole_placer import RelayPlacer
from .beacon_placer import BoosterPlacer, booster_reach, generate_candidates
from .planner import MiningLayoutPlanner, plan_mining_layout

__all__ = [
    "ModuleRequest",
    "PlaceholderMarker",
    "PlacementReport",
    "StageResult",
    "ConflictResolver",
    "PlacementOutcome",
    "UnitPlacer",
    "module_requests",
    "TransporterPlacer",
    "PipePlacer",
    "RelayPlacer",
    "BoosterPlacer",
    "booster_reach",
    "generate_candidates",
    "MiningLayoutPlanner",
    "plan_mining_layout",
]
