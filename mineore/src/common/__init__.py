"""Common utilities shared across planner stages."""

from .diagnostics import PlannerDiagnostics, DiagnosticSeverity
from .geometry import Axis, BoundingBox, Facing, Position, Tile, TileAlignment
from .prototypes import BoosterSpec, PipeSpec, RelaySpec, TransporterSpec, UnitSpec
from .entity_data import PrototypeCatalog, get_default_catalog
from .settings import DensityMode, PlannerSettings
from .constants import *

__all__ = [
    "PlannerDiagnostics",
    "DiagnosticSeverity",
    "Axis",
    "BoundingBox",
    "Facing",
    "Position",
    "Tile",
    "TileAlignment",
    "UnitSpec",
    "RelaySpec",
    "BoosterSpec",
    "TransporterSpec",
    "PipeSpec",
    "PrototypeCatalog",
    "get_default_catalog",
    "DensityMode",
    "PlannerSettings",
    # Constants
    "DEFAULT_CONFIG",
    "PlannerConfig",
    "PAIR_GAP",
    "CONFLICT_MARGIN",
]
