"""Shared constants across the planner."""

from dataclasses import dataclass

# Width of the transport corridor between the two sides of a unit pair
PAIR_GAP = 1

# Inward margin applied to footprints before obstacle queries
CONFLICT_MARGIN = 0.05

# Footprint (largest side) up to which units use plain belts and edge relays
SMALL_UNIT_MAX_SIZE = 2

DEFAULT_QUALITY = "normal"

# Booster limits, mirroring the per-player settings of the in-game tool
DEFAULT_PREFERRED_BOOSTERS_PER_UNIT = 1
DEFAULT_MAX_BOOSTERS_PER_UNIT = 4
MAX_BOOSTERS_PER_UNIT_LIMIT = 12

# Stage names, in the order the planner runs them
STAGE_CALCULATOR = "calculator"
STAGE_UNITS = "units"
STAGE_TRANSPORTERS = "transporters"
STAGE_PIPES = "pipes"
STAGE_RELAYS = "relays"
STAGE_BOOSTERS = "boosters"
STAGE_EMISSION = "emission"

PLACEMENT_STAGES = (
    STAGE_UNITS,
    STAGE_TRANSPORTERS,
    STAGE_PIPES,
    STAGE_RELAYS,
    STAGE_BOOSTERS,
)


@dataclass(frozen=True)
class PlannerConfig:
    """Engine-wide constants that are not per-run player choices."""

    pair_gap: int = PAIR_GAP
    conflict_margin: float = CONFLICT_MARGIN
    small_unit_max_size: int = SMALL_UNIT_MAX_SIZE
    default_quality: str = DEFAULT_QUALITY
    default_preferred_boosters: int = DEFAULT_PREFERRED_BOOSTERS_PER_UNIT
    default_max_boosters: int = DEFAULT_MAX_BOOSTERS_PER_UNIT
    default_blueprint_label: str = "Mining Layout"
    default_blueprint_description: str = ""


DEFAULT_CONFIG = PlannerConfig()
