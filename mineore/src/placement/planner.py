"""Main placement orchestrator."""

from __future__ import annotations

import logging
from typing import AbstractSet, Callable, List, Mapping, Optional, Set, Tuple, TypeVar

from mineore.src.common.constants import (
    DEFAULT_CONFIG,
    STAGE_BOOSTERS,
    STAGE_CALCULATOR,
    STAGE_PIPES,
    STAGE_RELAYS,
    STAGE_TRANSPORTERS,
    PlannerConfig,
)
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.entity_data import PrototypeCatalog, get_default_catalog
from mineore.src.common.geometry import Axis, BoundingBox, Tile
from mineore.src.common.settings import PlannerSettings
from mineore.src.layout.calculator import calculate_layout
from mineore.src.layout.layout_plan import GridLayout
from mineore.src.scanning.resource_scanner import compute_bounds, resource_info
from mineore.src.world.surface import WorldSurface

from .beacon_placer import BoosterPlacer
from .belt_placer import TransporterPlacer
from .conflict_resolver import ConflictResolver
from .markers import PlacementReport
from .pipe_placer import PipePlacer, pipes_needed
from .pole_placer import RelayPlacer
from .unit_placer import UnitPlacer

logger = logging.getLogger(__name__)

SpecT = TypeVar("SpecT")


class MiningLayoutPlanner:
    """Coordinate the calculator and every placement stage for one run."""

    def __init__(
        self,
        surface: WorldSurface,
        diagnostics: PlannerDiagnostics,
        *,
        catalog: Optional[PrototypeCatalog] = None,
        config: PlannerConfig = DEFAULT_CONFIG,
    ) -> None:
        self.surface = surface
        self.diagnostics = diagnostics
        self.diagnostics.default_stage = "planning"
        self.catalog = catalog or get_default_catalog()
        self.config = config
        self.layout: Optional[GridLayout] = None

    def plan(
        self,
        settings: PlannerSettings,
        deposits: Mapping[str, AbstractSet[Tile]],
        bounds: Optional[BoundingBox] = None,
    ) -> PlacementReport:
        """Lay out units and infrastructure over ``deposits``.

        FLOW:
        1. Resolve the unit prototype (a missing one ends the run empty)
        2. Split deposits into the mined type and foreign types
        3. Calculate the grid, reserving a lane for boosters when configured
        4. Run the stages in order: units, transporters, pipes, relays,
           boosters; each later stage sees the markers of the earlier ones

        Args:
            settings: Per-run choices
            deposits: Tiles per deposit type
            bounds: Selection rectangle; defaults to the mined tiles' extent

        Returns:
            PlacementReport, always, with whatever could be placed
        """
        report = PlacementReport()

        unit = self.catalog.unit(settings.unit_type)
        if unit is None:
            self.diagnostics.error(
                f"Unknown mining unit '{settings.unit_type}'", stage=STAGE_CALCULATOR
            )
            return report

        mined = self._mined_types(settings, deposits)
        primary, foreign = self._split_deposits(deposits, mined)
        if bounds is None:
            bounds = compute_bounds(primary)

        booster = self._resolve(self.catalog.booster, settings.booster_type, STAGE_BOOSTERS)
        booster_width = 0
        if booster is not None:
            # Lanes run along the lines, so the reserved width is the cross size
            if settings.flow_direction.axis is Axis.NS:
                booster_width = booster.width
            else:
                booster_width = booster.height

        self.layout = calculate_layout(
            unit,
            bounds,
            settings.density_mode,
            settings.flow_direction,
            primary,
            foreign_tiles=foreign,
            booster_width=booster_width,
            gap=self.config.pair_gap,
            small_unit_max_size=self.config.small_unit_max_size,
        )
        layout = self.layout

        if layout.is_empty:
            self.diagnostics.info("No valid positions for miners.", stage=STAGE_CALCULATOR)
            return report

        resolver = ConflictResolver(
            self.surface,
            conservative=settings.conservative_mode,
            margin=self.config.conflict_margin,
        )

        UnitPlacer(resolver, self.diagnostics).place(layout, unit, settings, report)

        transporter = self._resolve(
            self.catalog.transporter, settings.transporter_type, STAGE_TRANSPORTERS
        )
        if transporter is not None:
            TransporterPlacer(resolver, self.diagnostics).place(
                layout, transporter, settings, report
            )

        if pipes_needed(layout, unit, settings, self._required_fluid(mined)):
            pipe = self._resolve(self.catalog.pipe, settings.pipe_type, STAGE_PIPES)
            if pipe is not None:
                PipePlacer(resolver, self.diagnostics).place(layout, pipe, settings, report)

        relay = self._resolve(self.catalog.relay, settings.relay_type, STAGE_RELAYS)
        if relay is not None:
            RelayPlacer(resolver, self.diagnostics).place(layout, relay, settings, report)

        if booster is not None:
            BoosterPlacer(resolver, self.diagnostics).place(layout, booster, settings, report)

        if resolver.removals_ordered:
            self.diagnostics.info(f"Ordered removal of {resolver.removals_ordered} obstacles")
        logger.info(report.format_summary())
        return report

    def _mined_types(
        self, settings: PlannerSettings, deposits: Mapping[str, AbstractSet[Tile]]
    ) -> List[str]:
        """Deposit types to mine; every type when none is chosen."""
        selected = settings.deposit_type
        if selected and selected not in deposits:
            self.diagnostics.warning(
                f"No '{selected}' in the selection, mining every deposit",
                stage=STAGE_CALCULATOR,
            )
            selected = None
        return [selected] if selected else list(deposits)

    @staticmethod
    def _split_deposits(
        deposits: Mapping[str, AbstractSet[Tile]], mined: List[str]
    ) -> Tuple[Set[Tile], Optional[Set[Tile]]]:
        """Tiles to mine and tiles no unit may reach."""
        primary: Set[Tile] = set()
        foreign: Set[Tile] = set()
        for name, tiles in deposits.items():
            (primary if name in mined else foreign).update(tiles)
        return primary, foreign or None

    def _required_fluid(self, mined: List[str]) -> Optional[str]:
        for name in mined:
            fluid = resource_info(name, self.catalog).required_fluid
            if fluid:
                return fluid
        return None

    def _resolve(
        self, lookup: Callable[[str], Optional[SpecT]], name: Optional[str], stage: str
    ) -> Optional[SpecT]:
        """Look up an optional stage prototype; unknown names disable the stage."""
        if not name:
            return None
        spec = lookup(name)
        if spec is None:
            self.diagnostics.warning(f"Unknown prototype '{name}', skipping {stage}", stage=stage)
        return spec


def plan_mining_layout(
    settings: PlannerSettings,
    deposits: Mapping[str, AbstractSet[Tile]],
    surface: WorldSurface,
    bounds: Optional[BoundingBox] = None,
    diagnostics: Optional[PlannerDiagnostics] = None,
    catalog: Optional[PrototypeCatalog] = None,
) -> Tuple[PlacementReport, PlannerDiagnostics]:
    """Convenience wrapper running a single planner."""
    diagnostics = diagnostics or PlannerDiagnostics()
    planner = MiningLayoutPlanner(surface, diagnostics, catalog=catalog)
    return planner.plan(settings, deposits, bounds), diagnostics

