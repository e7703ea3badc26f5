from __future__ import annotations

import logging
from typing import List

from mineore.src.common.constants import STAGE_RELAYS
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.geometry import Position
from mineore.src.common.prototypes import RelaySpec
from mineore.src.common.settings import PlannerSettings
from mineore.src.layout.layout_plan import GridLayout

from .conflict_resolver import ConflictResolver
from .markers import PlaceholderMarker, PlacementReport, StageResult

"""Power relay planning for the placement module."""

logger = logging.getLogger(__name__)


class RelayPlacer:
    """Plan relay placements on a fixed grid tied to the unit layout.

    Spacing always follows the units, never the relay's supply area or wire
    reach: relays in the corridor sit right after each underground entrance,
    relays for small units sit in the columns outside the pairs at one unit
    length apart.
    """

    def __init__(self, resolver: ConflictResolver, diagnostics: PlannerDiagnostics) -> None:
        self.resolver = resolver
        self.diagnostics = diagnostics

    def plan_positions(self, layout: GridLayout, relay: RelaySpec) -> List[Position]:
        """All relay positions for ``layout`` in placement order, snapped and unique."""
        if layout.is_empty:
            return []
        if layout.is_small_unit:
            raw = self._edge_positions(layout)
        else:
            raw = self._corridor_positions(layout)

        planned: List[Position] = []
        seen = set()
        for position in raw:
            snapped = Position(
                relay.alignment_x.snap(position.x),
                relay.alignment_y.snap(position.y),
            )
            if snapped.as_tuple() in seen:
                continue
            seen.add(snapped.as_tuple())
            planned.append(snapped)
        return planned

    def place(
        self,
        layout: GridLayout,
        relay: RelaySpec,
        settings: PlannerSettings,
        report: PlacementReport,
    ) -> StageResult:
        quality = settings.quality_for(settings.relay_quality)
        for position in self.plan_positions(layout, relay):
            marker = PlaceholderMarker(
                name=relay.name,
                position=position,
                quality=quality,
                footprint=(relay.width, relay.height),
                stage=STAGE_RELAYS,
            )
            outcome = self.resolver.place(marker)
            report.record(marker, outcome.ok)
            if not outcome.ok:
                logger.debug(
                    "Skipped %s at %s (%s)", relay.name, position.as_tuple(), outcome.value
                )

        result = report.stage(STAGE_RELAYS)
        if result.skipped:
            self.diagnostics.info(
                f"{result.skipped} of {result.placed + result.skipped} relays could not be placed",
                stage=STAGE_RELAYS,
            )
        return result

    def _corridor_positions(self, layout: GridLayout) -> List[Position]:
        # One tile downstream of every entrance
        sign = layout.flow.sign
        return [
            Position.from_axes(layout.axis, along + sign, line.center)
            for line in layout.lines
            for along in line.along_positions
        ]

    def _edge_positions(self, layout: GridLayout) -> List[Position]:
        columns = layout.outer_edge_positions[:1] + layout.relay_gap_positions
        columns += layout.outer_edge_positions[1:]

        spacing = layout.along_size
        half = spacing / 2.0
        along_min = min(line.along_min for line in layout.lines)
        along_max = max(line.along_max for line in layout.lines)

        positions = []
        for cross in columns:
            along = along_min - half + spacing / 2.0
            while along < along_max + half:
                positions.append(Position.from_axes(layout.axis, along, cross))
                along += spacing
        return positions

