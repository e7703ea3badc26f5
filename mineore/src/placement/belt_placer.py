"""Transporter placement along each transport line.

Two patterns, picked by the unit footprint:

* small units (largest side <= 2) get a plain belt on every corridor tile
  from the first unit's near edge to the last unit's far edge;
* larger units get underground pairs: an entrance in front of each unit and
  an exit one tile upstream of it, so the corridor between units stays free
  for poles.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List

from mineore.src.common.constants import STAGE_TRANSPORTERS
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.geometry import Facing, Position
from mineore.src.common.prototypes import TransporterSpec
from mineore.src.common.settings import PlannerSettings
from mineore.src.layout.layout_plan import GridLayout, TransportLine

from .conflict_resolver import ConflictResolver
from .markers import PlaceholderMarker, PlacementReport, StageResult

logger = logging.getLogger(__name__)

IO_INPUT = "input"  # entrance: items go underground here
IO_OUTPUT = "output"  # exit: items come back up here


def in_flow_order(values: Iterable[float], flow: Facing) -> List[float]:
    """Sort along-axis coordinates in the order items travel."""
    return sorted(values, reverse=not flow.away_from_origin)


class TransporterPlacer:
    """Emit belt or underground-belt markers for every transport line."""

    def __init__(self, resolver: ConflictResolver, diagnostics: PlannerDiagnostics):
        self.resolver = resolver
        self.diagnostics = diagnostics

    def place(
        self,
        layout: GridLayout,
        transporter: TransporterSpec,
        settings: PlannerSettings,
        report: PlacementReport,
    ) -> StageResult:
        if layout.is_empty:
            return report.stage(STAGE_TRANSPORTERS)

        quality = settings.quality_for(settings.transporter_quality)

        if layout.is_small_unit:
            for line in layout.lines:
                self._place_fill(layout, line, transporter, quality, report)
            return report.stage(STAGE_TRANSPORTERS)

        if transporter.underground_name is None:
            self.diagnostics.warning(
                f"No underground variant of '{transporter.name}', skipping transporters",
                stage=STAGE_TRANSPORTERS,
            )
            return report.stage(STAGE_TRANSPORTERS)

        for line in layout.lines:
            self._check_reach(line, transporter)
            self._place_underground_pairs(layout, line, transporter, quality, report)
        return report.stage(STAGE_TRANSPORTERS)

    def _place_fill(
        self,
        layout: GridLayout,
        line: TransportLine,
        transporter: TransporterSpec,
        quality: str,
        report: PlacementReport,
    ) -> None:
        start, end = layout.along_extent(line.along_positions)
        tiles = range(math.floor(start), math.ceil(end))
        for tile in in_flow_order(tiles, layout.flow):
            self._submit(
                transporter.name,
                Position.from_axes(layout.axis, tile + 0.5, line.center),
                layout.flow,
                quality,
                {},
                report,
            )

    def _place_underground_pairs(
        self,
        layout: GridLayout,
        line: TransportLine,
        transporter: TransporterSpec,
        quality: str,
        report: PlacementReport,
    ) -> None:
        flow = layout.flow
        positions = line.along_positions
        first = positions[line.first_in_flow(flow) - 1]

        for along in in_flow_order(positions, flow):
            if along != first:
                self._submit(
                    transporter.underground_name,
                    Position.from_axes(layout.axis, along - flow.sign, line.center),
                    flow,
                    quality,
                    {"io_type": IO_OUTPUT},
                    report,
                )
            self._submit(
                transporter.underground_name,
                Position.from_axes(layout.axis, along, line.center),
                flow,
                quality,
                {"io_type": IO_INPUT},
                report,
            )

    def _check_reach(self, line: TransportLine, transporter: TransporterSpec) -> None:
        positions = line.along_positions
        for previous, current in zip(positions, positions[1:]):
            # entrance at ``previous``, exit one tile before ``current``
            distance = current - previous - 1
            if distance > transporter.max_underground_distance:
                self.diagnostics.warning(
                    f"Units {distance:g} tiles apart exceed the reach of "
                    f"'{transporter.underground_name}' ({transporter.max_underground_distance})",
                    stage=STAGE_TRANSPORTERS,
                )
                return

    def _submit(self, name, position, direction, quality, properties, report) -> bool:
        marker = PlaceholderMarker(
            name=name,
            position=position,
            direction=direction,
            quality=quality,
            properties=properties,
            stage=STAGE_TRANSPORTERS,
        )
        outcome = self.resolver.place(marker)
        report.record(marker, outcome.ok)
        if not outcome.ok:
            logger.debug("Skipped %s at %s (%s)", name, position.as_tuple(), outcome.value)
        return outcome.ok
