"""Pipes between fluid-fed units in sparse layouts."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from mineore.src.common.constants import STAGE_PIPES
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.geometry import Axis, Facing, Position
from mineore.src.common.prototypes import PipeSpec, UnitSpec
from mineore.src.common.settings import DensityMode, PlannerSettings
from mineore.src.layout.layout_plan import GridLayout

from .conflict_resolver import ConflictResolver
from .markers import PlaceholderMarker, PlacementReport, StageResult

logger = logging.getLogger(__name__)


def pipes_needed(
    layout: GridLayout,
    unit: UnitSpec,
    settings: PlannerSettings,
    required_fluid: Optional[str],
) -> bool:
    """Pipes feed ``required_fluid`` to sparse fluid-input units.

    Dense units touch, so their fluid boxes connect without pipes.
    """
    return (
        bool(required_fluid)
        and bool(settings.pipe_type)
        and unit.has_fluid_input
        and settings.density_mode is DensityMode.SPARSE
        and not layout.is_empty
    )


class PipePlacer:
    """Bridge the gap between consecutive units on each side of a line.

    Short gaps (two tiles or less) get plain pipes. Longer gaps get a
    pipe-to-ground pair when the pipe has one and it reaches; the first
    faces back toward the unit before the gap, the second toward the unit
    after it.
    """

    def __init__(self, resolver: ConflictResolver, diagnostics: PlannerDiagnostics):
        self.resolver = resolver
        self.diagnostics = diagnostics

    def place(
        self,
        layout: GridLayout,
        pipe: PipeSpec,
        settings: PlannerSettings,
        report: PlacementReport,
    ) -> StageResult:
        quality = settings.quality_for(None)
        half = layout.along_size / 2.0
        toward_origin = Facing.NORTH if layout.axis is Axis.NS else Facing.WEST

        for (_, _, cross), alongs in sorted(self._columns(layout).items()):
            alongs = sorted(alongs)
            for previous, current in zip(alongs, alongs[1:]):
                gap_start = math.ceil(previous + half)
                gap_end = math.floor(current - half)
                gap = gap_end - gap_start
                if gap <= 0:
                    continue

                if self._use_underground(pipe, gap):
                    for along, facing in (
                        (gap_start + 0.5, toward_origin),
                        (gap_end - 0.5, toward_origin.opposite),
                    ):
                        self._submit(
                            pipe.underground_name,
                            Position.from_axes(layout.axis, along, cross),
                            facing,
                            quality,
                            report,
                        )
                else:
                    for tile in range(gap_start, gap_end):
                        self._submit(
                            pipe.name,
                            Position.from_axes(layout.axis, tile + 0.5, cross),
                            None,
                            quality,
                            report,
                        )

        return report.stage(STAGE_PIPES)

    @staticmethod
    def _columns(layout: GridLayout) -> Dict[Tuple[int, str, float], List[float]]:
        columns: Dict[Tuple[int, str, float], List[float]] = defaultdict(list)
        for entry in layout.entries:
            key = (entry.pair_index, entry.side, entry.position.cross(layout.axis))
            columns[key].append(entry.position.along(layout.axis))
        return columns

    @staticmethod
    def _use_underground(pipe: PipeSpec, gap: int) -> bool:
        if gap <= 2 or pipe.underground_name is None:
            return False
        # Distance between the two pipe-to-ground centers
        return gap - 1 <= pipe.max_underground_distance

    def _submit(self, name, position, direction, quality, report) -> None:
        marker = PlaceholderMarker(
            name=name,
            position=position,
            direction=direction,
            quality=quality,
            stage=STAGE_PIPES,
        )
        outcome = self.resolver.place(marker)
        report.record(marker, outcome.ok)
        if not outcome.ok:
            logger.debug("Skipped %s at %s (%s)", name, position.as_tuple(), outcome.value)
