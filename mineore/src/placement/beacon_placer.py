"""Booster placement around unit pairs.

Candidates sit in lanes parallel to the transport lines. Neighbouring pairs
share the lane between them, the outermost pairs get a lane outside their
edge. Placement then runs two passes over the candidate list:

1. greedy: repeatedly place the candidate that boosts the most units still
   under their quota
2. fill: place every candidate that still fits, as long as no unit goes over
   the hard maximum, so lanes have no holes at their ends
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from mineore.src.common.constants import STAGE_BOOSTERS, STAGE_UNITS
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.geometry import Axis, BoundingBox, Position
from mineore.src.common.prototypes import BoosterSpec
from mineore.src.common.settings import PlannerSettings
from mineore.src.layout.layout_plan import GridLayout, TransportLine
from mineore.src.layout.tile_grid import TileGrid

from .conflict_resolver import ConflictResolver
from .markers import PlaceholderMarker, PlacementReport, StageResult
from .unit_placer import module_requests

logger = logging.getLogger(__name__)


def booster_reach(booster: BoosterSpec, unit_footprint: Tuple[int, int]) -> Tuple[float, float]:
    """Per-axis distance within which a booster affects a unit.

    A booster's supply area extends ``supply_distance`` tiles beyond its own
    footprint, and a unit is affected as soon as any of its tiles is inside
    that area. Measured between centers, that is the booster's half size plus
    the supply distance plus the unit's half size, separately on each axis.
    A unit is affected when the center distance is strictly below the reach
    on both axes.
    """
    unit_width, unit_height = unit_footprint
    return (
        booster.width / 2.0 + booster.supply_distance + unit_width / 2.0,
        booster.height / 2.0 + booster.supply_distance + unit_height / 2.0,
    )


@dataclass
class _BoostedUnit:
    position: Position
    reach: Tuple[float, float]
    count: int = 0

    def affected_by(self, candidate: Position) -> bool:
        return (
            abs(self.position.x - candidate.x) < self.reach[0]
            and abs(self.position.y - candidate.y) < self.reach[1]
        )


def _lane_sizes(booster: BoosterSpec, axis: Axis) -> Tuple[int, int]:
    """(along, cross) footprint of a booster relative to the transport lines."""
    if axis is Axis.NS:
        return booster.height, booster.width
    return booster.width, booster.height


def lane_centers(layout: GridLayout, booster: BoosterSpec) -> List[Tuple[float, List[TransportLine]]]:
    """Cross coordinate of every booster lane with the lines it serves.

    Lines of consecutive pair indices share the lane in the gap between
    them; every other edge gets its own lane just outside the relay gap.
    """
    _, cross_size = _lane_sizes(booster, layout.axis)
    half = cross_size / 2.0
    lanes: List[Tuple[float, List[TransportLine]]] = []

    lines = sorted(layout.lines, key=lambda line: line.pair_index)
    for index, line in enumerate(lines):
        previous = lines[index - 1] if index > 0 else None
        following = lines[index + 1] if index + 1 < len(lines) else None

        if previous is None or previous.pair_index != line.pair_index - 1:
            lanes.append((layout.near_edge(line) - layout.relay_gap - half, [line]))

        if following is not None and following.pair_index == line.pair_index + 1:
            low = layout.far_edge(line) + layout.relay_gap
            high = layout.near_edge(following)
            lanes.append(((low + high) / 2.0, [line, following]))
        else:
            lanes.append((layout.far_edge(line) + layout.relay_gap + half, [line]))

    return lanes


def generate_candidates(layout: GridLayout, booster: BoosterSpec) -> List[Position]:
    """Booster-sized steps along every lane, covering its units end to end."""
    if layout.is_empty:
        return []

    along_size, _ = _lane_sizes(booster, layout.axis)
    if layout.axis is Axis.NS:
        along_alignment, cross_alignment = booster.alignment_y, booster.alignment_x
    else:
        along_alignment, cross_alignment = booster.alignment_x, booster.alignment_y

    candidates: List[Position] = []
    seen = set()
    for cross, lines in lane_centers(layout, booster):
        cross = cross_alignment.snap(cross)
        positions = [along for line in lines for along in line.along_positions]
        start, end = layout.along_extent(positions)

        edge = start
        while edge < end:
            along = along_alignment.snap(edge + along_size / 2.0)
            candidate = Position.from_axes(layout.axis, along, cross)
            if candidate.as_tuple() not in seen:
                seen.add(candidate.as_tuple())
                candidates.append(candidate)
            edge += along_size

    return candidates


def booster_area(booster: BoosterSpec, position: Position) -> BoundingBox:
    return BoundingBox.from_center(position, booster.width, booster.height)


def filter_candidates(
    candidates: Sequence[Position], booster: BoosterSpec, blocked: TileGrid
) -> List[Position]:
    """Keep the candidates whose footprint avoids every blocked tile."""
    return [
        candidate
        for candidate in candidates
        if blocked.is_area_available(booster_area(booster, candidate))
    ]


class BoosterPlacer:
    """Greedy booster coverage with per-unit quotas and a fill pass."""

    def __init__(self, resolver: ConflictResolver, diagnostics: PlannerDiagnostics):
        self.resolver = resolver
        self.diagnostics = diagnostics
        self.blocked = TileGrid()
        self._units: List[_BoostedUnit] = []
        self._affected: Dict[Tuple[float, float], List[int]] = {}
        self._booster: Optional[BoosterSpec] = None
        self._template: Optional[PlaceholderMarker] = None

    def place(
        self,
        layout: GridLayout,
        booster: BoosterSpec,
        settings: PlannerSettings,
        report: PlacementReport,
    ) -> StageResult:
        result = report.stage(STAGE_BOOSTERS)
        unit_markers = report.markers_for(STAGE_UNITS)
        if layout.is_empty or not unit_markers:
            return result

        quality = settings.quality_for(settings.booster_quality)
        self.prepare(booster, unit_markers, report.markers)
        self._template = PlaceholderMarker(
            name=booster.name,
            position=Position(0, 0),
            quality=quality,
            footprint=(booster.width, booster.height),
            module_requests=module_requests(
                settings.booster_module,
                settings.booster_module_count,
                booster.module_slots,
                quality,
            ),
            stage=STAGE_BOOSTERS,
        )

        candidates = filter_candidates(generate_candidates(layout, booster), booster, self.blocked)
        logger.debug("%d booster candidates after filtering", len(candidates))

        candidates = self.greedy_pass(candidates, settings.effective_booster_quota, report)
        self.fill_pass(candidates, settings.max_boosters_per_unit, report)

        if result.skipped:
            self.diagnostics.info(
                f"{result.skipped} booster positions were blocked", stage=STAGE_BOOSTERS
            )
        return result

    def prepare(
        self,
        booster: BoosterSpec,
        unit_markers: Sequence[PlaceholderMarker],
        placed_markers: Sequence[PlaceholderMarker],
    ) -> None:
        """Reset per-run state: unit counters and the blocked-tile set."""
        self._booster = booster
        self._units = [
            _BoostedUnit(marker.position, booster_reach(booster, marker.oriented_footprint))
            for marker in unit_markers
        ]
        self._affected = {}
        self.blocked.rebuild_from_areas(marker.area for marker in placed_markers)

    def affected_units(self, candidate: Position) -> List[int]:
        key = candidate.as_tuple()
        if key not in self._affected:
            self._affected[key] = [
                index for index, unit in enumerate(self._units) if unit.affected_by(candidate)
            ]
        return self._affected[key]

    def unit_counts(self) -> List[int]:
        return [unit.count for unit in self._units]

    def greedy_pass(
        self, candidates: List[Position], quota: int, report: PlacementReport
    ) -> List[Position]:
        """Place best-scoring candidates until none helps a unit under ``quota``.

        Returns the candidates that are still open.
        """
        remaining = list(candidates)
        while remaining:
            best_index = None
            best_score = 0
            for index, candidate in enumerate(remaining):
                score = sum(
                    1 for unit in self.affected_units(candidate) if self._units[unit].count < quota
                )
                if score > best_score:
                    best_score = score
                    best_index = index

            if best_index is None:
                break

            candidate = remaining.pop(best_index)
            if self._submit(candidate, report):
                remaining = filter_candidates(remaining, self._booster, self.blocked)
        return remaining

    def fill_pass(
        self, candidates: List[Position], maximum: int, report: PlacementReport
    ) -> List[Position]:
        """Place every candidate that fits and keeps all units within ``maximum``.

        Returns the candidates left open; passing them back in places nothing.
        """
        remaining: List[Position] = []
        for candidate in candidates:
            if not self.blocked.is_area_available(booster_area(self._booster, candidate)):
                continue
            affected = self.affected_units(candidate)
            if any(self._units[unit].count >= maximum for unit in affected):
                remaining.append(candidate)
                continue
            self._submit(candidate, report)
        return remaining

    def _submit(self, candidate: Position, report: PlacementReport) -> bool:
        template = self._template
        marker = PlaceholderMarker(
            name=template.name,
            position=candidate,
            quality=template.quality,
            footprint=template.footprint,
            module_requests=list(template.module_requests),
            stage=STAGE_BOOSTERS,
        )
        outcome = self.resolver.place(marker)
        report.record(marker, outcome.ok)
        if not outcome.ok:
            logger.debug("Skipped booster at %s (%s)", candidate.as_tuple(), outcome.value)
            return False

        for unit in self.affected_units(candidate):
            self._units[unit].count += 1
        self.blocked.mark_area(marker.area)
        return True
