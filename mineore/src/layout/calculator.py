"""Grid calculator: turns a unit spec and a selection into paired unit rows.

Units are laid out in pairs facing each other across a one-tile corridor that
carries the transport line::

    [Unit =>] [Belt] [<= Unit]   [Unit =>] [Belt] [<= Unit]
    [Unit =>] [Belt] [<= Unit]   [Unit =>] [Belt] [<= Unit]
      pair 0                       pair 1

Pairs are stepped across the flow axis by the pair stride, units are stepped
along it by the mode's spacing. The whole block is centred in the selection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Tuple

from mineore.src.common.constants import PAIR_GAP, SMALL_UNIT_MAX_SIZE
from mineore.src.common.geometry import (
    Axis,
    BoundingBox,
    Facing,
    Position,
    Tile,
    TileAlignment,
)
from mineore.src.common.prototypes import UnitSpec
from mineore.src.common.settings import DensityMode

from .layout_plan import FAR_SIDE, NEAR_SIDE, GridLayout, PlacementEntry, TransportLine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GridSpacing:
    """Spacing parameters for one unit/mode/axis combination."""

    along: int  # distance between unit centers along the transport line
    row_offset: int  # stagger applied to every second pair row
    inter_pair: int  # free tiles between neighbouring pairs (before boosters)
    relay_gap: int  # part of inter_pair reserved for relay columns


def oriented_sizes(unit: UnitSpec, axis: Axis) -> Tuple[int, int, Facing, Facing]:
    """Return (along, cross, near facing, far facing) for units on ``axis``.

    Units always face the corridor, so NS lines hold east/west facing units
    and EW lines hold north/south facing ones.
    """
    if axis is Axis.NS:
        width, height = unit.footprint(Facing.EAST)
        return height, width, Facing.EAST, Facing.WEST
    width, height = unit.footprint(Facing.SOUTH)
    return width, height, Facing.SOUTH, Facing.NORTH


def get_spacing(
    unit: UnitSpec,
    mode: DensityMode,
    axis: Axis,
    small_unit_max_size: int = SMALL_UNIT_MAX_SIZE,
) -> GridSpacing:
    """Calculate the grid spacing for a unit and density mode.

    Dense units touch edge to edge. Sparse units sit one mining diameter
    (``2 * floor(radius) + 1``) apart so their mining areas just meet, with
    every second pair row shifted by half that distance. The diameter is
    never allowed to drop below the footprint, so units cannot overlap.
    """
    along, cross, _, _ = oriented_sizes(unit, axis)
    relay_gap = 1 if unit.is_small(small_unit_max_size) else 0

    if mode is DensityMode.DENSE:
        return GridSpacing(along=along, row_offset=0, inter_pair=relay_gap, relay_gap=relay_gap)

    diameter = unit.mining_diameter
    spacing = max(diameter, along)
    return GridSpacing(
        along=spacing,
        row_offset=spacing // 2,
        inter_pair=relay_gap + max(0, diameter - cross),
        relay_gap=relay_gap,
    )


def mining_area(center: Position, radius: float) -> BoundingBox:
    """The square a unit at ``center`` can reach."""
    return BoundingBox(
        center.x - radius,
        center.y - radius,
        center.x + radius,
        center.y + radius,
    )


def has_tiles_in_area(area: BoundingBox, tiles: AbstractSet[Tile]) -> bool:
    """Check if any tile of ``tiles`` lies inside ``area``."""
    if not tiles:
        return False
    return any(tile in tiles for tile in area.tiles())


def centred_starts(lo: int, hi: int, size: int, stride: int) -> List[int]:
    """Near edges of as many ``size``-wide blocks as fit in [lo, hi) at ``stride``.

    The used span is centred; an odd leftover tile goes to the far side.
    """
    extent = hi - lo
    if extent < size or stride <= 0:
        return []
    count = 1 + (extent - size) // stride
    used = (count - 1) * stride + size
    offset = (extent - used) // 2
    return [lo + offset + index * stride for index in range(count)]


def calculate_layout(
    unit: UnitSpec,
    bounds: Optional[BoundingBox],
    mode: DensityMode,
    flow: Facing,
    deposit_tiles: AbstractSet[Tile],
    foreign_tiles: Optional[AbstractSet[Tile]] = None,
    booster_width: int = 0,
    gap: int = PAIR_GAP,
    small_unit_max_size: int = SMALL_UNIT_MAX_SIZE,
) -> GridLayout:
    """Calculate all unit placements and transport lines for a selection.

    Args:
        unit: Unit spec (footprint in north orientation and mining radius)
        bounds: Selection rectangle in tile coordinates
        mode: Density mode
        flow: Belt flow direction; decides the transport-line axis
        deposit_tiles: Tiles of the deposit type being mined
        foreign_tiles: Tiles of other deposit types a unit must not reach
        booster_width: Extra tiles reserved between pairs for a booster lane
        gap: Corridor width between the two sides of a pair
        small_unit_max_size: Largest footprint side handled with plain belts
            and edge relays

    Returns:
        GridLayout; empty when nothing fits or no candidate reaches a deposit
    """
    axis = flow.axis
    along, cross, near_facing, far_facing = oriented_sizes(unit, axis)
    spacing = get_spacing(unit, mode, axis, small_unit_max_size)

    layout = GridLayout(
        axis=axis,
        flow=flow,
        along_size=along,
        cross_size=cross,
        gap=gap,
        relay_gap=spacing.relay_gap,
        booster_width=booster_width,
        is_small_unit=unit.is_small(small_unit_max_size),
        bounds=bounds,
    )

    if bounds is None or bounds.is_empty or not deposit_tiles:
        return layout

    grid = bounds.to_tile_grid()
    if axis is Axis.NS:
        cross_lo, cross_hi = int(grid.left), int(grid.right)
        along_lo, along_hi = int(grid.top), int(grid.bottom)
    else:
        cross_lo, cross_hi = int(grid.top), int(grid.bottom)
        along_lo, along_hi = int(grid.left), int(grid.right)

    pair_width = 2 * cross + gap
    stride = pair_width + spacing.inter_pair + booster_width
    pair_starts = centred_starts(cross_lo, cross_hi, pair_width, stride)
    row_starts = centred_starts(along_lo, along_hi, along, spacing.along)

    cross_alignment = TileAlignment.for_size(cross)
    along_alignment = TileAlignment.for_size(along)

    for pair_index, pair_start in enumerate(pair_starts):
        near_cross = cross_alignment.center_from_edge(pair_start, cross)
        far_cross = cross_alignment.center_from_edge(pair_start + cross + gap, cross)
        line = TransportLine(
            axis=axis,
            center=pair_start + cross + gap / 2.0,
            pair_index=pair_index,
        )

        shift = spacing.row_offset if pair_index % 2 == 1 else 0
        for row_start in row_starts:
            along_edge = row_start + shift
            if along_edge + along > along_hi:
                continue
            along_center = along_alignment.center_from_edge(along_edge, along)

            for side, cross_center, facing in (
                (NEAR_SIDE, near_cross, near_facing),
                (FAR_SIDE, far_cross, far_facing),
            ):
                position = Position.from_axes(axis, along_center, cross_center)
                area = mining_area(position, unit.radius)
                if not has_tiles_in_area(area, deposit_tiles):
                    continue
                if foreign_tiles and has_tiles_in_area(area, foreign_tiles):
                    continue
                layout.entries.append(
                    PlacementEntry(
                        position=position,
                        direction=facing,
                        side=side,
                        pair_index=pair_index,
                    )
                )
                line.side_positions(side).append(along_center)

        if not line.is_empty:
            layout.lines.append(line)

    if layout.is_small_unit and layout.lines:
        _add_relay_columns(layout)

    logger.debug(
        "Calculated %d unit positions on %d transport lines (%s, %s)",
        len(layout.entries),
        len(layout.lines),
        mode.value,
        flow.value,
    )
    return layout


def _add_relay_columns(layout: GridLayout) -> None:
    """Record relay column positions for small units.

    Outer edges get a column directly outside the first and last pair; every
    pair also gets one on its far side, which is the shared inter-pair column
    when the next pair exists.
    """
    half = layout.relay_gap / 2.0
    lines = layout.lines
    layout.outer_edge_positions = [layout.near_edge(lines[0]) - half]

    for current, following in zip(lines, lines[1:]):
        layout.relay_gap_positions.append(layout.far_edge(current) + half)
        if following.pair_index != current.pair_index + 1:
            layout.relay_gap_positions.append(layout.near_edge(following) - half)

    layout.outer_edge_positions.append(layout.far_edge(lines[-1]) + half)
