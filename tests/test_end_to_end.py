#!/usr/bin/env python3
"""
End-to-end tests for the mining layout planner.
Tests the complete pipeline against draftsman's vanilla data: Scenario -> Calculator -> Placement -> Blueprint
"""

import glob
from pathlib import Path

import pytest

from mineore.src.common.constants import (
    STAGE_BOOSTERS,
    STAGE_RELAYS,
    STAGE_TRANSPORTERS,
    STAGE_UNITS,
)
from mineore.src.common.diagnostics import PlannerDiagnostics
from mineore.src.common.geometry import BoundingBox, Facing, Position
from mineore.src.common.settings import PlannerSettings
from mineore.src.emission.emitter import emit_blueprint
from mineore.src.placement.planner import plan_mining_layout
from mineore.src.scanning.scenario import load_scenario
from mineore.src.world.obstacles import Obstacle
from mineore.src.world.surface import InMemorySurface

scenario_files = sorted(glob.glob(str(Path(__file__).parent.parent / "example_scenarios" / "*.json")))


def rect_tiles(left, top, right, bottom):
    return {(x, y) for x in range(left, right) for y in range(top, bottom)}


def base_settings(**overrides):
    values = {
        "unit_type": "electric-mining-drill",
        "transporter_type": "transport-belt",
        "relay_type": "small-electric-pole",
    }
    values.update(overrides)
    return PlannerSettings(**values)


class TestDenseField:
    """A 10x10 iron field, dense, flowing south."""

    @pytest.fixture
    def run(self):
        surface = InMemorySurface()
        report, diagnostics = plan_mining_layout(
            base_settings(),
            {"iron-ore": rect_tiles(0, 0, 10, 10)},
            surface,
            bounds=BoundingBox(0, 0, 10, 10),
        )
        return report, diagnostics, surface

    def test_units(self, run):
        report, diagnostics, _ = run
        assert not diagnostics.has_errors()
        positions = sorted(m.position.as_tuple() for m in report.markers_for(STAGE_UNITS))
        assert positions == [
            (2.5, 1.5),
            (2.5, 4.5),
            (2.5, 7.5),
            (6.5, 1.5),
            (6.5, 4.5),
            (6.5, 7.5),
        ]

    def test_underground_belts(self, run):
        report, _, _ = run
        belts = report.markers_for(STAGE_TRANSPORTERS)
        assert [m.position.y for m in belts] == [1.5, 3.5, 4.5, 6.5, 7.5]
        assert {m.position.x for m in belts} == {4.5}
        assert {m.name for m in belts} == {"underground-belt"}
        assert {m.direction for m in belts} == {Facing.SOUTH}

    def test_relays(self, run):
        report, _, _ = run
        relays = report.markers_for(STAGE_RELAYS)
        assert [m.position for m in relays] == [
            Position(4.5, 2.5),
            Position(4.5, 5.5),
            Position(4.5, 8.5),
        ]

    def test_no_marker_overlaps(self, run):
        report, _, _ = run
        tiles = [tile for marker in report.markers for tile in marker.area.tiles()]
        assert len(tiles) == len(set(tiles))

    def test_blueprint(self, run):
        report, _, _ = run
        diagnostics = PlannerDiagnostics()
        blueprint = emit_blueprint(report.markers, label="Iron", diagnostics=diagnostics)
        assert not diagnostics.has_errors()
        assert len(blueprint.entities) == 14
        assert blueprint.to_string().startswith("0")


class TestForeignDeposits:
    """Units whose reach includes another deposit type are dropped."""

    def test_coal_edge_excludes_far_column(self):
        settings = base_settings(deposit_type="iron-ore")
        deposits = {"iron-ore": rect_tiles(0, 0, 8, 10), "coal": rect_tiles(8, 0, 10, 10)}

        report, _ = plan_mining_layout(
            settings, deposits, InMemorySurface(), bounds=BoundingBox(0, 0, 10, 10)
        )

        units = report.markers_for(STAGE_UNITS)
        assert len(units) == 3
        assert {m.position.x for m in units} == {2.5}


class TestBeaconLanes:
    """Two pairs sharing a beacon lane."""

    @pytest.fixture
    def report(self):
        report, _ = plan_mining_layout(
            base_settings(booster_type="beacon"),
            {"iron-ore": rect_tiles(0, 0, 17, 10)},
            InMemorySurface(),
            bounds=BoundingBox(0, 0, 17, 10),
        )
        return report

    def test_best_candidate_first(self, report):
        boosters = report.markers_for(STAGE_BOOSTERS)
        assert boosters[0].position == Position(8.5, 4.5)

    def test_every_candidate_placed(self, report):
        assert report.stage(STAGE_BOOSTERS).as_tuple() == (9, 0)

    def test_only_shared_lane_between_pairs(self, report):
        inside = {m.position.x for m in report.markers_for(STAGE_BOOSTERS) if 7 <= m.position.x <= 10}
        assert inside == {8.5}


class TestConflictModes:
    """A building in the way of one unit."""

    @pytest.fixture
    def surface(self):
        machine = Obstacle.from_entity(
            "assembling-machine-1", "assembling-machine", Position(2.5, 4.5), (3, 3)
        )
        return InMemorySurface([machine])

    def test_conservative(self, surface):
        report, _ = plan_mining_layout(
            base_settings(conservative_mode=True),
            {"iron-ore": rect_tiles(0, 0, 10, 10)},
            surface,
        )
        assert report.stage(STAGE_UNITS).as_tuple() == (5, 1)
        assert surface.removals == []

    def test_forced(self, surface):
        report, _ = plan_mining_layout(
            base_settings(), {"iron-ore": rect_tiles(0, 0, 10, 10)}, surface
        )
        assert report.stage(STAGE_UNITS).as_tuple() == (6, 0)
        assert len(surface.removals) == 1


class TestExampleScenarios:
    """Every example scenario plans without errors."""

    @pytest.mark.parametrize("scenario_file", scenario_files)
    def test_scenario_plans(self, scenario_file):
        scenario = load_scenario(scenario_file)
        surface = InMemorySurface(scenario.obstacles)
        settings = PlannerSettings.from_mapping(scenario.settings)

        report, diagnostics = plan_mining_layout(
            settings, scenario.deposits, surface, bounds=scenario.bounds
        )

        assert not diagnostics.has_errors(), diagnostics.get_messages()
        assert report.stage(STAGE_UNITS).placed > 0
        blueprint = emit_blueprint(report.markers)
        assert len(blueprint.entities) == len(report.markers)

    def test_examples_exist(self):
        assert len(scenario_files) >= 5
