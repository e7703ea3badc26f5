"""
Tests for placement/planner.py - Stage orchestration.
"""

import pytest

from mineore.src.common.constants import (
    PlannerConfig,
    STAGE_BOOSTERS,
    STAGE_PIPES,
    STAGE_RELAYS,
    STAGE_TRANSPORTERS,
    STAGE_UNITS,
)
from mineore.src.common.diagnostics import DiagnosticSeverity, PlannerDiagnostics
from mineore.src.common.geometry import BoundingBox, Position
from mineore.src.common.settings import PlannerSettings
from mineore.src.placement.planner import MiningLayoutPlanner, plan_mining_layout
from mineore.src.world.obstacles import Obstacle
from mineore.src.world.surface import InMemorySurface


def rect_tiles(left, top, right, bottom):
    return {(x, y) for x in range(left, right) for y in range(top, bottom)}


@pytest.fixture
def settings():
    return PlannerSettings(
        unit_type="test-drill",
        transporter_type="transport-belt",
        relay_type="small-electric-pole",
    )


class TestPlanStages:
    """A full run over a square deposit."""

    def test_stage_counts(self, catalog, settings):
        surface = InMemorySurface()
        report, diagnostics = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, surface, catalog=catalog
        )

        assert not diagnostics.has_errors()
        assert report.stage(STAGE_UNITS).as_tuple() == (6, 0)
        assert report.stage(STAGE_TRANSPORTERS).as_tuple() == (5, 0)
        assert report.stage(STAGE_RELAYS).as_tuple() == (3, 0)
        assert report.stage(STAGE_PIPES).as_tuple() == (0, 0)
        assert report.stage(STAGE_BOOSTERS).as_tuple() == (0, 0)
        assert len(surface.markers) == 14

    def test_markers_in_stage_order(self, catalog, settings):
        report, _ = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, InMemorySurface(), catalog=catalog
        )
        stages = [marker.stage for marker in report.markers]
        assert stages == sorted(
            stages, key=[STAGE_UNITS, STAGE_TRANSPORTERS, STAGE_RELAYS].index
        )

    def test_bounds_default_to_deposit_extent(self, catalog, settings):
        planner = MiningLayoutPlanner(InMemorySurface(), PlannerDiagnostics(), catalog=catalog)
        planner.plan(settings, {"iron-ore": rect_tiles(0, 0, 10, 10)})
        assert planner.layout.bounds == BoundingBox(0, 0, 10, 10)

    def test_config_small_unit_threshold(self, catalog, settings):
        """A raised threshold gives 3x3 units plain belts."""
        planner = MiningLayoutPlanner(
            InMemorySurface(),
            PlannerDiagnostics(),
            catalog=catalog,
            config=PlannerConfig(small_unit_max_size=3),
        )
        report = planner.plan(settings, {"iron-ore": rect_tiles(0, 0, 10, 10)})

        assert planner.layout.is_small_unit
        belts = report.markers_for(STAGE_TRANSPORTERS)
        assert belts
        assert {m.name for m in belts} == {"transport-belt"}

    def test_summary(self, catalog, settings):
        report, _ = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, InMemorySurface(), catalog=catalog
        )
        assert report.format_summary() == (
            "Placed 6 miners with 5 transporters, 3 relays."
        )


class TestDeposits:
    """Deposit type selection."""

    def test_foreign_deposit_excludes_units(self, catalog, settings):
        settings.deposit_type = "iron-ore"
        deposits = {
            "iron-ore": rect_tiles(0, 0, 8, 10),
            "coal": rect_tiles(8, 0, 10, 10),
        }
        report, _ = plan_mining_layout(
            settings, deposits, InMemorySurface(), bounds=BoundingBox(0, 0, 10, 10), catalog=catalog
        )
        units = report.markers_for(STAGE_UNITS)
        assert len(units) == 3
        assert {m.position.x for m in units} == {2.5}

    def test_without_deposit_type_everything_is_mined(self, catalog, settings):
        deposits = {
            "iron-ore": rect_tiles(0, 0, 8, 10),
            "coal": rect_tiles(8, 0, 10, 10),
        }
        report, _ = plan_mining_layout(
            settings, deposits, InMemorySurface(), bounds=BoundingBox(0, 0, 10, 10), catalog=catalog
        )
        assert report.stage(STAGE_UNITS).placed == 6

    def test_missing_deposit_type_warns(self, catalog, settings):
        settings.deposit_type = "copper-ore"
        report, diagnostics = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, InMemorySurface(), catalog=catalog
        )
        assert diagnostics.warning_count() == 1
        assert report.stage(STAGE_UNITS).placed == 6


class TestFailureModes:
    """Unknown prototypes and empty selections."""

    def test_unknown_unit_is_an_error(self, catalog):
        report, diagnostics = plan_mining_layout(
            PlannerSettings(unit_type="nope"),
            {"iron-ore": rect_tiles(0, 0, 10, 10)},
            InMemorySurface(),
            catalog=catalog,
        )
        assert diagnostics.has_errors()
        assert report.markers == []

    def test_unknown_relay_skips_stage(self, catalog, settings):
        settings.relay_type = "big-electric-pole"
        report, diagnostics = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, InMemorySurface(), catalog=catalog
        )
        assert diagnostics.warning_count() == 1
        assert report.stage(STAGE_RELAYS).as_tuple() == (0, 0)
        assert report.stage(STAGE_UNITS).placed == 6

    def test_empty_selection(self, catalog, settings):
        diagnostics = PlannerDiagnostics(verbose=True)
        report, _ = plan_mining_layout(
            settings, {}, InMemorySurface(), diagnostics=diagnostics, catalog=catalog
        )
        assert report.markers == []
        assert not diagnostics.has_errors()
        assert report.format_summary() == "No valid positions for miners."
        assert diagnostics.get_messages(DiagnosticSeverity.INFO)


class TestConflictModes:
    """Conservative and forced runs around a structure."""

    @pytest.fixture
    def surface(self):
        machine = Obstacle.from_entity(
            "assembling-machine-1", "assembling-machine", Position(2.5, 4.5), (3, 3)
        )
        return InMemorySurface([machine])

    def test_conservative_skips_blocked_unit(self, catalog, settings, surface):
        settings.conservative_mode = True
        report, _ = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, surface, catalog=catalog
        )
        assert report.stage(STAGE_UNITS).as_tuple() == (5, 1)
        assert surface.removals == []

    def test_forced_removes_structure(self, catalog, settings, surface):
        report, _ = plan_mining_layout(
            settings, {"iron-ore": rect_tiles(0, 0, 10, 10)}, surface, catalog=catalog
        )
        assert report.stage(STAGE_UNITS).as_tuple() == (6, 0)
        assert [obstacle.name for obstacle in surface.removals] == ["assembling-machine-1"]


class TestBoostersAndPipes:
    """Optional stages switched on by settings."""

    def test_boosters_placed_in_reserved_lanes(self, catalog, settings):
        settings.booster_type = "beacon"
        report, _ = plan_mining_layout(
            settings,
            {"iron-ore": rect_tiles(0, 0, 17, 10)},
            InMemorySurface(),
            bounds=BoundingBox(0, 0, 17, 10),
            catalog=catalog,
        )
        assert report.stage(STAGE_UNITS).placed == 12
        assert report.stage(STAGE_BOOSTERS).placed == 9

    def test_pipes_for_sparse_fluid_units(self, catalog):
        settings = PlannerSettings(
            unit_type="fluid-drill", density_mode="sparse", pipe_type="pipe"
        )
        report, _ = plan_mining_layout(
            settings,
            {"uranium-ore": rect_tiles(0, 0, 7, 20)},
            InMemorySurface(),
            catalog=catalog,
        )
        assert report.stage(STAGE_PIPES).placed == 12

    def test_no_pipes_for_dry_deposit(self, catalog):
        """Fluid-input units on a deposit that needs no fluid get no pipes."""
        settings = PlannerSettings(
            unit_type="fluid-drill", density_mode="sparse", pipe_type="pipe"
        )
        report, _ = plan_mining_layout(
            settings,
            {"iron-ore": rect_tiles(0, 0, 30, 30)},
            InMemorySurface(),
            catalog=catalog,
        )
        assert report.stage(STAGE_UNITS).placed > 0
        assert report.stage(STAGE_PIPES).as_tuple() == (0, 0)
        assert report.markers_for(STAGE_PIPES) == []

    def test_chosen_deposit_decides_fluid(self, catalog):
        settings = PlannerSettings(
            unit_type="fluid-drill",
            density_mode="sparse",
            pipe_type="pipe",
            deposit_type="uranium-ore",
        )
        report, _ = plan_mining_layout(
            settings,
            {"uranium-ore": rect_tiles(0, 0, 7, 20)},
            InMemorySurface(),
            catalog=catalog,
        )
        assert report.stage(STAGE_PIPES).placed == 12
