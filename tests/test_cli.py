"""
Tests for the CLI module (mineore/cli.py).

These tests cover the command-line interface and the plan_scenario function.
"""

import json

import click
import pytest
from click.testing import CliRunner

from mineore.cli import (
    build_settings,
    main,
    plan_scenario,
    setup_logging,
    validate_direction,
    validate_mode,
)
from mineore.src.common.geometry import Facing
from mineore.src.common.settings import DensityMode
from mineore.src.scanning.scenario import load_scenario

IRON_FIELD = {
    "bounds": [[0, 0], [10, 10]],
    "deposits": {"iron-ore": {"rects": [[0, 0, 10, 10]]}},
    "settings": {
        "unit_type": "electric-mining-drill",
        "transporter_type": "transport-belt",
        "relay_type": "small-electric-pole",
    },
}


class TestBuildSettings:
    """Tests for build_settings."""

    def test_scenario_settings_used(self):
        settings = build_settings(load_scenario(IRON_FIELD), {})
        assert settings.unit_type == "electric-mining-drill"
        assert settings.relay_type == "small-electric-pole"

    def test_overrides_win(self):
        settings = build_settings(
            load_scenario(IRON_FIELD), {"flow_direction": "north", "relay_type": None}
        )
        assert settings.flow_direction is Facing.NORTH
        assert settings.relay_type == "small-electric-pole"

    def test_unit_from_deposits(self):
        scenario = load_scenario({"deposits": {"iron-ore": [[0, 0]]}})
        assert build_settings(scenario, {}).unit_type == "electric-mining-drill"

    def test_invalid_setting_raises(self):
        with pytest.raises(ValueError):
            build_settings(load_scenario(IRON_FIELD), {"max_boosters_per_unit": 99})


class TestPlanScenario:
    """Tests for the plan_scenario function."""

    def test_blueprint_string(self):
        scenario = load_scenario(IRON_FIELD)
        success, result, messages = plan_scenario(scenario, build_settings(scenario, {}))
        assert success is True
        assert result.startswith("0")
        assert messages[0] == "Placed 6 miners with 5 transporters, 3 relays."

    def test_json_output(self):
        scenario = load_scenario(IRON_FIELD)
        success, result, _ = plan_scenario(scenario, build_settings(scenario, {}), use_json=True)
        assert success is True
        data = json.loads(result)
        assert data["blueprint"]["label"] == "Scenario"
        assert len(data["blueprint"]["entities"]) == 14

    def test_custom_program_name(self):
        scenario = load_scenario(IRON_FIELD)
        _, result, _ = plan_scenario(
            scenario, build_settings(scenario, {}), program_name="Iron Mine", use_json=True
        )
        assert json.loads(result)["blueprint"]["label"] == "Iron Mine"

    def test_unknown_unit_fails(self):
        scenario = load_scenario(IRON_FIELD)
        settings = build_settings(scenario, {"unit_type": "not-a-drill"})
        success, result, messages = plan_scenario(scenario, settings)
        assert success is False
        assert any("not-a-drill" in message for message in messages)

    def test_empty_selection_succeeds(self):
        scenario = load_scenario({"bounds": [[0, 0], [10, 10]], "deposits": {}})
        settings = build_settings(scenario, {"unit_type": "electric-mining-drill"})
        success, _, messages = plan_scenario(scenario, settings)
        assert success is True
        assert messages[0] == "No valid positions for miners."


class TestValidators:
    """Tests for the click option callbacks."""

    def test_valid_direction(self):
        assert validate_direction(None, None, "E") == "east"
        assert validate_direction(None, None, None) is None

    def test_invalid_direction(self):
        with pytest.raises(click.BadParameter):
            validate_direction(None, None, "sideways")

    def test_valid_mode(self):
        assert validate_mode(None, None, "efficient") == DensityMode.SPARSE.value

    def test_invalid_mode(self):
        with pytest.raises(click.BadParameter):
            validate_mode(None, None, "tight")


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_valid_log_levels(self):
        """Valid log levels don't raise."""
        for level in ["debug", "info", "warning", "error"]:
            setup_logging(level)  # Should not raise

    def test_invalid_log_level(self):
        """Invalid log level raises ValueError."""
        with pytest.raises(ValueError):
            setup_logging("invalid_level")


class TestCliMain:
    """Tests for the main CLI command."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def scenario_file(self, tmp_path):
        """Create a simple scenario file for testing."""
        file = tmp_path / "iron_field.json"
        file.write_text(json.dumps(IRON_FIELD), encoding="utf-8")
        return file

    def test_plan_file(self, runner, scenario_file):
        """Planning a file prints a blueprint string."""
        result = runner.invoke(main, [str(scenario_file)])
        assert result.exit_code == 0
        assert result.output.startswith("0")
        assert "Placed 6 miners" in result.output

    def test_output_to_file(self, runner, scenario_file, tmp_path):
        """Output to file works."""
        output_file = tmp_path / "nested" / "layout.blueprint"
        result = runner.invoke(main, [str(scenario_file), "-o", str(output_file)])
        assert result.exit_code == 0
        assert output_file.read_text().startswith("0")

    def test_json_output(self, runner, scenario_file, tmp_path):
        """--json writes JSON text."""
        output_file = tmp_path / "layout.json"
        result = runner.invoke(
            main, [str(scenario_file), "--json", "--name", "Iron", "-o", str(output_file)]
        )
        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert data["blueprint"]["label"] == "Iron"

    def test_overrides(self, runner, scenario_file, tmp_path):
        """Setting options reach the planner."""
        output_file = tmp_path / "layout.json"
        result = runner.invoke(
            main,
            [
                str(scenario_file),
                "--direction",
                "east",
                "--pole",
                "medium-electric-pole",
                "--json",
                "-o",
                str(output_file),
            ],
        )
        assert result.exit_code == 0
        entities = json.loads(output_file.read_text())["blueprint"]["entities"]
        assert any(entity["name"] == "medium-electric-pole" for entity in entities)

    def test_invalid_direction(self, runner, scenario_file):
        result = runner.invoke(main, [str(scenario_file), "--direction", "up"])
        assert result.exit_code == 2

    def test_invalid_settings(self, runner, scenario_file):
        result = runner.invoke(main, [str(scenario_file), "--max-beacons", "99"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output

    def test_bad_scenario_file(self, runner, tmp_path):
        bad_file = tmp_path / "bad.json"
        bad_file.write_text("{not json", encoding="utf-8")
        result = runner.invoke(main, [str(bad_file)])
        assert result.exit_code == 1
        assert "Failed to read scenario file" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.json")])
        assert result.exit_code != 0

    def test_unknown_unit(self, runner, scenario_file):
        result = runner.invoke(main, [str(scenario_file), "--unit", "not-a-drill"])
        assert result.exit_code == 1
        assert "Planning failed" in result.output

    def test_log_level_info(self, runner, scenario_file):
        """--log-level info works."""
        result = runner.invoke(main, [str(scenario_file), "--log-level", "info"])
        assert result.exit_code == 0
        assert "Planning" in result.output

    def test_conservative_flag(self, runner, tmp_path):
        data = dict(IRON_FIELD)
        data["obstacles"] = [
            {"name": "assembling-machine-1", "type": "assembling-machine", "position": [2.5, 4.5], "size": [3, 3]}
        ]
        file = tmp_path / "blocked.json"
        file.write_text(json.dumps(data), encoding="utf-8")

        result = runner.invoke(main, [str(file), "--conservative"])

        assert result.exit_code == 0
        assert "Placed 5 miners" in result.output
        assert "1 skipped" in result.output
