#!/usr/bin/env python3
"""
mineore CLI - Command-line interface for the mining layout planner.

This module provides the entry point for the 'mineore' command installed via pip.

Usage:
    mineore scenario.json                          # Plan with the scenario's settings
    mineore scenario.json -o layout.blueprint      # Save blueprint to file
    mineore scenario.json --unit electric-mining-drill --belt fast-transport-belt
    mineore scenario.json --beacon beacon --beacon-module speed-module-3
    mineore scenario.json --mode sparse --direction east --plot layout.png
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

from mineore.src.common.constants import DEFAULT_CONFIG, PlannerConfig
from mineore.src.common.diagnostics import DiagnosticSeverity, PlannerDiagnostics
from mineore.src.common.entity_data import get_default_catalog
from mineore.src.common.geometry import Facing
from mineore.src.common.settings import DensityMode, PlannerSettings
from mineore.src.emission.emitter import BlueprintEmitter
from mineore.src.placement.planner import MiningLayoutPlanner
from mineore.src.scanning.resource_scanner import scan_resources
from mineore.src.scanning.scenario import Scenario, load_scenario
from mineore.src.world.surface import InMemorySurface

PREFERRED_UNIT = "electric-mining-drill"


def validate_direction(ctx, param, value):
    """Validate flow direction."""
    if value is None:
        return None
    try:
        return Facing.parse(value).value
    except ValueError:
        raise click.BadParameter("must be one of: north, south, east, west")


def validate_mode(ctx, param, value):
    """Validate density mode."""
    if value is None:
        return None
    try:
        return DensityMode.parse(value).value
    except ValueError:
        raise click.BadParameter("must be one of: dense, sparse")


def build_settings(
    scenario: Scenario, overrides: Dict[str, Any], config: PlannerConfig = DEFAULT_CONFIG
) -> PlannerSettings:
    """Scenario settings with command-line overrides applied.

    Falls back to a compatible unit from the scanned deposits when neither
    names one.

    Raises:
        ValueError: invalid settings or no usable unit
    """
    values = dict(scenario.settings)
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values.get("unit_type"):
        scan = scan_resources(scenario.deposits, get_default_catalog())
        names = scan.unit_names()
        if not names:
            raise ValueError("No mining unit given and none can mine the scenario's deposits")
        values["unit_type"] = PREFERRED_UNIT if PREFERRED_UNIT in names else names[0]

    return PlannerSettings.from_mapping(values, config)


def plan_scenario(
    scenario: Scenario,
    settings: PlannerSettings,
    program_name: Optional[str] = None,
    log_level: str = "warning",
    use_json: bool = False,
    plot_path: Optional[Path] = None,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> tuple[bool, str, list]:
    """
    Plan a scenario and render the result as a blueprint.

    Args:
        scenario: Deposits, bounds and obstacles to plan over
        settings: Per-run choices
        program_name: Blueprint label (default: derived from the scenario name)
        log_level: Logging verbosity level, also decides which diagnostics are kept
        use_json: If True, return JSON text instead of a blueprint string
        plot_path: If set, render the layout to this PNG
        config: Planner configuration settings

    Returns:
        (success: bool, result: str, messages: list); the first message is
        the placement summary
    """
    if program_name is None:
        program_name = scenario.name.replace("_", " ").title()

    diagnostics = PlannerDiagnostics(
        verbose=log_level in ("info", "debug"), debug=log_level == "debug"
    )
    surface = InMemorySurface(scenario.obstacles)

    planner = MiningLayoutPlanner(surface, diagnostics, config=config)
    report = planner.plan(settings, scenario.deposits, scenario.bounds)
    messages = [report.format_summary()]

    if diagnostics.has_errors():
        return False, "Placement failed", messages + diagnostics.get_messages()

    emitter = BlueprintEmitter(diagnostics, config)
    blueprint = emitter.emit(
        report.markers,
        label=program_name or config.default_blueprint_label,
        description=config.default_blueprint_description,
    )

    if diagnostics.has_errors():
        return False, "Blueprint emission failed", messages + diagnostics.get_messages()

    if plot_path is not None:
        from mineore.src.layout.debug_viz import LayoutVisualizer

        LayoutVisualizer(scenario.deposits, bounds=scenario.bounds).render(
            report.markers, str(plot_path), title=program_name
        )

    # Return JSON dict or compressed blueprint string
    if use_json:
        import json

        blueprint_result = json.dumps(blueprint.to_dict())
    else:
        blueprint_result = blueprint.to_string()

    min_severity = DiagnosticSeverity.INFO if diagnostics.verbose else DiagnosticSeverity.WARNING
    return True, blueprint_result, messages + diagnostics.get_messages(min_severity)


def setup_logging(level: str) -> None:
    """Setup logging configuration."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(levelname)s: %(message)s")


@click.command()
@click.argument("scenario_file", type=click.Path(exists=True, path_type=Path))
@click.option("--unit", "unit_type", type=str, help="Mining drill prototype")
@click.option("--belt", "transporter_type", type=str, help="Belt prototype (empty: no belts)")
@click.option("--pole", "relay_type", type=str, help="Electric pole prototype")
@click.option("--beacon", "booster_type", type=str, help="Beacon prototype")
@click.option("--beacon-module", "booster_module", type=str, help="Module to request in beacons")
@click.option("--beacon-module-count", "booster_module_count", type=int, help="Modules per beacon")
@click.option("--unit-module", type=str, help="Module to request in drills")
@click.option("--unit-module-count", type=int, help="Modules per drill")
@click.option("--pipe", "pipe_type", type=str, help="Pipe prototype for fluid-fed drills")
@click.option("--deposit", "deposit_type", type=str, help="Only mine this deposit type")
@click.option(
    "--mode",
    "density_mode",
    callback=validate_mode,
    help="Placement density: dense (productivity) or sparse (efficient)",
)
@click.option(
    "--direction",
    "flow_direction",
    callback=validate_direction,
    help="Belt flow direction: north, south, east or west",
)
@click.option("--quality", "quality_tier", type=str, help="Quality of all markers")
@click.option("--belt-quality", "transporter_quality", type=str, help="Quality of belts")
@click.option("--pole-quality", "relay_quality", type=str, help="Quality of poles")
@click.option("--beacon-quality", "booster_quality", type=str, help="Quality of beacons")
@click.option(
    "--conservative/--forced",
    "conservative_mode",
    default=None,
    help="Keep buildings in the way (conservative) or order their removal (forced)",
)
@click.option(
    "--preferred-beacons",
    "per_unit_booster_quota",
    type=int,
    help="Preferred beacons per drill (0: no preference)",
)
@click.option(
    "--max-beacons",
    "max_boosters_per_unit",
    type=int,
    help="Maximum beacons affecting any drill",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    help="Output file for the blueprint (default: stdout)",
)
@click.option("--name", type=str, help="Blueprint name (default: derived from scenario filename)")
@click.option(
    "--json",
    "use_json",
    is_flag=True,
    help="Output blueprint in JSON format instead of compressed string format",
)
@click.option("--plot", type=click.Path(path_type=Path), help="Render the layout to a PNG")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Set the logging level",
)
def main(scenario_file, output, name, use_json, plot, log_level, **overrides):
    """Plan mining drills, belts, poles and beacons over a scenario file."""
    setup_logging(log_level)
    verbose = log_level in ["debug", "info"]

    try:
        scenario = load_scenario(scenario_file)
    except (OSError, ValueError) as e:
        click.echo(f"Failed to read scenario file: {e}", err=True)
        sys.exit(1)

    try:
        settings = build_settings(scenario, overrides)
    except ValueError as e:
        click.echo(f"Invalid settings: {e}", err=True)
        sys.exit(1)

    if verbose:
        click.echo(f"Planning {scenario_file} with {settings.unit_type}...", err=True)

    success, result, messages = plan_scenario(
        scenario,
        settings,
        program_name=name,
        log_level=log_level,
        use_json=use_json,
        plot_path=plot,
    )

    for message in messages[1:]:
        click.echo(message, err=True)

    if not success:
        click.echo(f"Planning failed: {result}", err=True)
        sys.exit(1)

    # Output blueprint
    if output:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Blueprint saved to {output}", err=True)
        except OSError as e:
            click.echo(f"Failed to write output file: {e}", err=True)
            sys.exit(1)
    else:
        click.echo(result)

    click.echo(messages[0], err=True)


if __name__ == "__main__":
    main()
