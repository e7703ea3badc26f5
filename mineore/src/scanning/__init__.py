"""Deposit scanning: tiles per deposit type and the units that can mine them."""

from .resource_scanner import (
    RESOURCE_TABLE,
    ResourceInfo,
    ScanResult,
    compute_bounds,
    find_compatible_units,
    group_resource_entities,
    resource_info,
    scan_resources,
)
from .scenario import Scenario, load_scenario

__all__ = [
    "RESOURCE_TABLE",
    "ResourceInfo",
    "ScanResult",
    "compute_bounds",
    "find_compatible_units",
    "group_resource_entities",
    "resource_info",
    "scan_resources",
    "Scenario",
    "load_scenario",
]
