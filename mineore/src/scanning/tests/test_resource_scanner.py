"""
Tests for scanning/resource_scanner.py - Deposit grouping and unit lookup.
"""

from mineore.src.common.geometry import BoundingBox
from mineore.src.scanning.resource_scanner import (
    compute_bounds,
    group_resource_entities,
    resource_info,
    scan_resources,
)


class TestResourceInfo:
    """Tests for resource_info."""

    def test_prototype_data_wins(self, catalog):
        info = resource_info("uranium-ore", catalog)
        assert info.required_fluid == "sulfuric-acid"
        assert info.category == "basic-solid"

    def test_prototype_category(self, catalog):
        assert resource_info("tungsten-ore", catalog).category == "hard-solid"

    def test_table_fallback(self):
        assert resource_info("calcite").category == "hard-solid"
        assert resource_info("iron-ore").required_fluid is None

    def test_unknown_resource_is_solid(self, catalog):
        info = resource_info("mystery-ore", catalog)
        assert info.category == "basic-solid"
        assert info.required_fluid is None


class TestComputeBounds:
    """Tests for compute_bounds."""

    def test_covers_every_tile(self):
        assert compute_bounds([(2, 3), (5, 1), (4, 4)]) == BoundingBox(2, 1, 6, 5)

    def test_empty(self):
        assert compute_bounds([]) is None


class TestScanResources:
    """Tests for scan_resources."""

    def test_groups_and_bounds(self, catalog):
        result = scan_resources(
            {"iron-ore": [(0, 0), (1, 0), (2, 0)], "coal": [(5, 5)]}, catalog
        )
        assert result.deposit_types() == ["iron-ore", "coal"]
        assert result.bounds == BoundingBox(0, 0, 6, 6)
        assert not result.requires_fluid

    def test_compatible_units_by_category(self, catalog):
        result = scan_resources({"iron-ore": [(0, 0)]}, catalog)
        assert "test-drill" in result.unit_names()
        assert "hard-drill" not in result.unit_names()

        hard = scan_resources({"tungsten-ore": [(0, 0)]}, catalog)
        assert hard.unit_names() == ["hard-drill"]

    def test_fluid_requirement(self, catalog):
        result = scan_resources({"uranium-ore": [(0, 0)]}, catalog)
        assert result.requires_fluid

    def test_empty_deposits_dropped(self, catalog):
        result = scan_resources({"iron-ore": []}, catalog)
        assert result.is_empty
        assert result.bounds is None
        assert result.compatible_units == []


class TestGroupResourceEntities:
    """Tests for group_resource_entities."""

    def test_tuple_and_mapping_positions(self):
        groups = group_resource_entities(
            [
                {"name": "iron-ore", "position": (0.5, 0.5)},
                {"name": "iron-ore", "position": {"x": 1.5, "y": 0.5}},
                {"name": "coal", "position": (-0.5, 2.5)},
            ]
        )
        assert groups == {"iron-ore": {(0, 0), (1, 0)}, "coal": {(-1, 2)}}
