"""Tests for the second-level (item) partition inside a group cell."""

import math

import numpy as np
import pytest

from py_assetwheel.core.geometry import Polygon, make_circle_polygon
from py_assetwheel.core.group_partition import partition_groups
from py_assetwheel.core.holdings import build_groups
from py_assetwheel.core.item_partition import partition_items, sample_item_seed
from py_assetwheel.core.options import PartitionOptions
from py_assetwheel.utils.mulberry_prng import Mulberry32PRNG

RADIUS = 200.0


@pytest.fixture
def options():
    return PartitionOptions(disk_radius=RADIUS)


@pytest.fixture
def wedge_cell(options):
    """Cell of the first group of a three group partition."""
    partition = partition_groups(["A", "B", "C"], options)
    return partition.cells["A"]


def single_group(amounts, prices=None):
    return build_groups({"A": amounts}, prices={"A": prices} if prices else None)[0]


class TestSampleItemSeed:
    """Test item seed placement."""

    def test_seed_inside_cell(self, options, wedge_cell):
        prng = Mulberry32PRNG(4)
        for _ in range(20):
            seed = sample_item_seed(prng, wedge_cell, wedge_cell.centroid, options)
            assert wedge_cell.contains(seed)

    def test_jittered_fallback(self):
        """Test that exhausted sampling jitters off the centroid."""
        options = PartitionOptions(disk_radius=RADIUS, point_sample_attempts=0)
        cell = Polygon(make_circle_polygon(RADIUS, 32))
        centroid = np.array([10.0, -5.0])
        prng = Mulberry32PRNG(17)

        first = sample_item_seed(prng, cell, centroid, options)
        second = sample_item_seed(prng, cell, centroid, options)

        for point in (first, second):
            distance = math.hypot(*(point - centroid))
            assert 0.5 - 1e-9 <= distance <= 2.5 + 1e-9
        assert not np.allclose(first, second)


class TestPartitionItems:
    """Test sub-cell assignment."""

    def test_empty_group(self, options, wedge_cell):
        group = single_group({"x": 1})
        group.items = []
        assert partition_items(group, wedge_cell, options) == []

    def test_single_item_takes_whole_cell(self, options, wedge_cell):
        """Test that a lone item owns the group cell."""
        cells = partition_items(single_group({"ETH": 2.0}), wedge_cell, options)

        assert len(cells) == 1
        assert cells[0].area == pytest.approx(wedge_cell.area, rel=1e-9)

    def test_cells_inside_group_cell(self, options, wedge_cell):
        """Test that every item vertex lies inside the group cell."""
        group = single_group({f"T{i}": 1.0 + i for i in range(6)})
        cells = partition_items(group, wedge_cell, options)

        for item in cells:
            assert item.polygon.is_convex()
            for vertex in item.polygon.points:
                assert point_inside(wedge_cell, vertex)

    def test_cells_tile_group_cell(self, options, wedge_cell):
        """Test that the item cells add up to the group cell."""
        group = single_group({f"T{i}": 1.0 for i in range(5)})
        cells = partition_items(group, wedge_cell, options)

        assert len(cells) == 5
        assert sum(item.area for item in cells) == pytest.approx(wedge_cell.area, rel=1e-6)

    def test_heaviest_item_gets_largest_cell(self, options, wedge_cell):
        """Test rank matching of weights and areas."""
        group = single_group(
            {"BIG": 1, "MID": 1, "SMALL": 1, "NONE": 1},
            prices={"BIG": 5000.0, "MID": 300.0, "SMALL": 7.0},
        )
        cells = partition_items(group, wedge_cell, options)

        assert [item.item_id for item in cells][0] == "BIG"
        weights = [item.visual_weight for item in cells]
        areas = [item.area for item in cells]
        assert weights == sorted(weights, reverse=True)
        assert areas == sorted(areas, reverse=True)

    def test_unpriced_item_uses_median(self, options, wedge_cell):
        group = single_group({"A1": 1, "A2": 1, "A3": 1}, prices={"A1": 10.0, "A2": 40.0})
        cells = {item.item_id: item for item in partition_items(group, wedge_cell, options)}

        assert cells["A3"].visual_weight == 40.0

    def test_unique_item_ids_and_color(self, options, wedge_cell):
        group = single_group({f"T{i}": 1.0 for i in range(4)})
        group.color = "#123456"
        cells = partition_items(group, wedge_cell, options)

        assert len({item.item_id for item in cells}) == len(cells)
        assert all(item.color == "#123456" for item in cells)
        assert all(item.group_id == "A" for item in cells)

    def test_deterministic(self, options, wedge_cell):
        group = single_group({f"T{i}": 1.0 for i in range(4)})
        a = partition_items(group, wedge_cell, options, group_index=2)
        b = partition_items(group, wedge_cell, options, group_index=2)

        for ca, cb in zip(a, b):
            np.testing.assert_array_equal(ca.polygon.points, cb.polygon.points)

    def test_centroid_inside_item_cell(self, options, wedge_cell):
        group = single_group({f"T{i}": 1.0 for i in range(3)})
        for item in partition_items(group, wedge_cell, options):
            assert item.polygon.contains(item.centroid)


def point_inside(cell, point):
    return cell.contains(point, tolerance=1e-6)
