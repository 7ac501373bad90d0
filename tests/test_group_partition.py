"""Tests for the first-level (group) Voronoi partition."""

import math

import numpy as np
import pytest

from py_assetwheel.core.geometry import make_circle_polygon, point_in_convex, polygon_area
from py_assetwheel.core.group_partition import (
    partition_groups,
    radial_group_seeds,
    sample_group_seeds,
)
from py_assetwheel.core.options import PLACEMENT_RADIAL, PartitionOptions
from py_assetwheel.utils.mulberry_prng import Mulberry32PRNG

RADIUS = 200.0


@pytest.fixture
def options():
    return PartitionOptions(disk_radius=RADIUS)


def group_ids(n):
    return [f"chain{i}" for i in range(n)]


class TestSeedSampling:
    """Test group seed placement."""

    def test_seeds_inside_inset_disk(self, options):
        """Test that seeds respect the inward margin."""
        seeds = sample_group_seeds(Mulberry32PRNG(5), 6, options)
        limit = RADIUS * (1 - options.group_inset_rel)

        assert len(seeds) == 6
        for x, y in seeds:
            assert math.hypot(x, y) <= limit + 1e-9

    def test_seeds_separated_when_possible(self, options):
        """Test the minimum distance between a few seeds."""
        seeds = sample_group_seeds(Mulberry32PRNG(8), 3, options)
        min_dist = RADIUS * options.group_min_distance_rel

        for i in range(len(seeds)):
            for j in range(i + 1, len(seeds)):
                assert np.hypot(*(seeds[i] - seeds[j])) >= min_dist

    def test_impossible_separation_falls_back(self):
        """Test that crowded seeds still come back, one per group."""
        options = PartitionOptions(disk_radius=RADIUS, group_min_distance_rel=0.9, max_separation_attempts=50)
        seeds = sample_group_seeds(Mulberry32PRNG(1), 12, options)

        assert len(seeds) == 12

    def test_radial_seeds(self, options):
        """Test ring placement."""
        seeds = radial_group_seeds(4, options)
        ring = RADIUS * options.radial_seed_rel

        np.testing.assert_allclose(seeds[0], [ring, 0.0], atol=1e-9)
        np.testing.assert_allclose(seeds[2], [-ring, 0.0], atol=1e-9)


class TestPartitionGroups:
    """Test the group cell partition."""

    def test_empty(self, options):
        result = partition_groups([], options)
        assert result.cells == {}
        assert result.coverage == 0.0

    @pytest.mark.parametrize("n_groups", [1, 2, 3, 5, 8])
    def test_coverage(self, options, n_groups):
        """Test that group cells cover the disk."""
        result = partition_groups(group_ids(n_groups), options)

        assert len(result.cells) == n_groups
        assert result.coverage >= 0.99

    @pytest.mark.parametrize("n_groups", [2, 4, 6])
    def test_cells_do_not_overlap(self, options, n_groups):
        """Test that the cell areas add up to the disk polygon, not more."""
        result = partition_groups(group_ids(n_groups), options)
        disk_area = polygon_area(make_circle_polygon(RADIUS, options.circle_segments))

        assert sum(cell.area for cell in result.cells.values()) == pytest.approx(disk_area, rel=1e-6)

    def test_cells_inside_disk_and_convex(self, options):
        """Test polygon invariants of every group cell."""
        result = partition_groups(group_ids(5), options)
        disk = make_circle_polygon(RADIUS, options.circle_segments)

        for cell in result.cells.values():
            assert cell.is_convex()
            for vertex in cell.points:
                assert point_in_convex(disk, vertex, tolerance=1e-6)

    def test_single_group_fills_disk(self, options):
        """Test that one group owns the whole disk."""
        result = partition_groups(["Ethereum"], options)

        assert result.cells["Ethereum"].area == pytest.approx(math.pi * RADIUS ** 2, rel=1e-3)
        np.testing.assert_allclose(result.label_anchor("Ethereum"), [0.0, 0.0], atol=1e-6)

    def test_deterministic(self, options):
        """Test that same seed gives identical cells."""
        a = partition_groups(group_ids(4), options)
        b = partition_groups(group_ids(4), options)

        assert a.coverage == b.coverage
        for gid in a.cells:
            np.testing.assert_array_equal(a.cells[gid].points, b.cells[gid].points)

    def test_seed_changes_layout(self):
        """Test that a different seed moves the group seeds."""
        a = partition_groups(group_ids(3), PartitionOptions(seed=1))
        b = partition_groups(group_ids(3), PartitionOptions(seed=2))

        assert not np.allclose(a.seeds["chain0"], b.seeds["chain0"])

    def test_early_exit(self, options):
        """Test that a covering first trial stops the search."""
        result = partition_groups(group_ids(3), options)
        assert result.trials == 1

    def test_radial_two_groups_symmetric(self):
        """Test that two radial groups get equal halves."""
        options = PartitionOptions(disk_radius=RADIUS, seed_placement=PLACEMENT_RADIAL)
        result = partition_groups(["A", "B"], options)
        area_a = result.cells["A"].area
        area_b = result.cells["B"].area

        assert abs(area_a - area_b) / max(area_a, area_b) < 0.05
        assert result.trials == 1

    def test_label_anchor_missing_group(self, options):
        result = partition_groups(["A"], options)
        assert result.label_anchor("missing") is None
