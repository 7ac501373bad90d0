"""
First-level partition: one Voronoi cell per group, clipped to the disk.

Voronoi construction is sensitive to near-collinear or crowded seeds, which
can shrink a cell to nothing after clipping. The partitioner therefore
tries several seed layouts and keeps the one covering the most of the disk.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog

from ..utils.mulberry_prng import Mulberry32PRNG
from ..utils.random import GROUP_TRIAL_OFFSET, derive_prng
from ..utils.retry import bounded_retry
from .geometry import Polygon, make_circle_polygon, sample_point_in_circle
from .options import PLACEMENT_RADIAL, PartitionOptions
from .voronoi_cells import bounding_box_for_disk, build_voronoi_cells

logger = structlog.get_logger()


@dataclass
class GroupPartition:
    """Winning group cells of the seed search."""

    cells: Dict[str, Polygon] = field(default_factory=dict)
    seeds: Dict[str, np.ndarray] = field(default_factory=dict)
    coverage: float = 0.0
    trials: int = 0

    def label_anchor(self, group_id: str) -> Optional[np.ndarray]:
        """Centroid of the group's cell, where its label goes."""
        cell = self.cells.get(group_id)
        return None if cell is None else cell.centroid


def sample_group_seeds(prng: Mulberry32PRNG, n_groups: int, options: PartitionOptions) -> List[np.ndarray]:
    """
    Rejection-sample well separated seeds inside the disk.

    A seed that cannot be separated from the ones already accepted within the
    attempt budget is drawn without the separation constraint.

    Args:
        prng: Generator owned by this trial
        n_groups: Number of seeds to place
        options: Partition options

    Returns:
        List of [x, y] seeds
    """
    radius = options.disk_radius
    inset = radius * options.group_inset_rel
    min_dist = radius * options.group_min_distance_rel
    seeds: List[np.ndarray] = []

    def separated_sample():
        candidate = sample_point_in_circle(prng, radius, inset)
        for other in seeds:
            if math.hypot(candidate[0] - other[0], candidate[1] - other[1]) < min_dist:
                return None
        return candidate

    def unconstrained_sample():
        return sample_point_in_circle(prng, radius, inset)

    for _ in range(n_groups):
        seeds.append(
            bounded_retry(separated_sample, options.max_separation_attempts, unconstrained_sample, name="group_seed")
        )

    return seeds


def radial_group_seeds(n_groups: int, options: PartitionOptions) -> List[np.ndarray]:
    """Seeds evenly spaced on a ring, first one on the positive x axis."""
    ring = options.disk_radius * options.radial_seed_rel
    return [
        np.array([ring * math.cos(2 * math.pi * i / n_groups), ring * math.sin(2 * math.pi * i / n_groups)])
        for i in range(n_groups)
    ]


def clip_cells_to_disk(
    group_ids: Sequence[str], seeds: Sequence[np.ndarray], disk: np.ndarray, options: PartitionOptions
) -> Dict[str, Polygon]:
    """Voronoi cells of ``seeds`` intersected with the disk polygon."""
    bounds = bounding_box_for_disk(options.disk_radius, options.bounds_scale)
    raw_cells = build_voronoi_cells(seeds, bounds, options.min_cell_vertices)

    cells: Dict[str, Polygon] = {}
    for group_id, raw in zip(group_ids, raw_cells):
        if raw is None:
            continue
        clipped = raw.clip(disk, options.min_cell_vertices)
        if clipped is not None:
            cells[group_id] = clipped
    return cells


def coverage_of(cells: Dict[str, Polygon], disk_area: float) -> float:
    """Fraction of the disk covered by the cells."""
    if disk_area <= 0:
        return 0.0
    return sum(cell.area for cell in cells.values()) / disk_area


def partition_groups(group_ids: Sequence[str], options: Optional[PartitionOptions] = None) -> GroupPartition:
    """
    Partition the disk into one convex cell per group.

    Each trial seeds its own generator (``seed + trial``), so the winning
    layout only depends on the seed, the group count and the options.

    Args:
        group_ids: Group ids in display order
        options: Partition options

    Returns:
        GroupPartition holding the best-covering trial
    """
    options = options or PartitionOptions()
    group_ids = list(group_ids)
    n_groups = len(group_ids)
    if n_groups == 0:
        return GroupPartition()

    disk = make_circle_polygon(options.disk_radius, options.circle_segments)
    disk_area = math.pi * options.disk_radius ** 2

    if options.seed_placement == PLACEMENT_RADIAL:
        seeds = radial_group_seeds(n_groups, options)
        cells = clip_cells_to_disk(group_ids, seeds, disk, options)
        best = GroupPartition(
            cells=cells, seeds=dict(zip(group_ids, seeds)), coverage=coverage_of(cells, disk_area), trials=1
        )
        logger.info("Group partition complete", groups=n_groups, placement="radial", coverage=round(best.coverage, 5))
        return best

    best = GroupPartition(coverage=-1.0)
    trials = 0
    for trial in range(options.max_seed_search):
        trials += 1
        prng = derive_prng(options.seed, GROUP_TRIAL_OFFSET, trial)
        seeds = sample_group_seeds(prng, n_groups, options)
        cells = clip_cells_to_disk(group_ids, seeds, disk, options)
        coverage = coverage_of(cells, disk_area)

        if coverage > best.coverage:
            best = GroupPartition(cells=cells, seeds=dict(zip(group_ids, seeds)), coverage=coverage)
            if coverage >= options.coverage_threshold:
                break

    best.trials = trials
    if len(best.cells) < n_groups:
        logger.warning("Some groups received no cell", groups=n_groups, cells=len(best.cells))

    logger.info(
        "Group partition complete",
        groups=n_groups,
        placement="search",
        trials=trials,
        coverage=round(best.coverage, 5),
    )
    return best
