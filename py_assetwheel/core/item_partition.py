"""
Second-level partition: item cells inside one group cell.

Seed placement is random, so the raw sub-cell sizes carry no meaning. The
sub-cells are therefore ranked by area and handed out by rank of visual
weight: the heaviest item always receives the largest sub-cell.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from ..utils.mulberry_prng import Mulberry32PRNG
from ..utils.random import ITEM_SEED_OFFSET, derive_prng
from ..utils.retry import bounded_retry
from .geometry import Polygon
from .holdings import Group
from .options import PartitionOptions
from .voronoi_cells import bounding_box_for_disk, build_voronoi_cells
from .weights import compute_visual_weights

logger = structlog.get_logger()


@dataclass
class ItemCell:
    """Sub-cell assigned to one item."""

    group_id: str
    item_id: str
    polygon: Polygon
    centroid: np.ndarray
    color: str
    raw_amount: float
    visual_weight: float

    @property
    def area(self) -> float:
        return self.polygon.area


def sample_item_seed(
    prng: Mulberry32PRNG, cell: Polygon, centroid: np.ndarray, options: PartitionOptions
) -> np.ndarray:
    """
    Rejection-sample a point of the group cell from its bounding box.

    On exhaustion the point is jittered off the group centroid at a random
    angle and distance, so two fallbacks never coincide.
    """
    min_x, min_y, max_x, max_y = cell.bounds

    def inside_sample():
        candidate = np.array([prng.uniform(min_x, max_x), prng.uniform(min_y, max_y)])
        return candidate if cell.contains(candidate) else None

    def jittered_centroid():
        angle = prng.random() * 2 * math.pi
        distance = options.disk_radius * (
            options.fallback_jitter_min_rel + prng.random() * options.fallback_jitter_span_rel
        )
        return np.array([centroid[0] + math.cos(angle) * distance, centroid[1] + math.sin(angle) * distance])

    return bounded_retry(inside_sample, options.point_sample_attempts, jittered_centroid, name="item_seed")


def partition_items(
    group: Group, cell: Polygon, options: Optional[PartitionOptions] = None, group_index: int = 0
) -> List[ItemCell]:
    """
    Split a group cell into one sub-cell per item, sized by weight rank.

    Args:
        group: Group whose items are laid out
        cell: Convex cell of the group
        options: Partition options
        group_index: Position of the group, selects its derived generator

    Returns:
        Item cells ordered by descending visual weight. Items beyond the
        number of usable sub-cells are left out.
    """
    options = options or PartitionOptions()
    if not group.items:
        return []

    centroid = cell.centroid
    prng = derive_prng(options.seed, ITEM_SEED_OFFSET, group_index)
    seeds = [sample_item_seed(prng, cell, centroid, options) for _ in group.items]

    bounds = bounding_box_for_disk(options.disk_radius, options.bounds_scale)
    sub_cells = []
    for raw in build_voronoi_cells(seeds, bounds, options.min_cell_vertices):
        if raw is None:
            continue
        clipped = raw.clip(cell.points, options.min_cell_vertices)
        if clipped is not None:
            sub_cells.append(clipped)

    sub_cells.sort(key=lambda poly: poly.area, reverse=True)
    weighted = compute_visual_weights(group.items, options.fallback_floor, options.default_weight)
    weighted.sort(key=lambda item: item.visual_weight, reverse=True)

    n_assign = min(len(weighted), len(sub_cells))
    if n_assign < len(weighted):
        logger.debug(
            "Items without a usable sub-cell omitted",
            group=group.id,
            items=len(weighted),
            cells=len(sub_cells),
        )

    return [
        ItemCell(
            group_id=group.id,
            item_id=item.item_id,
            polygon=poly,
            centroid=poly.centroid,
            color=group.color,
            raw_amount=item.raw_amount,
            visual_weight=item.visual_weight,
        )
        for item, poly in zip(weighted[:n_assign], sub_cells[:n_assign])
    ]
