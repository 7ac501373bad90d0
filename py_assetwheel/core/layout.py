"""
Entry points turning raw holdings into either layout.

Both layouts are recomputed from scratch on every call; the only state that
carries over between calls is the seed the caller passes in.
"""

from dataclasses import dataclass, field
from typing import List, Mapping, Optional

import numpy as np
import structlog

from .circle_packing import PackingLayout, pack_circles
from .group_partition import partition_groups
from .holdings import Holdings, Prices, build_groups
from .item_partition import ItemCell, partition_items
from .options import PackingOptions, PartitionOptions

logger = structlog.get_logger()


@dataclass
class GroupLabel:
    """Label anchor of a group: the centroid of its cell."""

    group_id: str
    anchor: np.ndarray
    color: str


@dataclass
class PartitionLayout:
    """Nested Voronoi layout: item cells plus group labels."""

    items: List[ItemCell] = field(default_factory=list)
    labels: List[GroupLabel] = field(default_factory=list)
    group_cells: dict = field(default_factory=dict)
    coverage: float = 0.0


def partition_layout(
    holdings: Holdings,
    prices: Optional[Prices] = None,
    colors: Optional[Mapping[str, str]] = None,
    options: Optional[PartitionOptions] = None,
) -> PartitionLayout:
    """
    Build the nested Voronoi layout.

    Args:
        holdings: group id -> item id -> amount
        prices: Optional group id -> item id -> dollar value
        colors: Optional group id -> color tag
        options: Partition options

    Returns:
        PartitionLayout; empty when nothing has a positive amount
    """
    options = options or PartitionOptions()
    groups = build_groups(holdings, prices, colors)
    if not groups:
        logger.info("Nothing to partition")
        return PartitionLayout()

    partition = partition_groups([group.id for group in groups], options)

    layout = PartitionLayout(group_cells=dict(partition.cells), coverage=partition.coverage)
    for index, group in enumerate(groups):
        cell = partition.cells.get(group.id)
        if cell is None:
            continue
        layout.labels.append(GroupLabel(group_id=group.id, anchor=cell.centroid, color=group.color))
        layout.items.extend(partition_items(group, cell, options, group_index=index))

    logger.info(
        "Partition layout complete",
        groups=len(groups),
        items=len(layout.items),
        coverage=round(layout.coverage, 5),
    )
    return layout


def packing_layout(
    holdings: Holdings,
    prices: Optional[Prices] = None,
    colors: Optional[Mapping[str, str]] = None,
    options: Optional[PackingOptions] = None,
) -> PackingLayout:
    """Build the circle packing layout for raw holdings."""
    options = options or PackingOptions()
    groups = build_groups(holdings, prices, colors)
    return pack_circles(groups, options)
