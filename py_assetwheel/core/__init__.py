"""
Core layout functionality.
"""

from .circle_packing import CircleNode, PackingLayout, pack_circles
from .geometry import Polygon
from .group_partition import GroupPartition, partition_groups
from .holdings import Group, WeightedItem, build_groups
from .item_partition import ItemCell, partition_items
from .layout import GroupLabel, PartitionLayout, packing_layout, partition_layout
from .options import PackingOptions, PartitionOptions
from .voronoi_cells import build_voronoi_cells
from .weights import compute_visual_weights

__all__ = ['CircleNode', 'PackingLayout', 'pack_circles', 'Polygon',
           'GroupPartition', 'partition_groups', 'Group', 'WeightedItem', 'build_groups',
           'ItemCell', 'partition_items', 'GroupLabel', 'PartitionLayout',
           'packing_layout', 'partition_layout', 'PackingOptions', 'PartitionOptions',
           'build_voronoi_cells', 'compute_visual_weights']
