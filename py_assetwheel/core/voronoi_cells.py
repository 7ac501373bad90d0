"""Bounded Voronoi cells for a set of seeds, built on scipy's Qhull wrapper."""

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi

from .geometry import Bounds, Polygon, clip_convex_polygon, rectangle_polygon

logger = structlog.get_logger()


def bounding_box_for_disk(radius: float, scale: float = 2.0) -> Bounds:
    """Square extent comfortably containing the disk, used to bound cells."""
    extent = radius * scale
    return (-extent, -extent, extent, extent)


def get_mirrored_points(points: np.ndarray, bounds: Bounds) -> np.ndarray:
    """
    Mirror seeds across the four edges of the bounding rectangle.

    With the mirrored copies present every original seed gets a finite
    Voronoi region, and that region is exactly its cell inside the
    rectangle (the bisector with each mirror image is the rectangle edge).

    Args:
        points: (n, 2) seed coordinates, strictly inside ``bounds``
        bounds: (min_x, min_y, max_x, max_y)

    Returns:
        (5n, 2) array: the seeds followed by their four reflections
    """
    x0, y0, x1, y1 = bounds
    left = points.copy()
    left[:, 0] = 2 * x0 - points[:, 0]
    right = points.copy()
    right[:, 0] = 2 * x1 - points[:, 0]
    bottom = points.copy()
    bottom[:, 1] = 2 * y0 - points[:, 1]
    top = points.copy()
    top[:, 1] = 2 * y1 - points[:, 1]
    return np.vstack([points, left, right, bottom, top])


def _unique_seed_indices(seeds: np.ndarray) -> List[int]:
    """Indices of the first occurrence of every distinct seed."""
    seen: Dict[Tuple[float, float], int] = {}
    for i, (x, y) in enumerate(seeds):
        key = (float(x), float(y))
        if key not in seen:
            seen[key] = i
    return sorted(seen.values())


def _order_region(vertices: np.ndarray, seed: np.ndarray) -> np.ndarray:
    """Sort region vertices by angle around their (interior) seed."""
    angles = np.arctan2(vertices[:, 1] - seed[1], vertices[:, 0] - seed[0])
    return vertices[np.argsort(angles, kind="stable")]


def build_voronoi_cells(
    seeds: Sequence[Sequence[float]], bounds: Bounds, min_vertices: int = 3
) -> List[Optional[Polygon]]:
    """
    Compute each seed's Voronoi cell restricted to a bounding rectangle.

    Degenerate cells (fewer than ``min_vertices`` vertices) come back as None.
    Repeated seeds only give a cell to their first occurrence. A Qhull
    failure is logged and yields no cells rather than raising.

    Args:
        seeds: [x, y] seed coordinates
        bounds: (min_x, min_y, max_x, max_y) large enough to contain all seeds
        min_vertices: Degeneracy cutoff

    Returns:
        List aligned with ``seeds`` of CCW Polygons or None
    """
    seeds = np.asarray(seeds, dtype=float).reshape(-1, 2)
    n_seeds = len(seeds)
    cells: List[Optional[Polygon]] = [None] * n_seeds
    if n_seeds == 0:
        return cells

    keep = _unique_seed_indices(seeds)
    if len(keep) < n_seeds:
        logger.debug("Dropping coincident seeds", seeds=n_seeds, unique=len(keep))

    unique_seeds = seeds[keep]
    all_points = get_mirrored_points(unique_seeds, bounds)

    try:
        vor = Voronoi(all_points)
    except (QhullError, ValueError) as exc:
        logger.warning("Voronoi construction failed", seeds=n_seeds, error=str(exc))
        return cells

    box = rectangle_polygon(bounds)
    for k, seed_idx in enumerate(keep):
        region_idx = vor.point_region[k]
        if region_idx == -1:
            continue

        region = vor.regions[region_idx]
        if not region or -1 in region or len(region) < min_vertices:
            continue

        ordered = _order_region(vor.vertices[region], unique_seeds[k])
        clipped = clip_convex_polygon(ordered, box, min_vertices)
        cells[seed_idx] = Polygon.from_points(clipped, min_vertices)

    dropped = sum(1 for cell in cells if cell is None)
    if dropped:
        logger.debug("Degenerate Voronoi cells dropped", dropped=dropped, seeds=n_seeds)

    return cells
