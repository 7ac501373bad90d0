"""
Convex polygon geometry kernel.

All polygons handled by the layouts are convex: Voronoi cells are convex, the
disk polygon is convex, and the intersection of convex polygons stays convex.
That is what lets clipping use Sutherland-Hodgman and containment use plain
half-plane tests.
"""

import math
from typing import Iterable, Optional, Tuple, Union

import numpy as np

Bounds = Tuple[float, float, float, float]
PointLike = Union[np.ndarray, Tuple[float, float], list]

AREA_EPSILON = 1e-9
PARALLEL_EPSILON = 1e-12


def as_points(poly) -> np.ndarray:
    """Coerce a Polygon or point sequence to an (n, 2) float array."""
    if isinstance(poly, Polygon):
        return poly.points
    pts = np.asarray(poly, dtype=float)
    if pts.size == 0:
        return np.zeros((0, 2), dtype=float)
    return pts.reshape(-1, 2)


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


def signed_area(poly) -> float:
    """Shoelace signed area; positive for counter-clockwise winding."""
    pts = as_points(poly)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    x2 = np.roll(x, -1)
    y2 = np.roll(y, -1)
    return float(np.sum(x * y2 - x2 * y) / 2.0)


def polygon_area(poly) -> float:
    """Absolute polygon area."""
    return abs(signed_area(poly))


def ensure_ccw(poly) -> np.ndarray:
    """Return the vertices in counter-clockwise order (reversed if area < 0)."""
    pts = as_points(poly)
    if signed_area(pts) < 0:
        return pts[::-1].copy()
    return pts


def polygon_centroid(poly) -> np.ndarray:
    """
    Compute the centroid of a polygon.

    Uses the area-weighted vertex formula. Falls back to the mean of the
    vertices when the polygon is (nearly) degenerate.

    Args:
        poly: Polygon or sequence of [x, y] vertices

    Returns:
        [x, y] centroid coordinates
    """
    pts = as_points(poly)
    n = len(pts)
    if n == 0:
        return np.zeros(2)
    if n == 1:
        return pts[0].copy()

    area = signed_area(pts)
    if abs(area) < AREA_EPSILON:
        return np.mean(pts, axis=0)

    x = pts[:, 0]
    y = pts[:, 1]
    x2 = np.roll(x, -1)
    y2 = np.roll(y, -1)
    cross = x * y2 - x2 * y
    cx = float(np.sum((x + x2) * cross)) / (6.0 * area)
    cy = float(np.sum((y + y2) * cross)) / (6.0 * area)
    return np.array([cx, cy])


def polygon_bounds(poly) -> Bounds:
    """Axis-aligned bounding box as (min_x, min_y, max_x, max_y)."""
    pts = as_points(poly)
    if len(pts) == 0:
        return (0.0, 0.0, 0.0, 0.0)
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return (float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def _is_inside(p, a, b, tolerance: float = 0.0) -> bool:
    # left of (or on) the directed edge a -> b
    return _cross(b[0] - a[0], b[1] - a[1], p[0] - a[0], p[1] - a[1]) >= -tolerance


def line_intersection(p, q, a, b) -> np.ndarray:
    """
    Intersection of the lines p->q and a->b.

    Returns q itself when the lines are (nearly) parallel.
    """
    r1x, r1y = q[0] - p[0], q[1] - p[1]
    r2x, r2y = b[0] - a[0], b[1] - a[1]

    denom = _cross(r1x, r1y, r2x, r2y)
    if abs(denom) < PARALLEL_EPSILON:
        return np.array([q[0], q[1]], dtype=float)

    t = _cross(a[0] - p[0], a[1] - p[1], r2x, r2y) / denom
    return np.array([p[0] + t * r1x, p[1] + t * r1y])


def clip_convex_polygon(subject, clipper, min_vertices: int = 3) -> np.ndarray:
    """
    Sutherland-Hodgman clipping of a convex polygon by a convex clipper.

    Args:
        subject: Polygon to clip
        clipper: Convex clip polygon (any winding)
        min_vertices: Result is dropped as soon as fewer vertices remain

    Returns:
        (n, 2) array of the clipped polygon, empty when degenerate
    """
    output = as_points(subject)
    clip = ensure_ccw(clipper)
    empty = np.zeros((0, 2), dtype=float)
    if len(output) < min_vertices or len(clip) < 3:
        return empty

    n_clip = len(clip)
    for i in range(n_clip):
        a = clip[i]
        b = clip[(i + 1) % n_clip]
        subject_pts = output
        clipped = []

        n_subject = len(subject_pts)
        for j in range(n_subject):
            p = subject_pts[j]
            q = subject_pts[(j + 1) % n_subject]
            p_in = _is_inside(p, a, b)
            q_in = _is_inside(q, a, b)

            if p_in and q_in:
                clipped.append(q)
            elif p_in:
                clipped.append(line_intersection(p, q, a, b))
            elif q_in:
                clipped.append(line_intersection(p, q, a, b))
                clipped.append(q)

        if len(clipped) < min_vertices:
            return empty
        output = np.asarray(clipped, dtype=float)

    return output


def point_in_convex(poly, point, tolerance: float = 0.0) -> bool:
    """
    Half-plane containment test against every edge of a convex polygon.

    Points on the boundary count as inside. ``tolerance`` widens every edge
    outward by the given cross-product amount.
    """
    pts = ensure_ccw(poly)
    n = len(pts)
    if n < 3:
        return False
    for i in range(n):
        if not _is_inside(point, pts[i], pts[(i + 1) % n], tolerance):
            return False
    return True


def make_circle_polygon(radius: float, segments: int) -> np.ndarray:
    """Approximate a circle centered on the origin with a CCW N-gon."""
    angles = 2.0 * np.pi * np.arange(segments) / segments
    return np.column_stack([radius * np.cos(angles), radius * np.sin(angles)])


def rectangle_polygon(bounds: Bounds) -> np.ndarray:
    """CCW rectangle for (min_x, min_y, max_x, max_y)."""
    x0, y0, x1, y1 = bounds
    return np.array([[x0, y0], [x1, y0], [x1, y1], [x0, y1]], dtype=float)


def is_convex(poly, tolerance: float = 1e-9) -> bool:
    """True when every turn of the polygon has the same orientation."""
    pts = as_points(poly)
    n = len(pts)
    if n < 3:
        return False
    sign = 0
    for i in range(n):
        a = pts[i]
        b = pts[(i + 1) % n]
        c = pts[(i + 2) % n]
        turn = _cross(b[0] - a[0], b[1] - a[1], c[0] - b[0], c[1] - b[1])
        if abs(turn) <= tolerance:
            continue
        current = 1 if turn > 0 else -1
        if sign == 0:
            sign = current
        elif current != sign:
            return False
    return True


def sample_point_in_circle(prng, radius: float, inset: float = 0.0) -> np.ndarray:
    """Uniform sample in the disk of radius ``radius - inset`` around the origin."""
    rr = max(1e-6, radius - inset)
    theta = prng.random() * 2.0 * math.pi
    rad = rr * math.sqrt(prng.random())
    return np.array([rad * math.cos(theta), rad * math.sin(theta)])


def polygon_to_path(poly) -> str:
    """Serialize a polygon as a closed path string ("M x y L x y ... Z")."""
    pts = as_points(poly)
    if len(pts) < 3:
        return ""
    parts = [f"M {pts[0][0]} {pts[0][1]}"]
    parts.extend(f"L {x} {y}" for x, y in pts[1:])
    parts.append("Z")
    return " ".join(parts)


class Polygon:
    """
    Ordered, implicitly closed sequence of at least three points.

    Instances built through ``Polygon.from_points`` are normalised to
    counter-clockwise winding. Convexity is checked by ``is_convex`` rather
    than assumed.
    """

    __slots__ = ("points",)

    def __init__(self, points: Iterable[PointLike]):
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(pts) < 3:
            raise ValueError(f"Polygon needs at least 3 vertices, got {len(pts)}")
        if not np.all(np.isfinite(pts)):
            raise ValueError("Polygon vertices must be finite")
        self.points = pts

    @classmethod
    def from_points(cls, points, min_vertices: int = 3) -> Optional["Polygon"]:
        """Build a CCW polygon, or None when the input is degenerate."""
        pts = as_points(points)
        if len(pts) < max(3, min_vertices) or not np.all(np.isfinite(pts)):
            return None
        return cls(ensure_ccw(pts))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __repr__(self) -> str:
        return f"Polygon(n={len(self.points)}, area={self.area:.4g})"

    @property
    def signed_area(self) -> float:
        return signed_area(self.points)

    @property
    def area(self) -> float:
        return polygon_area(self.points)

    @property
    def centroid(self) -> np.ndarray:
        return polygon_centroid(self.points)

    @property
    def bounds(self) -> Bounds:
        return polygon_bounds(self.points)

    def ccw(self) -> "Polygon":
        return Polygon(ensure_ccw(self.points))

    def is_convex(self, tolerance: float = 1e-9) -> bool:
        return is_convex(self.points, tolerance)

    def contains(self, point, tolerance: float = 0.0) -> bool:
        return point_in_convex(self.points, point, tolerance)

    def clip(self, clipper, min_vertices: int = 3) -> Optional["Polygon"]:
        """Intersect with a convex clipper; None when nothing usable is left."""
        return Polygon.from_points(clip_convex_polygon(self.points, clipper, min_vertices), min_vertices)

    def to_list(self):
        return [[float(x), float(y)] for x, y in self.points]
