"""
Force-directed circle packing: the alternative "bubble" layout.

Every item becomes a circle whose area is proportional to its visual
weight. Circles of one group are pulled towards a shared anchor on a ring,
pushed apart where they overlap and pushed back when they cross the
outline. The result is a best-effort relaxation: non-overlap and
containment hold only approximately, within a few units of padding.

Steps:
1. Radii from a global area scale, clamped to [min_radius, max_radius]
2. Group anchors evenly spaced on a ring, circles start near their anchor
3. Main relaxation
4. The outermost circle is moved onto the outline, then a short, weaker
   relaxation repairs the overlap that move introduced
5. One pointer target (label connector host) per group
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog

from ..utils.random import PACKING_JITTER_OFFSET, derive_layout_seed, derive_prng
from .holdings import Group
from .options import PackingOptions
from .weights import compute_visual_weights

logger = structlog.get_logger()

GOLDEN_ANGLE = 2.399963229728653
MIN_DISTANCE = 1e-6


@dataclass
class CircleNode:
    """One packed circle."""

    id: str
    group_id: str
    item_id: str
    radius: float
    position: np.ndarray
    anchor_position: np.ndarray
    raw_amount: float
    visual_weight: float
    color: str

    @property
    def reach(self) -> float:
        """Distance from the disk center to the far edge of the circle."""
        return float(math.hypot(self.position[0], self.position[1]) + self.radius)


@dataclass
class PackingLayout:
    """Packed circles plus one pointer target per group."""

    nodes: List[CircleNode] = field(default_factory=list)
    pointer_targets: Dict[str, CircleNode] = field(default_factory=dict)
    anchors: Dict[str, np.ndarray] = field(default_factory=dict)
    seed: Optional[int] = None


def area_scale(weights: Sequence[float], disk_radius: float, target_area_fraction: float) -> float:
    """Scale k such that sum(k * w) equals the target share of the disk area."""
    total = float(sum(weights))
    if total <= 0:
        return 1.0
    return target_area_fraction * math.pi * disk_radius ** 2 / total


def circle_radius(weight: float, k: float, min_radius: float, max_radius: float) -> float:
    """Radius of a circle of area k * weight, clamped to [min_radius, max_radius]."""
    raw = math.sqrt(max(k * weight, 0.0) / math.pi)
    return min(max(raw, min_radius), max_radius)


def ring_anchors(group_ids: Sequence[str], ring_radius: float) -> Dict[str, np.ndarray]:
    """Anchors evenly spaced on a ring, the first one at the top (-pi/2)."""
    n = len(group_ids)
    anchors = {}
    for i, group_id in enumerate(group_ids):
        theta = -math.pi / 2 + 2 * math.pi * i / n
        anchors[group_id] = np.array([ring_radius * math.cos(theta), ring_radius * math.sin(theta)])
    return anchors


def _coincident_directions(n: int) -> np.ndarray:
    """
    Fixed unit vectors u[i, j] = -u[j, i] used for pairs sitting on top of
    each other, where the separation direction is otherwise undefined.
    """
    idx = np.arange(n)
    lo = np.minimum.outer(idx, idx) + 1
    hi = np.maximum.outer(idx, idx) + 1
    angle = GOLDEN_ANGLE * lo * hi
    sign = np.where(idx[:, None] < idx[None, :], 1.0, -1.0)
    return np.stack([np.cos(angle) * sign, np.sin(angle) * sign], axis=-1)


def relax(
    positions: np.ndarray,
    radii: np.ndarray,
    anchors: np.ndarray,
    container_radius: float,
    iterations: int,
    repel_strength: float,
    anchor_strength: float,
    boundary_strength: float,
    damping: float,
    padding: float,
) -> np.ndarray:
    """
    Run damped spring relaxation.

    Args:
        positions: (n, 2) initial circle centers
        radii: (n,) circle radii
        anchors: (n, 2) anchor of every circle
        container_radius: Radius of the outline circles are pushed back into
        iterations: Number of steps
        repel_strength: Scale of the pairwise overlap push
        anchor_strength: Spring constant towards the anchor
        boundary_strength: Spring constant back inside the outline
        damping: Velocity retained per step
        padding: Extra gap wanted between circles and the outline

    Returns:
        (n, 2) relaxed centers
    """
    pos = np.array(positions, dtype=float, copy=True)
    n = len(pos)
    if n == 0:
        return pos

    radii = np.asarray(radii, dtype=float)
    anchors = np.asarray(anchors, dtype=float)
    velocity = np.zeros_like(pos)
    min_sep = radii[:, None] + radii[None, :] + padding
    not_self = ~np.eye(n, dtype=bool)
    fixed_dirs = _coincident_directions(n)
    max_center = container_radius - radii - padding

    for _ in range(iterations):
        # pairwise overlap: delta[i, j] points from i to j
        delta = pos[None, :, :] - pos[:, None, :]
        dist = np.hypot(delta[..., 0], delta[..., 1])
        coincident = dist < MIN_DISTANCE
        safe = np.where(coincident, 1.0, dist)
        unit = np.where(coincident[..., None], fixed_dirs, delta / safe[..., None])

        overlap = np.where((dist < min_sep) & not_self, min_sep - dist, 0.0)
        push = overlap * 0.5 * repel_strength
        velocity -= np.sum(unit * push[..., None], axis=1)

        # anchor spring
        velocity += (anchors - pos) * anchor_strength

        # outline spring
        d0 = np.maximum(np.hypot(pos[:, 0], pos[:, 1]), MIN_DISTANCE)
        excess = np.maximum(d0 - max_center, 0.0)
        velocity -= (pos / d0[:, None]) * (excess * boundary_strength)[:, None]

        velocity *= damping
        pos += velocity

    return pos


def _reach(positions: np.ndarray, radii: np.ndarray) -> np.ndarray:
    return np.hypot(positions[:, 0], positions[:, 1]) + radii


def move_to_outline(positions: np.ndarray, radii: np.ndarray, container_radius: float, epsilon: float) -> int:
    """
    Push the circle reaching furthest out onto the outline, in place.

    Returns:
        Index of the moved circle
    """
    idx = int(np.argmax(_reach(positions, radii)))
    x, y = positions[idx]
    d = math.hypot(x, y)
    ux, uy = (x / d, y / d) if d > MIN_DISTANCE else (1.0, 0.0)
    desired = container_radius - radii[idx] - epsilon
    positions[idx] = (ux * desired, uy * desired)
    return idx


def select_pointer_targets(nodes: Sequence[CircleNode], group_ids: Sequence[str]) -> Dict[str, CircleNode]:
    """Per group, the member reaching closest to the outline."""
    targets: Dict[str, CircleNode] = {}
    for group_id in group_ids:
        best: Optional[CircleNode] = None
        for node in nodes:
            if node.group_id != group_id:
                continue
            if best is None or node.reach > best.reach:
                best = node
        if best is not None:
            targets[group_id] = best
    return targets


def pack_circles(groups: Sequence[Group], options: Optional[PackingOptions] = None) -> PackingLayout:
    """
    Lay out every item as a weight-sized circle clustered by group.

    Args:
        groups: Groups in display order
        options: Packing options; a None seed is derived from the input

    Returns:
        PackingLayout with nodes ordered by descending radius
    """
    options = options or PackingOptions()
    groups = [group for group in groups if group.items]
    if not groups:
        return PackingLayout(seed=options.seed)

    group_ids = [group.id for group in groups]
    seed = options.seed
    if seed is None:
        seed = derive_layout_seed(group_ids, [len(group.items) for group in groups])
    prng = derive_prng(seed, PACKING_JITTER_OFFSET)

    weighted = []
    for group in groups:
        for item in compute_visual_weights(group.items, options.fallback_floor, options.default_weight):
            weighted.append((group, item))

    k = area_scale([item.visual_weight for _, item in weighted], options.disk_radius, options.target_area_fraction)
    anchors = ring_anchors(group_ids, options.disk_radius * options.anchor_ring_rel)
    jitter_span = options.disk_radius * options.jitter_rel

    nodes: List[CircleNode] = []
    for idx, (group, item) in enumerate(weighted):
        anchor = anchors[group.id]
        jx = (prng.random() - 0.5) * jitter_span
        jy = (prng.random() - 0.5) * jitter_span
        nodes.append(
            CircleNode(
                id=f"{group.id}::{item.item_id}::{idx}",
                group_id=group.id,
                item_id=item.item_id,
                radius=circle_radius(item.visual_weight, k, options.min_radius, options.max_radius),
                position=anchor + np.array([jx, jy]),
                anchor_position=anchor.copy(),
                raw_amount=item.raw_amount,
                visual_weight=item.visual_weight,
                color=group.color,
            )
        )

    nodes.sort(key=lambda node: node.radius, reverse=True)
    radii = np.array([node.radius for node in nodes])
    anchor_arr = np.array([node.anchor_position for node in nodes])
    positions = np.array([node.position for node in nodes])
    container = options.container_radius

    positions = relax(
        positions,
        radii,
        anchor_arr,
        container,
        options.iterations,
        options.repel_strength,
        options.anchor_strength,
        options.boundary_strength,
        options.damping,
        options.padding,
    )

    moved = move_to_outline(positions, radii, container, options.reposition_epsilon)

    positions = relax(
        positions,
        radii,
        anchor_arr,
        container,
        options.secondary_iterations,
        options.repel_strength,
        options.secondary_anchor_strength,
        options.secondary_boundary_strength,
        options.damping,
        options.padding,
    )

    for node, position in zip(nodes, positions):
        node.position = position.copy()

    layout = PackingLayout(
        nodes=nodes,
        pointer_targets=select_pointer_targets(nodes, group_ids),
        anchors=anchors,
        seed=seed,
    )

    logger.info(
        "Circle packing complete",
        circles=len(nodes),
        groups=len(group_ids),
        seed=seed,
        moved_to_outline=nodes[moved].id,
        max_reach=round(float(_reach(positions, radii).max()), 3),
    )
    return layout
