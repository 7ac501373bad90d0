"""Layout option dataclasses with validated defaults."""

from dataclasses import dataclass
from typing import Optional

PLACEMENT_SEARCH = "search"
PLACEMENT_RADIAL = "radial"


def _require_positive(name: str, value: float) -> None:
    if not value > 0:
        raise ValueError(f"{name} must be positive, got {value}")


def _require_fraction(name: str, value: float) -> None:
    if not 0 <= value <= 1:
        raise ValueError(f"{name} must be within [0, 1], got {value}")


@dataclass
class PartitionOptions:
    """Options of the nested Voronoi (group cell -> item cell) layout."""

    # Disk
    disk_radius: float = 200.0
    circle_segments: int = 160  # vertices of the disk polygon
    bounds_scale: float = 2.0  # Voronoi extent as a multiple of the radius

    # Group seed search
    seed: int = 0
    seed_placement: str = PLACEMENT_SEARCH
    max_seed_search: int = 80  # trials
    coverage_threshold: float = 0.995  # early exit
    group_inset_rel: float = 0.06  # inward margin for group seeds
    group_min_distance_rel: float = 0.42  # min seed separation
    max_separation_attempts: int = 2000  # per seed
    radial_seed_rel: float = 0.45  # ring radius for radial placement

    # Item seeds
    point_sample_attempts: int = 1000
    fallback_jitter_min_rel: float = 0.0025
    fallback_jitter_span_rel: float = 0.01

    # Degeneracy cutoff
    min_cell_vertices: int = 3

    # Weight model
    fallback_floor: float = 5.0
    default_weight: float = 25.0

    def __post_init__(self):
        _require_positive("disk_radius", self.disk_radius)
        _require_positive("bounds_scale", self.bounds_scale)
        if self.bounds_scale <= 1:
            raise ValueError("bounds_scale must exceed 1 so the extent contains the disk")
        if self.circle_segments < 3:
            raise ValueError(f"circle_segments must be at least 3, got {self.circle_segments}")
        if self.min_cell_vertices < 3:
            raise ValueError(f"min_cell_vertices must be at least 3, got {self.min_cell_vertices}")
        if self.max_seed_search < 1:
            raise ValueError(f"max_seed_search must be at least 1, got {self.max_seed_search}")
        if self.seed_placement not in (PLACEMENT_SEARCH, PLACEMENT_RADIAL):
            raise ValueError(f"Unknown seed_placement: {self.seed_placement}")
        _require_fraction("coverage_threshold", self.coverage_threshold)
        _require_fraction("group_inset_rel", self.group_inset_rel)
        _require_fraction("radial_seed_rel", self.radial_seed_rel)


@dataclass
class PackingOptions:
    """Options of the force-directed circle packing layout."""

    disk_radius: float = 200.0
    seed: Optional[int] = None  # derived from the input when None

    # Radii
    min_radius: float = 27.0
    max_radius: float = 78.0
    target_area_fraction: float = 0.50

    # Initial placement
    anchor_ring_rel: float = 0.78
    jitter_rel: float = 0.10

    # Main relaxation
    iterations: int = 420
    repel_strength: float = 1.0
    anchor_strength: float = 0.020
    boundary_strength: float = 0.55
    damping: float = 0.86
    padding: float = 2.2
    boundary_margin: float = 2.0  # invisible outline sits this far inside the disk

    # Boundary contact and secondary relaxation
    reposition_epsilon: float = 1.0
    secondary_iterations: int = 120
    secondary_anchor_strength: float = 0.012
    secondary_boundary_strength: float = 0.65

    # Weight model
    fallback_floor: float = 5.0
    default_weight: float = 25.0

    def __post_init__(self):
        _require_positive("disk_radius", self.disk_radius)
        _require_positive("min_radius", self.min_radius)
        if self.min_radius > self.max_radius:
            raise ValueError(f"min_radius ({self.min_radius}) exceeds max_radius ({self.max_radius})")
        if self.max_radius > self.disk_radius:
            raise ValueError("max_radius cannot exceed disk_radius")
        _require_fraction("target_area_fraction", self.target_area_fraction)
        _require_fraction("anchor_ring_rel", self.anchor_ring_rel)
        _require_fraction("damping", self.damping)
        if self.jitter_rel < 0:
            raise ValueError(f"jitter_rel cannot be negative, got {self.jitter_rel}")
        if self.iterations < 0 or self.secondary_iterations < 0:
            raise ValueError("iteration counts cannot be negative")

    @property
    def container_radius(self) -> float:
        return self.disk_radius - self.boundary_margin
