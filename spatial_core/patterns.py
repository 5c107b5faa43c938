"""
Point-distribution strategies for flat item collections.

Each pattern is a function ``(items, radius, config, rng) -> positions`` that
assigns every item exactly one (x, y, z) coordinate. Patterns that add organic
variation draw from an injectable `numpy.random.Generator`; pass a seeded one
(``np.random.default_rng(7)``) for reproducible output.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Sequence, Tuple

import numpy as np

from .config import LayoutConfig
from .connections import FlatItem
from .enums import LayoutPattern

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]
Positions = Dict[str, Vec3]
PatternFn = Callable[[Sequence[FlatItem], float, LayoutConfig, np.random.Generator], List[Vec3]]

GOLDEN_RATIO = (1 + math.sqrt(5)) / 2


def _jitter(rng: np.random.Generator, scale: float) -> float:
    return (float(rng.random()) - 0.5) * scale


def constellation(items: Sequence[FlatItem], radius: float, config: LayoutConfig, rng: np.random.Generator) -> List[Vec3]:
    """Equal-area sphere spacing, perturbed by up to ±30% of the radius."""
    n = len(items)
    jitter = config.constellation_jitter * radius
    result: List[Vec3] = []
    for i in range(n):
        phi = math.acos(-1 + (2 * i) / n)
        theta = math.sqrt(n * math.pi) * phi
        x = radius * math.cos(theta) * math.sin(phi) * (0.8 + float(rng.random()) * 0.4) + _jitter(rng, jitter)
        y = radius * math.sin(theta) * math.sin(phi) * 0.5 + _jitter(rng, jitter)
        z = radius * math.cos(phi) * (0.8 + float(rng.random()) * 0.4) + _jitter(rng, jitter)
        result.append((x, y, z))
    return result


def galaxy_arm(index: int, arms: int) -> Tuple[int, int, float]:
    """
    Return ``(arm, index_in_arm, base_angle)`` for the item at `index`.

    Items are dealt round-robin, so with 3 arms indices 0, 3, 6, 9 share arm 0.
    """
    arm = index % arms
    return arm, index // arms, (arm / arms) * 2 * math.pi


def galaxy(items: Sequence[FlatItem], radius: float, config: LayoutConfig, rng: np.random.Generator) -> List[Vec3]:
    """Spiral arms; distance grows with position along the arm."""
    n = len(items)
    arms = max(1, int(config.galaxy_arms))
    items_per_arm = n / arms
    result: List[Vec3] = []
    for i in range(n):
        _, pos_in_arm, arm_angle = galaxy_arm(i, arms)
        distance = (pos_in_arm / items_per_arm) * radius
        spiral_angle = arm_angle + distance * config.spiral_tightness
        x = distance * math.cos(spiral_angle)
        z = distance * math.sin(spiral_angle)
        y = _jitter(rng, config.galaxy_vertical_jitter)
        result.append((x, y, z))
    return result


def timeline(items: Sequence[FlatItem], radius: float, config: LayoutConfig, rng: np.random.Generator) -> List[Vec3]:
    """Linear along x in list order; polarity on y. Callers pre-sort."""
    n = len(items)
    result: List[Vec3] = []
    for i, item in enumerate(items):
        x = ((i / n) * 2 - 1) * radius
        y = (item.polarity or 0.0) * config.timeline_polarity_scale
        z = _jitter(rng, config.timeline_depth_jitter)
        result.append((x, y, z))
    return result


def clusters(items: Sequence[FlatItem], radius: float, config: LayoutConfig, rng: np.random.Generator) -> List[Vec3]:
    """One sunflower cluster per tag, cluster centers on a ring of 0.6 x radius."""
    groups: Dict[str, List[int]] = {}
    for idx, item in enumerate(items):
        groups.setdefault(item.tag or config.default_cluster_key, []).append(idx)

    result: List[Vec3] = [(0.0, 0.0, 0.0)] * len(items)
    num_clusters = len(groups)
    ring = radius * config.cluster_ring_ratio
    for cluster_index, members in enumerate(groups.values()):
        cluster_angle = (cluster_index / num_clusters) * 2 * math.pi
        cx = ring * math.cos(cluster_angle)
        cz = ring * math.sin(cluster_angle)
        for i, idx in enumerate(members):
            local_angle = (i / len(members)) * 2 * math.pi
            local_radius = math.sqrt(i) * config.cluster_spacing
            result[idx] = (
                cx + local_radius * math.cos(local_angle),
                _jitter(rng, config.cluster_vertical_jitter),
                cz + local_radius * math.sin(local_angle),
            )
    return result


def sphere(items: Sequence[FlatItem], radius: float, config: LayoutConfig, rng: np.random.Generator) -> List[Vec3]:
    """Golden-ratio (Fibonacci) sphere. Deterministic."""
    n = len(items)
    result: List[Vec3] = []
    for i in range(n):
        theta = (2 * math.pi * i) / GOLDEN_RATIO
        phi = math.acos(1 - (2 * (i + 0.5)) / n)
        result.append(
            (
                radius * math.cos(theta) * math.sin(phi),
                radius * math.sin(theta) * math.sin(phi),
                radius * math.cos(phi),
            )
        )
    return result


def helix(items: Sequence[FlatItem], radius: float, config: LayoutConfig, rng: np.random.Generator) -> List[Vec3]:
    """Double helix: non-negative polarity on strand 0, negative on strand 1."""
    n = len(items)
    helix_radius = radius * config.helix_radius_ratio
    result: List[Vec3] = []
    for i, item in enumerate(items):
        strand = 0 if (item.polarity or 0.0) >= 0 else 1
        height = ((i / n) * 2 - 1) * radius
        angle = (i / n) * config.helix_sweep + strand * math.pi
        result.append((helix_radius * math.cos(angle), height, helix_radius * math.sin(angle)))
    return result


PATTERNS: Dict[LayoutPattern, PatternFn] = {
    LayoutPattern.CONSTELLATION: constellation,
    LayoutPattern.GALAXY: galaxy,
    LayoutPattern.TIMELINE: timeline,
    LayoutPattern.CLUSTERS: clusters,
    LayoutPattern.SPHERE: sphere,
    LayoutPattern.HELIX: helix,
}


class PatternArranger:
    """
    Arrange flat items in 3D space with a named layout pattern.

    Attributes:
        config: Pattern constants (arms, jitter scales, ratios)
        rng: Random source used by the jittered patterns
    """

    def __init__(self, config: LayoutConfig | None = None, rng: np.random.Generator | None = None):
        self.config = config or LayoutConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    def arrange(
        self,
        items: Sequence[FlatItem],
        pattern: "LayoutPattern | str",
        radius: float | None = None,
    ) -> Positions:
        """
        Compute a position for every item.

        Args:
            items: Items in caller order (timeline relies on this order)
            pattern: Pattern member or name
            radius: Overall radius; defaults to `LayoutConfig.radius`

        Returns:
            Dict of item id -> (x, y, z)

        Raises:
            UnknownPatternError: If `pattern` is not a known pattern name
            ValueError: If `radius` is not positive
        """
        resolved = LayoutPattern.parse(pattern)
        radius = self.config.radius if radius is None else float(radius)
        if radius <= 0:
            raise ValueError(f"radius must be positive, got {radius}")

        positions: Positions = {}
        if not items:
            return positions

        coords = PATTERNS[resolved](items, radius, self.config, self.rng)
        for item, coord in zip(items, coords):
            if item.id in positions:
                logger.warning("Duplicate item id '%s' in %s layout; keeping first position", item.id, resolved.value)
                continue
            positions[item.id] = (float(coord[0]), float(coord[1]), float(coord[2]))
        return positions
