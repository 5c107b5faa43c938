"""
Metrics utilities for computed layouts.

This module provides:
- Nearest-neighbour distance statistics for point sets (density / clustering checks)
- Axis-aligned bounds of a layout
- Visible/hidden counts for tree layouts
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Sequence

import numpy as np


def _as_array(positions: Mapping[str, Sequence[float]] | Iterable[Sequence[float]]) -> np.ndarray:
    values = positions.values() if isinstance(positions, Mapping) else positions
    pts = np.asarray([tuple(p) for p in values], dtype=float)
    return pts.reshape(-1, 3)


def nearest_neighbor_stats(positions: Mapping[str, Sequence[float]] | Iterable[Sequence[float]]) -> Dict[str, float]:
    """
    Compute nearest-neighbour distance statistics.

    Args:
        positions: Mapping of id -> (x, y, z) or an iterable of points

    Returns:
        dict with keys: count, min, mean, max (distances are 0.0 for fewer than 2 points)
    """
    pts = _as_array(positions)
    n = len(pts)
    if n < 2:
        return {"count": float(n), "min": 0.0, "mean": 0.0, "max": 0.0}

    diff = pts[:, None, :] - pts[None, :, :]
    dist = np.sqrt((diff ** 2).sum(axis=-1))
    np.fill_diagonal(dist, np.inf)
    nearest = dist.min(axis=1)

    return {
        "count": float(n),
        "min": float(nearest.min()),
        "mean": float(nearest.mean()),
        "max": float(nearest.max()),
    }


def layout_bounds(positions: Mapping[str, Sequence[float]] | Iterable[Sequence[float]]) -> Dict[str, Any]:
    """Return ``{"min": [x, y, z], "max": [x, y, z]}`` (None values when empty)."""
    pts = _as_array(positions)
    if len(pts) == 0:
        return {"min": None, "max": None}
    return {"min": [float(v) for v in pts.min(axis=0)], "max": [float(v) for v in pts.max(axis=0)]}


def visibility_counts(layout: Mapping[str, Any]) -> Dict[str, int]:
    """Count visible and hidden entries of a tree layout (id -> PositionedNode)."""
    visible = sum(1 for p in layout.values() if getattr(p, "visible", False))
    return {"total": len(layout), "visible": visible, "hidden": len(layout) - visible}
