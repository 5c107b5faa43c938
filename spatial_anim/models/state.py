from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

Vec3 = Tuple[float, float, float]


@dataclass
class LayoutSnapshot:
    t: float
    positions: Dict[str, Vec3]
    visibility: Dict[str, bool]

    @classmethod
    def from_layout(cls, layout: Mapping[str, Any], t: float = 0.0) -> "LayoutSnapshot":
        """Snapshot a tree layout (id -> PositionedNode) or a plain id -> position map."""
        positions: Dict[str, Vec3] = {}
        visibility: Dict[str, bool] = {}
        for nid, value in layout.items():
            pos = getattr(value, "position", value)
            positions[nid] = (float(pos[0]), float(pos[1]), float(pos[2]))
            visibility[nid] = bool(getattr(value, "visible", True))
        return cls(t=t, positions=positions, visibility=visibility)

    def clone(self) -> "LayoutSnapshot":
        return LayoutSnapshot(
            t=self.t,
            positions=dict(self.positions),
            visibility=dict(self.visibility),
        )

    def diff(self, other: "LayoutSnapshot") -> Dict[str, Any]:
        """Return differences from `other` → `self`.

        Returns dict with keys:
        - added: ids present only in `self`
        - removed: ids present only in `other`
        - moved: Dict[node_id, (from, to)]
        - visibility_updates: Dict[node_id, (from, to)]
        """
        moved: Dict[str, Tuple[Vec3, Vec3]] = {}
        visibility_updates: Dict[str, Tuple[bool, bool]] = {}

        for nid, new_pos in self.positions.items():
            old_pos = other.positions.get(nid)
            if old_pos is not None and max(abs(a - b) for a, b in zip(new_pos, old_pos)) > 1e-9:
                moved[nid] = (old_pos, new_pos)

        for nid, new_vis in self.visibility.items():
            old_vis = other.visibility.get(nid)
            if old_vis is not None and old_vis != new_vis:
                visibility_updates[nid] = (old_vis, new_vis)

        return {
            "added": sorted(set(self.positions) - set(other.positions)),
            "removed": sorted(set(other.positions) - set(self.positions)),
            "moved": moved,
            "visibility_updates": visibility_updates,
        }
