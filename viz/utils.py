"""
Renderer-neutral scene elements built from layouts, decoupled from any UI toolkit.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from spatial_anim.utils.normalization import edge_width_from_strength, normalize_signed, polarity_band
from spatial_core.connections import Connection, FlatItem
from spatial_core.hierarchy import CategoryNode
from spatial_core.tree_layout import PositionedNode


def build_tree_elements(
    layout: Mapping[str, PositionedNode],
    nodes: Mapping[str, CategoryNode],
    expanded: Iterable[str] = (),
    include_hidden: bool = False,
) -> List[Dict[str, Any]]:
    """Convert a tree layout into node and connector elements.

    Node element data:
    - id, label, color, depth, position [x, y, z], expanded
    Connector elements join each visible node to its parent position.
    """
    expanded = set(expanded)
    elements: List[Dict[str, Any]] = []

    for node_id, placed in layout.items():
        if not placed.visible and not include_hidden:
            continue
        node = nodes.get(node_id)
        elements.append({
            "data": {
                "id": node_id,
                "label": node.display_label if node else node_id,
                "color": node.color if node else "#ffffff",
                "depth": placed.depth,
                "visible": placed.visible,
                "expanded": node_id in expanded,
                "position": list(placed.position),
            }
        })
        if placed.parent_position is not None and node is not None and node.parent_id is not None:
            elements.append({
                "data": {
                    "id": f"{node.parent_id}->{node_id}",
                    "source": node.parent_id,
                    "target": node_id,
                    "from": list(placed.parent_position),
                    "to": list(placed.position),
                    "visible": placed.visible,
                }
            })

    return elements


def build_item_elements(
    items: Sequence[FlatItem],
    positions: Mapping[str, Sequence[float]],
    connections: Optional[Iterable[Connection]] = None,
) -> List[Dict[str, Any]]:
    """Convert arranged items and their connections into elements.

    Node color comes from the item's polarity band; edge width from strength.
    """
    elements: List[Dict[str, Any]] = []

    for item in items:
        pos = positions.get(item.id)
        if pos is None:
            continue
        band = polarity_band(item.polarity)
        elements.append({
            "data": {
                "id": item.id,
                "label": item.id,
                "tag": item.tag,
                "color": _color_for_band(band),
                "polarityBand": band,
                "polarityLevel": normalize_signed(item.polarity or 0.0, -1.0, 1.0),
                "position": [float(c) for c in pos],
            }
        })

    for c in connections or []:
        elements.append({
            "data": {
                "id": f"{c.source_id}->{c.target_id}",
                "source": c.source_id,
                "target": c.target_id,
                "from": list(c.source),
                "to": list(c.target),
                "strength": float(c.strength),
                "width": edge_width_from_strength(c.strength),
            }
        })

    return elements


def _color_for_band(band: str) -> str:
    band_colors = {
        "strong_negative": "#0066cc",
        "negative": "#66b3ff",
        "neutral": "#e0e0ff",
        "positive": "#ffd700",
        "strong_positive": "#ff6b6b",
    }
    return band_colors.get(band, "#e0e0ff")
