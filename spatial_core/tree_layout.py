"""
Radial tree layout for category hierarchies.

The root sits at the origin. Each node's angular span is split evenly among its
children, and a child is placed at the midpoint angle of its sub-span at a
horizontal distance proportional to its depth, lifted by a small per-level
vertical offset. Visibility is derived from the expansion state: a node is
visible iff it is the root or its parent is expanded.

Positions of hidden nodes are still computed so that expanding a parent later
only flips visibility (see `TreeLayoutEngine.refresh_visibility`).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import AbstractSet, Dict, FrozenSet, List, Mapping, Optional, Tuple

from .config import LayoutConfig
from .hierarchy import CategoryNode

logger = logging.getLogger(__name__)

Vec3 = Tuple[float, float, float]

FULL_CIRCLE = 2 * math.pi


@dataclass(frozen=True)
class PositionedNode:
    """
    A category paired with its computed coordinate.

    Attributes:
        id: Category identifier
        position: (x, y, z) coordinate
        depth: Traversal depth (root = 0)
        visible: True iff root or parent expanded
        parent_position: Parent coordinate for drawing a connector (None for root)
        angle: Midpoint angle the node was placed at
        angle_start: Start of the node's angular span
        angle_end: End of the node's angular span (exclusive)
    """

    id: str
    position: Vec3
    depth: int
    visible: bool
    parent_position: Optional[Vec3] = None
    angle: float = 0.0
    angle_start: float = 0.0
    angle_end: float = FULL_CIRCLE


def is_visible(node: CategoryNode, expanded: AbstractSet[str]) -> bool:
    """Return True iff `node` is the root or its parent is expanded."""
    return node.parent_id is None or node.parent_id in expanded


def toggle_expansion(expanded: AbstractSet[str], node_id: str) -> FrozenSet[str]:
    """Return a new expansion state with `node_id` toggled."""
    if node_id in expanded:
        return frozenset(expanded - {node_id})
    return frozenset(expanded | {node_id})


class TreeLayoutEngine:
    """
    Recursive radial placement of a category hierarchy.

    The traversal uses an explicit work stack, so pathological hierarchies
    cannot exhaust the interpreter's recursion limit. Cycles and branches deeper
    than `LayoutConfig.max_depth` are logged and cut rather than raised.
    """

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()

    def position_for(self, depth: int, angle: float) -> Vec3:
        """Polar-to-Cartesian placement for a node at `depth` and `angle`."""
        if depth == 0:
            return (0.0, 0.0, 0.0)
        distance = depth * self.config.level_distance
        x = math.cos(angle) * distance
        z = math.sin(angle) * distance
        y = depth * self.config.level_height + self.config.level_offset
        return (x, y, z)

    def layout(
        self,
        nodes: Mapping[str, CategoryNode],
        expanded: AbstractSet[str],
        root_id: str | None,
    ) -> Dict[str, PositionedNode]:
        """
        Compute positions for the hierarchy under `root_id`.

        Args:
            nodes: Category table (id -> CategoryNode), e.g. a `CategoryTree`
            expanded: Ids of currently expanded categories
            root_id: Id of the root category

        Returns:
            Dict of id -> PositionedNode; empty when the root is missing
        """
        positions: Dict[str, PositionedNode] = {}
        if root_id is None or root_id not in nodes:
            logger.debug("Root %r not in node table; returning empty layout", root_id)
            return positions

        root_pos = self.position_for(0, 0.0)
        positions[root_id] = PositionedNode(
            id=root_id,
            position=root_pos,
            depth=0,
            visible=True,
            parent_position=None,
            angle=0.0,
            angle_start=0.0,
            angle_end=FULL_CIRCLE,
        )

        # (node id, depth, span start, span end, position)
        stack: List[Tuple[str, int, float, float, Vec3]] = [(root_id, 0, 0.0, FULL_CIRCLE, root_pos)]

        while stack:
            node_id, depth, angle_start, angle_end, position = stack.pop()
            node = nodes[node_id]
            children = node.children
            if not children:
                continue

            if depth + 1 > self.config.max_depth:
                logger.warning(
                    "Depth limit %d reached below '%s'; skipping %d children",
                    self.config.max_depth,
                    node_id,
                    len(children),
                )
                continue

            child_visible = node_id in expanded
            span = (angle_end - angle_start) / len(children)
            pending: List[Tuple[str, int, float, float, Vec3]] = []

            for index, child_id in enumerate(children):
                if child_id not in nodes:
                    logger.debug("Category '%s' lists unknown child '%s'", node_id, child_id)
                    continue
                if child_id in positions:
                    logger.error(
                        "Category '%s' reached twice (via '%s'); hierarchy is cyclic or shared",
                        child_id,
                        node_id,
                    )
                    continue

                child_start = angle_start + span * index
                child_end = child_start + span
                angle = (child_start + child_end) / 2
                child_pos = self.position_for(depth + 1, angle)

                positions[child_id] = PositionedNode(
                    id=child_id,
                    position=child_pos,
                    depth=depth + 1,
                    visible=child_visible,
                    parent_position=position,
                    angle=angle,
                    angle_start=child_start,
                    angle_end=child_end,
                )

                if self.config.layout_hidden_subtrees or child_visible:
                    pending.append((child_id, depth + 1, child_start, child_end, child_pos))

            # Keep pre-order traversal in child order
            stack.extend(reversed(pending))

        return positions

    def refresh_visibility(
        self,
        layout: Mapping[str, PositionedNode],
        nodes: Mapping[str, CategoryNode],
        expanded: AbstractSet[str],
    ) -> Dict[str, PositionedNode]:
        """
        Recompute visibility flags of an existing layout without moving nodes.

        Only valid for layouts produced with `layout_hidden_subtrees` enabled,
        where every reachable node already has a position.
        """
        refreshed: Dict[str, PositionedNode] = {}
        for node_id, placed in layout.items():
            node = nodes.get(node_id)
            visible = placed.depth == 0 or (node is not None and is_visible(node, expanded))
            refreshed[node_id] = placed if placed.visible == visible else replace(placed, visible=visible)
        return refreshed


def visible_nodes(layout: Mapping[str, PositionedNode]) -> List[PositionedNode]:
    """Return the visible positioned nodes in layout order."""
    return [p for p in layout.values() if p.visible]
