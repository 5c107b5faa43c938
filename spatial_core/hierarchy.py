"""
Category hierarchy data structures.

This module defines the read-only input of the tree layout engine:
- CategoryNode: one entry in the fixed topic hierarchy
- CategoryTree: container for nodes with traversal, validation and export helpers

The layout engine never mutates a tree; trees are built once at load time from
static or fetched configuration (see `spatial_core.compiler`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import networkx as nx


@dataclass(frozen=True)
class CategoryNode:
    """
    One node of a category hierarchy.

    Attributes:
        id: Unique identifier
        parent_id: Parent identifier, None only for the single root
        children: Ordered child identifiers
        depth: Root = 0, +1 per level
        color: Display color, opaque to the engine
        label: Display label, opaque to the engine
        meta: Additional metadata carried through to renderers
    """

    id: str
    """Unique identifier for this category."""

    parent_id: Optional[str] = None
    """Identifier of the parent category (None for the root)."""

    children: Tuple[str, ...] = ()
    """Ordered child identifiers; order determines angular placement."""

    depth: int = 0
    """Level in the hierarchy (root = 0)."""

    color: str = "#ffffff"
    """Display color (hex string)."""

    label: str = ""
    """Display label; falls back to the id when empty."""

    meta: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)
    """Additional metadata."""

    def __post_init__(self):
        # Accept lists from callers while keeping the node immutable
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def display_label(self) -> str:
        return self.label or self.id


class CategoryTree(Mapping[str, CategoryNode]):
    """
    Container for category nodes keyed by id.

    The tree behaves as a read-only mapping of id -> CategoryNode, so it can be
    passed wherever a plain node table is accepted.

    Attributes:
        nodes: Dictionary mapping category IDs to CategoryNode objects
    """

    def __init__(self, nodes: Optional[Mapping[str, CategoryNode]] = None):
        """Initialize a tree, optionally from an existing node table."""
        self.nodes: Dict[str, CategoryNode] = {}
        for node in (nodes or {}).values():
            self.add_node(node)

    # ----- mapping protocol -----
    def __getitem__(self, node_id: str) -> CategoryNode:
        return self.nodes[node_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    # ----- construction -----
    def add_node(self, node: CategoryNode) -> None:
        """
        Add a node to the tree.

        Args:
            node: CategoryNode to add

        Raises:
            AssertionError: If a node with the same id already exists
        """
        assert node.id not in self.nodes, f"Duplicate category id: {node.id}"
        self.nodes[node.id] = node

    # ----- traversal -----
    def children_of(self, node_id: str) -> List[str]:
        """Return the ordered child ids of a node (empty for unknown ids)."""
        node = self.nodes.get(node_id)
        return list(node.children) if node else []

    def root_ids(self) -> List[str]:
        """Return ids of all nodes without a parent."""
        return [nid for nid, n in self.nodes.items() if n.parent_id is None]

    @property
    def root_id(self) -> Optional[str]:
        """The single root id, or None when the tree has zero or several roots."""
        roots = self.root_ids()
        return roots[0] if len(roots) == 1 else None

    def ancestors(self, node_id: str) -> List[str]:
        """
        Return ancestor ids from the immediate parent up to the root.

        Stops early on unknown parents or cycles.
        """
        result: List[str] = []
        seen = {node_id}
        node = self.nodes.get(node_id)
        while node is not None and node.parent_id is not None:
            if node.parent_id in seen:
                break
            result.append(node.parent_id)
            seen.add(node.parent_id)
            node = self.nodes.get(node.parent_id)
        return result

    def descendants(self, node_id: str) -> List[str]:
        """Return all descendant ids in depth-first pre-order (cycle-safe)."""
        result: List[str] = []
        seen = {node_id}
        stack = list(reversed(self.children_of(node_id)))
        while stack:
            cid = stack.pop()
            if cid in seen or cid not in self.nodes:
                continue
            seen.add(cid)
            result.append(cid)
            stack.extend(reversed(self.children_of(cid)))
        return result

    # ----- export -----
    def to_networkx(self) -> "nx.DiGraph":
        """
        Convert the hierarchy to a NetworkX DiGraph (parent -> child edges).

        Returns:
            NetworkX DiGraph with node attributes depth, color and label
        """
        G = nx.DiGraph()

        for node_id, node in self.nodes.items():
            node_attrs = {
                "depth": node.depth,
                "color": node.color,
                "label": node.display_label,
            }
            for k, v in node.meta.items():
                if isinstance(v, (str, int, float, bool)):
                    node_attrs[f"meta_{k}"] = v
            G.add_node(node_id, **node_attrs)

        for node_id, node in self.nodes.items():
            for order, child_id in enumerate(node.children):
                if child_id in self.nodes:
                    G.add_edge(node_id, child_id, order=order)

        return G

    def export_graphml(self, filepath: str) -> None:
        """
        Export the hierarchy to GraphML format.

        Args:
            filepath: Path where to save the GraphML file
        """
        nx.write_graphml(self.to_networkx(), filepath)

    # ----- validation -----
    def validate_cycles(self) -> List[str]:
        """
        Detect cycles along child links using DFS.

        Returns:
            List of cycle descriptions such as ``"a -> b -> a"``
        """
        cycles: List[str] = []
        visited = set()
        rec_stack = set()

        def dfs(node_id: str, path: List[str]) -> None:
            visited.add(node_id)
            rec_stack.add(node_id)
            path.append(node_id)

            for child_id in self.children_of(node_id):
                if child_id not in self.nodes:
                    continue
                if child_id not in visited:
                    dfs(child_id, path[:])
                elif child_id in rec_stack:
                    cycle_start = path.index(child_id)
                    cycle = path[cycle_start:] + [child_id]
                    cycles.append(" -> ".join(cycle))

            path.pop()
            rec_stack.remove(node_id)

        for node_id in self.nodes:
            if node_id not in visited:
                dfs(node_id, [])

        return cycles

    def validate_structure(self) -> Dict[str, List[str]]:
        """
        Check root count, references, parent/child agreement and depths.

        Returns:
            Dictionary of validation issues by category (empty categories removed)
        """
        issues: Dict[str, List[str]] = {
            "root_issues": [],
            "dangling_references": [],
            "parent_child_mismatch": [],
            "depth_issues": [],
        }

        roots = self.root_ids()
        if not roots and self.nodes:
            issues["root_issues"].append("Hierarchy has no root (every node has a parent)")
        elif len(roots) > 1:
            issues["root_issues"].append(f"Hierarchy has {len(roots)} roots: {', '.join(sorted(roots))}")

        for node_id, node in self.nodes.items():
            if node.parent_id is not None and node.parent_id not in self.nodes:
                issues["dangling_references"].append(
                    f"Category '{node_id}' references missing parent '{node.parent_id}'"
                )
            for child_id in node.children:
                child = self.nodes.get(child_id)
                if child is None:
                    issues["dangling_references"].append(
                        f"Category '{node_id}' lists missing child '{child_id}'"
                    )
                    continue
                if child.parent_id != node_id:
                    issues["parent_child_mismatch"].append(
                        f"Category '{child_id}' is listed under '{node_id}' but names parent '{child.parent_id}'"
                    )
                if child.depth != node.depth + 1:
                    issues["depth_issues"].append(
                        f"Category '{child_id}' has depth {child.depth}, expected {node.depth + 1}"
                    )
            if node.parent_id is None and node.depth != 0:
                issues["depth_issues"].append(f"Root '{node_id}' has depth {node.depth}, expected 0")

        return {k: v for k, v in issues.items() if v}

    def validate_all(self) -> Dict[str, Any]:
        """
        Run all validations and summarize.

        Returns:
            Dict with keys ``cycles``, ``structure`` and ``summary``
            (``total_issues``, ``errors``, ``warnings``). Cycles, root issues and
            dangling references count as errors; the rest as warnings.
        """
        cycles = self.validate_cycles()
        structure = self.validate_structure()
        errors = len(cycles) + len(structure.get("root_issues", [])) + len(
            structure.get("dangling_references", [])
        )
        warnings = len(structure.get("parent_child_mismatch", [])) + len(structure.get("depth_issues", []))
        return {
            "cycles": cycles,
            "structure": structure,
            "summary": {"total_issues": errors + warnings, "errors": errors, "warnings": warnings},
        }

    def get_statistics(self) -> Dict[str, Any]:
        """Return node counts, maximum depth and per-depth counts."""
        per_depth: Dict[int, int] = {}
        for node in self.nodes.values():
            per_depth[node.depth] = per_depth.get(node.depth, 0) + 1
        leaves = sum(1 for n in self.nodes.values() if not n.children)
        return {
            "nodes": len(self.nodes),
            "leaves": leaves,
            "max_depth": max(per_depth) if per_depth else 0,
            "nodes_per_depth": {str(d): c for d, c in sorted(per_depth.items())},
        }
