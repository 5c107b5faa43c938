"""
YAML compilers for category hierarchies and item collections.

Hierarchies may be written nested:

id: ai-dev-landscape
label: AI Development Landscape
children:
  - id: coding-assistants
    color: "#00d4ff"
    children:
      - id: ide-tools
      - id: cli-tools
  - id: infrastructure

or as a flat table of records, as content providers deliver them:

categories:
  - {id: root}
  - {id: a, parent: root}
  - {id: b, parent: root}

Notes:
- Depth is computed from nesting (flat tables: from parent links), never read.
- In flat tables, child order follows record order unless a record lists
  ``children`` explicitly.
- Entries without an id are skipped.

Item lists are a sequence (or an ``items:`` mapping) of records with
``id``, optional ``polarity``, ``tag`` (alias ``category``) and related ids
(``related``, ``related_ids`` or ``relatedTo``). JSON input parses as YAML.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import yaml

from .connections import FlatItem
from .hierarchy import CategoryNode, CategoryTree

logger = logging.getLogger(__name__)


def _node_from_entry(entry: Dict[str, Any], parent_id: Optional[str], depth: int, children: List[str]) -> CategoryNode:
    known = {"id", "parent", "parent_id", "parentId", "children", "color", "label", "name"}
    return CategoryNode(
        id=str(entry["id"]),
        parent_id=parent_id,
        children=tuple(children),
        depth=depth,
        color=str(entry.get("color") or "#ffffff"),
        label=str(entry.get("label") or entry.get("name") or ""),
        meta={k: v for k, v in entry.items() if k not in known},
    )


def _compile_nested(spec: Dict[str, Any]) -> CategoryTree:
    tree = CategoryTree()
    if not spec.get("id"):
        return tree

    # (entry, parent id, depth)
    stack = [(spec, None, 0)]
    while stack:
        entry, parent_id, depth = stack.pop()
        node_id = str(entry["id"])
        if node_id in tree:
            logger.warning("Duplicate category id '%s' in hierarchy; keeping first", node_id)
            continue
        child_entries = [c for c in (entry.get("children") or []) if isinstance(c, dict) and c.get("id")]
        child_ids = [str(c["id"]) for c in child_entries]
        tree.add_node(_node_from_entry(entry, parent_id, depth, child_ids))
        for child in reversed(child_entries):
            stack.append((child, node_id, depth + 1))
    return tree


def _compile_flat(records: List[Dict[str, Any]]) -> CategoryTree:
    entries: Dict[str, Dict[str, Any]] = {}
    for rec in records:
        if not isinstance(rec, dict) or not rec.get("id"):
            continue
        entries.setdefault(str(rec["id"]), rec)

    def parent_of(rec: Dict[str, Any]) -> Optional[str]:
        parent = rec.get("parent", rec.get("parent_id", rec.get("parentId")))
        return str(parent) if parent else None

    derived_children: Dict[str, List[str]] = {nid: [] for nid in entries}
    for nid, rec in entries.items():
        parent = parent_of(rec)
        if parent in derived_children:
            derived_children[parent].append(nid)

    def depth_of(nid: str) -> int:
        depth, seen = 0, {nid}
        parent = parent_of(entries[nid])
        while parent is not None and parent in entries and parent not in seen:
            seen.add(parent)
            depth += 1
            parent = parent_of(entries[parent])
        return depth

    tree = CategoryTree()
    for nid, rec in entries.items():
        explicit = rec.get("children")
        children = [str(c) for c in explicit] if explicit is not None else derived_children[nid]
        tree.add_node(_node_from_entry(rec, parent_of(rec), depth_of(nid), children))
    return tree


def compile_tree_from_dict(spec: Dict[str, Any]) -> CategoryTree:
    """
    Compile a parsed mapping into a `CategoryTree`.

    Args:
        spec: Nested hierarchy (root entry with ``id``) or ``{"categories": [...]}``

    Returns:
        CategoryTree: The compiled hierarchy (empty for empty input)
    """
    if "categories" in spec:
        return _compile_flat(spec.get("categories") or [])
    return _compile_nested(spec)


def compile_tree_from_yaml(yaml_text: str) -> CategoryTree:
    """Compile from YAML text into a `CategoryTree`."""
    data = yaml.safe_load(yaml_text) or {}
    return compile_tree_from_dict(data)


def compile_tree_from_file(path: str) -> CategoryTree:
    """Compile from a YAML file path into a `CategoryTree`."""
    with open(path, "r", encoding="utf-8") as f:
        txt = f.read()
    return compile_tree_from_yaml(txt)


def compile_items_from_list(records: Any) -> List[FlatItem]:
    """
    Build `FlatItem` objects from parsed records.

    Args:
        records: A list of item mappings, or a mapping with an ``items`` list

    Returns:
        Items in input order; records without an id are skipped
    """
    if isinstance(records, dict):
        records = records.get("items") or []
    items: List[FlatItem] = []
    for rec in records or []:
        if not isinstance(rec, dict) or rec.get("id") in (None, ""):
            continue
        related = rec.get("related", rec.get("related_ids", rec.get("relatedTo"))) or []
        if not isinstance(related, (list, tuple)):
            related = [related]
        polarity = rec.get("polarity")
        tag = rec.get("tag", rec.get("category"))
        items.append(
            FlatItem(
                id=str(rec["id"]),
                polarity=float(polarity) if polarity is not None else None,
                tag=str(tag) if tag is not None else None,
                related_ids=tuple(str(r) for r in related),
            )
        )
    return items


def compile_items_from_yaml(text: str) -> List[FlatItem]:
    """Compile items from YAML (or JSON) text."""
    return compile_items_from_list(yaml.safe_load(text) or [])


def compile_items_from_file(path: str) -> List[FlatItem]:
    """Compile items from a YAML or JSON file path."""
    with open(path, "r", encoding="utf-8") as f:
        txt = f.read()
    return compile_items_from_yaml(txt)
