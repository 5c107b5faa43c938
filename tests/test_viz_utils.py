"""
Tests for viz.utils element builders.
"""

from spatial_core.connections import ConnectionBuilder, FlatItem
from spatial_core.hierarchy import CategoryNode
from spatial_core.tree_layout import TreeLayoutEngine
from viz.utils import build_item_elements, build_tree_elements


def _nodes():
    return {
        "R": CategoryNode("R", None, ("A", "B"), 0, color="#123456", label="Root"),
        "A": CategoryNode("A", "R", ("A1", "A2"), 1),
        "B": CategoryNode("B", "R", ("B1",), 1),
        "A1": CategoryNode("A1", "A", (), 2),
        "A2": CategoryNode("A2", "A", (), 2),
        "B1": CategoryNode("B1", "B", (), 2),
    }


def test_tree_elements_visible_only():
    nodes = _nodes()
    layout = TreeLayoutEngine().layout(nodes, {"R"}, "R")
    els = build_tree_elements(layout, nodes, expanded={"R"})

    node_els = [e for e in els if "source" not in e["data"]]
    edge_els = [e for e in els if "source" in e["data"]]
    assert {e["data"]["id"] for e in node_els} == {"R", "A", "B"}
    assert {e["data"]["id"] for e in edge_els} == {"R->A", "R->B"}

    root = next(e for e in node_els if e["data"]["id"] == "R")
    assert root["data"]["label"] == "Root"
    assert root["data"]["color"] == "#123456"
    assert root["data"]["expanded"] is True
    assert root["data"]["position"] == [0.0, 0.0, 0.0]

    edge = next(e for e in edge_els if e["data"]["target"] == "A")
    assert edge["data"]["from"] == [0.0, 0.0, 0.0]
    assert edge["data"]["to"] == list(layout["A"].position)


def test_tree_elements_include_hidden():
    nodes = _nodes()
    layout = TreeLayoutEngine().layout(nodes, {"R"}, "R")
    els = build_tree_elements(layout, nodes, include_hidden=True)

    node_els = [e for e in els if "source" not in e["data"]]
    edge_els = [e for e in els if "source" in e["data"]]
    assert len(node_els) == 6
    assert len(edge_els) == 5
    hidden = next(e for e in node_els if e["data"]["id"] == "A1")
    assert hidden["data"]["visible"] is False
    assert hidden["data"]["label"] == "A1"


def test_item_elements_colors_and_widths():
    items = [
        FlatItem("a", polarity=0.6, tag="today", related_ids=("b",)),
        FlatItem("b", polarity=-0.3),
        FlatItem("c"),
    ]
    positions = {"a": (0.0, 0.0, 0.0), "b": (1.0, 2.0, 3.0)}
    connections = ConnectionBuilder().build(items, positions)

    els = build_item_elements(items, positions, connections)
    node_els = [e for e in els if "source" not in e["data"]]
    edge_els = [e for e in els if "source" in e["data"]]

    assert [e["data"]["id"] for e in node_els] == ["a", "b"]
    a, b = node_els
    assert a["data"]["color"] == "#ff6b6b"
    assert a["data"]["polarityBand"] == "strong_positive"
    assert a["data"]["tag"] == "today"
    assert b["data"]["color"] == "#66b3ff"
    assert b["data"]["position"] == [1.0, 2.0, 3.0]

    assert len(edge_els) == 1
    assert edge_els[0]["data"]["id"] == "a->b"
    assert edge_els[0]["data"]["width"] == 3.5


def test_item_elements_without_connections():
    els = build_item_elements([FlatItem("x")], {"x": (0, 0, 0)})
    assert len(els) == 1
    assert els[0]["data"]["polarityLevel"] == 0.5
