"""
Unit tests for the category hierarchy container.

Covers the mapping protocol, traversal helpers, validation of malformed
hierarchies and NetworkX / GraphML export.
"""

import os
import tempfile

import networkx as nx
import pytest

from spatial_core.hierarchy import CategoryNode, CategoryTree


def _three_level_tree() -> CategoryTree:
    tree = CategoryTree()
    tree.add_node(CategoryNode("root", None, ("a", "b"), 0, label="Root"))
    tree.add_node(CategoryNode("a", "root", ("a1", "a2"), 1))
    tree.add_node(CategoryNode("b", "root", ("b1",), 1))
    tree.add_node(CategoryNode("a1", "a", (), 2))
    tree.add_node(CategoryNode("a2", "a", (), 2))
    tree.add_node(CategoryNode("b1", "b", (), 2))
    return tree


class TestCategoryNode:
    def test_children_are_coerced_to_tuple(self):
        node = CategoryNode("n", children=["x", "y"])
        assert node.children == ("x", "y")

    def test_display_label_falls_back_to_id(self):
        assert CategoryNode("n").display_label == "n"
        assert CategoryNode("n", label="Name").display_label == "Name"


class TestCategoryTree:
    def test_mapping_protocol(self):
        tree = _three_level_tree()
        assert len(tree) == 6
        assert "a1" in tree
        assert tree["a"].children == ("a1", "a2")
        assert list(tree)[0] == "root"

    def test_duplicate_ids_are_rejected(self):
        tree = CategoryTree()
        tree.add_node(CategoryNode("x"))
        with pytest.raises(AssertionError):
            tree.add_node(CategoryNode("x"))

    def test_root_id_single_and_ambiguous(self):
        tree = _three_level_tree()
        assert tree.root_id == "root"

        forest = CategoryTree()
        forest.add_node(CategoryNode("r1"))
        forest.add_node(CategoryNode("r2"))
        assert forest.root_id is None
        assert sorted(forest.root_ids()) == ["r1", "r2"]

        assert CategoryTree().root_id is None

    def test_ancestors_and_descendants(self):
        tree = _three_level_tree()
        assert tree.ancestors("a2") == ["a", "root"]
        assert tree.ancestors("root") == []
        assert tree.descendants("root") == ["a", "a1", "a2", "b", "b1"]
        assert tree.descendants("b1") == []
        assert tree.children_of("missing") == []

    def test_descendants_terminate_on_cycle(self):
        tree = CategoryTree()
        tree.add_node(CategoryNode("x", None, ("y",), 0))
        tree.add_node(CategoryNode("y", "x", ("x",), 1))
        assert tree.descendants("x") == ["y"]


class TestValidation:
    def test_well_formed_tree_has_no_issues(self):
        results = _three_level_tree().validate_all()
        assert results["cycles"] == []
        assert results["structure"] == {}
        assert results["summary"]["total_issues"] == 0

    def test_cycle_is_reported(self):
        tree = CategoryTree()
        tree.add_node(CategoryNode("x", None, ("y",), 0))
        tree.add_node(CategoryNode("y", "x", ("x",), 1))

        cycles = tree.validate_cycles()
        assert cycles == ["x -> y -> x"]
        assert tree.validate_all()["summary"]["errors"] >= 1

    def test_dangling_references_and_depth_issues(self):
        tree = CategoryTree()
        tree.add_node(CategoryNode("root", None, ("a", "ghost"), 0))
        tree.add_node(CategoryNode("a", "root", (), 3))
        tree.add_node(CategoryNode("orphan", "nowhere", (), 1))

        structure = tree.validate_structure()
        assert any("ghost" in msg for msg in structure["dangling_references"])
        assert any("nowhere" in msg for msg in structure["dangling_references"])
        assert any("'a' has depth 3" in msg for msg in structure["depth_issues"])

    def test_parent_child_mismatch_is_a_warning(self):
        tree = CategoryTree()
        tree.add_node(CategoryNode("root", None, ("a", "b"), 0))
        tree.add_node(CategoryNode("a", "root", (), 1))
        tree.add_node(CategoryNode("b", "a", (), 1))

        summary = tree.validate_all()["summary"]
        assert summary["errors"] == 0
        assert summary["warnings"] == 1

    def test_multiple_roots_are_an_error(self):
        tree = CategoryTree()
        tree.add_node(CategoryNode("r1"))
        tree.add_node(CategoryNode("r2"))
        assert tree.validate_structure()["root_issues"]

    def test_statistics(self):
        stats = _three_level_tree().get_statistics()
        assert stats["nodes"] == 6
        assert stats["leaves"] == 3
        assert stats["max_depth"] == 2
        assert stats["nodes_per_depth"] == {"0": 1, "1": 2, "2": 3}


class TestExport:
    def test_to_networkx_edges_follow_child_order(self):
        tree = _three_level_tree()
        tree.add_node(CategoryNode("loner", None, (), 0, meta={"weight": 2, "skip": [1, 2]}))
        G = tree.to_networkx()

        assert isinstance(G, nx.DiGraph)
        assert set(G.successors("root")) == {"a", "b"}
        assert G.edges["root", "b"]["order"] == 1
        assert G.nodes["root"]["label"] == "Root"
        assert G.nodes["loner"]["meta_weight"] == 2
        assert "meta_skip" not in G.nodes["loner"]

    def test_export_graphml_round_trip(self):
        tree = _three_level_tree()
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "tree.graphml")
            tree.export_graphml(path)
            loaded = nx.read_graphml(path)

        assert set(loaded.nodes) == set(tree)
        assert loaded.number_of_edges() == 5
