"""Tests for flattening the tree into rows."""

from nmclean.flatten import clamp_cursor, flatten
from nmclean.tree import PathTree


def _build():
    tree = PathTree("/proj")
    tree.insert_path("/proj/a/node_modules", 100)
    tree.insert_path("/proj/a/b/node_modules", 50)
    tree.insert_path("/proj/c/node_modules", 10)
    return tree


def _paths(rows):
    return [n.path for n in rows]


class TestFlatten:
    def test_depth_first_preorder(self):
        rows = flatten(_build())
        assert _paths(rows) == [
            "/proj/a",
            "/proj/a/node_modules",
            "/proj/a/b",
            "/proj/a/b/node_modules",
            "/proj/c",
            "/proj/c/node_modules",
        ]

    def test_empty_tree(self):
        assert flatten(PathTree("/proj")) == []

    def test_collapsed_node_hides_descendants(self):
        tree = _build()
        tree.find("/proj/a").expanded = False

        rows = flatten(tree)
        assert _paths(rows) == ["/proj/a", "/proj/c", "/proj/c/node_modules"]

    def test_reexpand_restores_order(self):
        tree = _build()
        before = _paths(flatten(tree))

        a = tree.find("/proj/a")
        a.expanded = False
        flatten(tree)
        a.expanded = True

        assert _paths(flatten(tree)) == before

    def test_is_last_flags(self):
        tree = _build()
        flatten(tree)

        assert not tree.find("/proj/a").is_last
        assert tree.find("/proj/c").is_last
        assert not tree.find("/proj/a/node_modules").is_last
        assert tree.find("/proj/a/b").is_last
        assert tree.find("/proj/a/b/node_modules").is_last

    def test_is_last_refreshed_inside_collapsed_subtree(self):
        tree = _build()
        tree.find("/proj/a").expanded = False
        flatten(tree)
        assert tree.find("/proj/a/b").is_last

    def test_deleted_nodes_stay_in_place(self):
        tree = _build()
        before = _paths(flatten(tree))
        tree.mark_deleted(tree.find("/proj/a/node_modules"))
        assert _paths(flatten(tree)) == before


class TestClampCursor:
    def test_within_range(self):
        assert clamp_cursor(2, 5) == 2

    def test_past_end(self):
        assert clamp_cursor(9, 5) == 4

    def test_negative(self):
        assert clamp_cursor(-3, 5) == 0

    def test_empty(self):
        assert clamp_cursor(3, 0) == 0
