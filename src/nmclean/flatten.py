"""Flattening of the tree into the navigable row list."""

from nmclean.tree import PathTree, TreeNode


def _mark_last(node: TreeNode) -> None:
    last = len(node.children) - 1
    for i, c in enumerate(node.children):
        c.is_last = i == last
        _mark_last(c)


def _collect(node: TreeNode, out: list[TreeNode]) -> None:
    out.append(node)
    if node.expanded:
        for c in node.children:
            _collect(c, out)


def flatten(tree: PathTree) -> list[TreeNode]:
    """Depth-first, pre-order list of visible nodes.

    The synthetic root is left out and collapsed nodes hide their
    descendants. ``is_last`` is refreshed on every node, including those
    inside collapsed subtrees.
    """
    _mark_last(tree.root)
    rows: list[TreeNode] = []
    for c in tree.root.children:
        _collect(c, rows)
    return rows


def clamp_cursor(cursor: int, length: int) -> int:
    """Bring a cursor index back inside ``[0, length - 1]`` (0 when empty)."""
    if length <= 0:
        return 0
    return max(0, min(cursor, length - 1))
