"""In-memory hierarchy of discovered target directories.

Every discovered path is split into segments relative to the scan root and
hung under a synthetic root node. Intermediate segments become plain nodes
with no size of their own; the final segment carries the measured size of
the target directory. Parents hold their children strongly and children
point back with a weak reference only.
"""

import logging
import os
import weakref
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

from nmclean.errors import PathOutsideRootError

logger = logging.getLogger(__name__)


class SelectionState(str, Enum):
    """Checkbox state shown for a node."""

    SELECTED = "selected"
    PARTIAL = "partial"
    UNSELECTED = "unselected"
    DELETED = "deleted"


class TreeNode:
    """One path segment below the scan root."""

    __slots__ = (
        "path",
        "name",
        "size",
        "selected",
        "deleted",
        "expanded",
        "children",
        "is_last",
        "is_target",
        "error",
        "_parent",
        "__weakref__",
    )

    def __init__(self, path: str, name: str, size: int = 0, parent: Optional["TreeNode"] = None):
        self.path = path
        self.name = name
        self.size = size
        self.selected = False
        self.deleted = False
        self.expanded = True
        self.children: list[TreeNode] = []
        self.is_last = False
        self.is_target = False
        self.error: str | None = None
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return f"TreeNode({self.path!r}, size={self.size}, selected={self.selected}, deleted={self.deleted})"

    @property
    def parent(self) -> Optional["TreeNode"]:
        """Parent node, or None for the synthetic root."""
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def depth(self) -> int:
        """Nesting level, with top-level segments at depth 0."""
        return len(self.ancestors())

    def ancestors(self) -> list["TreeNode"]:
        """Ancestors from outermost to innermost, excluding the synthetic root."""
        chain = []
        node = self.parent
        while node is not None and not node.is_root:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    def child(self, name: str) -> Optional["TreeNode"]:
        for c in self.children:
            if c.name == name:
                return c
        return None

    def live_children(self) -> list["TreeNode"]:
        """Children that have not been deleted."""
        return [c for c in self.children if not c.deleted]

    def aggregate_size(self) -> int:
        """Own size plus the aggregate size of every child."""
        return self.size + sum(c.aggregate_size() for c in self.children)

    def has_partial_selection(self) -> bool:
        """True when some, but not all, live children are (partly) selected."""
        live = self.live_children()
        if not live:
            return False
        marked = sum(1 for c in live if c.selected or c.has_partial_selection())
        return 0 < marked < len(live)

    def selection_state(self) -> SelectionState:
        if self.deleted:
            return SelectionState.DELETED
        if self.selected:
            return SelectionState.SELECTED
        if self.has_partial_selection():
            return SelectionState.PARTIAL
        return SelectionState.UNSELECTED

    @property
    def is_deletable(self) -> bool:
        """Only measured target directories are ever removed from disk."""
        return self.is_target and self.size > 0 and not self.deleted

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and every descendant in pre-order."""
        yield self
        for c in self.children:
            yield from c.walk()


def _sort_key(node: TreeNode) -> tuple[int, str]:
    return (-node.aggregate_size(), node.name)


class PathTree:
    """Directory hierarchy rooted at the scan root."""

    def __init__(self, root: str | Path):
        root_path = Path(os.path.abspath(root))
        self.root_path = root_path
        self.root = TreeNode(str(root_path), "")

    def __len__(self) -> int:
        return sum(1 for _ in self.root.walk()) - 1

    def _segments(self, full_path: str | Path) -> tuple[str, ...]:
        path = Path(full_path)
        if not path.is_absolute():
            path = self.root_path / path
        path = Path(os.path.normpath(path))
        try:
            rel = path.relative_to(self.root_path)
        except ValueError:
            raise PathOutsideRootError(str(path), str(self.root_path)) from None
        if not rel.parts:
            raise PathOutsideRootError(str(path), str(self.root_path))
        return rel.parts

    def insert_path(self, full_path: str | Path, size: int) -> TreeNode:
        """Insert a target directory, creating intermediate nodes as needed.

        Re-inserting an existing path overwrites its size and never creates a
        second node. Children along the inserted branch are re-sorted by
        aggregate size (descending) and then name.

        Raises:
            PathOutsideRootError: If the path is not below the scan root.
        """
        parts = self._segments(full_path)

        current = self.root
        branch = [current]
        for i, part in enumerate(parts):
            child = current.child(part)
            if child is None:
                child = TreeNode(os.path.join(current.path, part), part, parent=current)
                current.children.append(child)
            if i == len(parts) - 1:
                child.size = size
                child.is_target = True
            current = child
            branch.append(current)

        # Sizes changed along the whole branch, so every level may need reordering.
        for node in branch:
            if len(node.children) > 1:
                node.children.sort(key=_sort_key)

        logger.debug("Inserted %s (%d bytes)", current.path, size)
        return current

    def find(self, full_path: str | Path) -> TreeNode | None:
        """Look up the node for a path, or None if it was never inserted."""
        try:
            parts = self._segments(full_path)
        except PathOutsideRootError:
            return None
        node = self.root
        for part in parts:
            node = node.child(part)
            if node is None:
                return None
        return node

    def targets(self) -> Iterator[TreeNode]:
        """Every matched target directory in the tree."""
        return (n for n in self.root.walk() if n.is_target)

    def toggle_select(self, node: TreeNode) -> None:
        """Flip a node's selection, cascade it down and re-derive ancestors.

        Deleted nodes are left untouched.
        """
        if node.deleted:
            return
        self._cascade(node, not node.selected)
        self._refresh_ancestors(node)

    def _cascade(self, node: TreeNode, selected: bool) -> None:
        node.selected = selected
        for c in node.children:
            if not c.deleted:
                self._cascade(c, selected)

    def _refresh_ancestors(self, node: TreeNode) -> None:
        parent = node.parent
        while parent is not None and not parent.is_root:
            live = parent.live_children()
            parent.selected = bool(live) and all(c.selected for c in live)
            parent = parent.parent

    def toggle_all(self, visible: list[TreeNode]) -> bool:
        """Select every live visible node, or deselect them if all already are.

        Returns:
            The selection value that was applied.
        """
        live = [n for n in visible if not n.deleted]
        target = not all(n.selected for n in live) if live else False
        for n in live:
            n.selected = target
        return target

    def mark_deleted(self, node: TreeNode) -> None:
        """Record a successful removal. Deletion is never undone."""
        node.deleted = True
        node.selected = False
        node.error = None
        self._refresh_ancestors(node)

    def mark_failed(self, node: TreeNode, error: str) -> None:
        """Record a failed removal, keeping the node selected for a retry."""
        node.selected = True
        node.error = error
        self._refresh_ancestors(node)
