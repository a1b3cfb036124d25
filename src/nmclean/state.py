"""Single-owner UI state for nmclean.

``CleanerState`` is owned by the UI loop. Scanner and deleter threads never
touch it; their results arrive as events and are applied here, one at a
time, by the loop that owns the state.
"""

import logging
from pathlib import Path

from nmclean.deleter import apply_outcomes, deletable_nodes
from nmclean.flatten import clamp_cursor, flatten
from nmclean.models import DeletionBatch, ScanFinished, SelectionStats, TargetFound
from nmclean.tree import PathTree, TreeNode

logger = logging.getLogger(__name__)


class CleanerState:
    """Tree, flattened rows and cursor, plus the intents that change them."""

    def __init__(self, root: Path, target_name: str):
        self.root = Path(root)
        self.target_name = target_name
        self.tree = PathTree(root)
        self.flat: list[TreeNode] = []
        self.cursor = 0
        self.scanning = True
        self.deleting = False
        self.last_batch: DeletionBatch | None = None

    @property
    def busy(self) -> bool:
        """Selection, expansion and deletion are held back while busy."""
        return self.scanning or self.deleting

    def rebuild(self) -> None:
        self.flat = flatten(self.tree)
        self.cursor = clamp_cursor(self.cursor, len(self.flat))

    def current(self) -> TreeNode | None:
        """Node under the cursor, if any."""
        if 0 <= self.cursor < len(self.flat):
            return self.flat[self.cursor]
        return None

    # Navigation

    def move_up(self) -> None:
        if self.cursor > 0:
            self.cursor -= 1

    def move_down(self) -> None:
        if self.cursor < len(self.flat) - 1:
            self.cursor += 1

    # Selection and expansion

    def toggle_select(self) -> bool:
        """Toggle the node under the cursor. Returns True if anything changed."""
        node = self.current()
        if self.busy or node is None or node.deleted:
            return False
        self.tree.toggle_select(node)
        return True

    def toggle_all(self) -> bool:
        if self.busy or not self.flat:
            return False
        self.tree.toggle_all(self.flat)
        return True

    def toggle_expand(self) -> bool:
        node = self.current()
        if self.busy or node is None or not node.children:
            return False
        node.expanded = not node.expanded
        self.rebuild()
        return True

    # Scanner events

    def on_target_found(self, event: TargetFound) -> None:
        self.tree.insert_path(event.path, event.size_bytes)
        self.rebuild()

    def on_scan_finished(self, event: ScanFinished) -> None:
        self.scanning = False
        self.rebuild()
        logger.debug("Scan finished with %d targets", event.found_count)

    # Deletion

    def begin_deletion(self) -> list[str]:
        """Paths to remove for the current selection, marking the state busy.

        Returns an empty list (and stays idle) when there is nothing to do.
        """
        if self.busy:
            return []
        paths = [n.path for n in deletable_nodes(self.flat)]
        if paths:
            self.deleting = True
        return paths

    def on_deletion_finished(self, batch: DeletionBatch) -> None:
        apply_outcomes(self.tree, batch)
        self.deleting = False
        self.last_batch = batch
        self.rebuild()

    # Footer facts

    def stats(self) -> SelectionStats:
        selected_count = 0
        selected_bytes = 0
        total_bytes = 0
        for node in self.flat:
            if node.deleted or not node.is_target:
                continue
            total_bytes += node.size
            if node.selected and node.size > 0:
                selected_count += 1
                selected_bytes += node.size
        return SelectionStats(
            visible_count=len(self.flat),
            selected_count=selected_count,
            selected_bytes=selected_bytes,
            total_bytes=total_bytes,
        )

    def failed_nodes(self) -> list[TreeNode]:
        """Nodes whose last removal attempt failed."""
        return [n for n in self.tree.root.walk() if n.error]
