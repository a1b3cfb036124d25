"""Removal of selected target directories for nmclean."""

import logging
import shutil
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from nmclean.models import DeletionBatch, DeletionOutcome
from nmclean.scanner import DEFAULT_MAX_WORKERS, get_directory_size
from nmclean.tree import PathTree, TreeNode

logger = logging.getLogger(__name__)


def is_path_safe(path: Path, root: Path, target_name: str) -> bool:
    """
    Check if a path may be removed.

    Only directories named like the target, strictly below the scan root,
    are ever removed. The root itself, the home directory and the
    filesystem root are always refused.

    Args:
        path: Path to check
        root: Scan root
        target_name: Configured target directory name

    Returns:
        True if safe to delete, False otherwise
    """
    path = Path(path).absolute()
    root = Path(root).absolute()

    if path.name != target_name:
        return False
    if path in (root, Path.home(), Path(path.anchor)):
        return False
    return root in path.parents


def deletable_nodes(nodes: list[TreeNode]) -> list[TreeNode]:
    """Selected, live target nodes with a positive size."""
    return [n for n in nodes if n.selected and not n.deleted and n.is_target and n.size > 0]


def remove_directory(path: Path, dry_run: bool = False) -> DeletionOutcome:
    """
    Remove a directory tree.

    Args:
        path: Directory to remove
        dry_run: If True, only measure what would be freed

    Returns:
        DeletionOutcome describing the result
    """
    if not path.exists():
        return DeletionOutcome(path=str(path), success=True, bytes_freed=0, dry_run=dry_run)

    try:
        size, _, _ = get_directory_size(path)

        if dry_run:
            return DeletionOutcome(path=str(path), success=True, bytes_freed=size, dry_run=True)

        shutil.rmtree(path)
        logger.info("Removed %s (%d bytes)", path, size)
        return DeletionOutcome(path=str(path), success=True, bytes_freed=size)

    except PermissionError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return DeletionOutcome(path=str(path), success=False, error=f"Permission denied: {e}", dry_run=dry_run)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return DeletionOutcome(path=str(path), success=False, error=f"OS error: {e}", dry_run=dry_run)


def delete_paths(
    paths: list[str],
    root: Path,
    target_name: str,
    max_workers: int = DEFAULT_MAX_WORKERS,
    dry_run: bool = False,
) -> DeletionBatch:
    """
    Remove every path concurrently and wait for all of them.

    Paths failing :func:`is_path_safe` are reported as failures without
    touching the disk. Outcomes are returned in the order of ``paths``.
    """
    def _remove(path_str: str) -> DeletionOutcome:
        path = Path(path_str)
        if not is_path_safe(path, root, target_name):
            logger.warning("Refusing to remove %s", path)
            return DeletionOutcome(path=path_str, success=False, error=f"Blocked path: {path}", dry_run=dry_run)
        return remove_directory(path, dry_run=dry_run)

    if not paths:
        return DeletionBatch()

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        outcomes = list(pool.map(_remove, paths))

    batch = DeletionBatch(outcomes=outcomes)
    logger.info(
        "Deletion batch finished: %d removed, %d failed, %d bytes freed",
        len(batch.succeeded),
        len(batch.failed),
        batch.bytes_freed,
    )
    return batch


def apply_outcomes(tree: PathTree, batch: DeletionBatch) -> None:
    """Fold a finished batch back into the tree.

    Successful removals become deleted nodes. Failures stay selected and
    carry their error message. Successful dry runs change nothing.
    """
    for outcome in batch.outcomes:
        if outcome.dry_run and outcome.success:
            continue
        node = tree.find(outcome.path)
        if node is None:
            logger.warning("Deletion outcome for unknown path %s", outcome.path)
            continue
        if outcome.success:
            tree.mark_deleted(node)
        else:
            tree.mark_failed(node, outcome.error or "Removal failed")
