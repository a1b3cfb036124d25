"""Filesystem discovery of target directories for nmclean."""

import logging
import os
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Generator, Iterable

from nmclean.models import ScanEvent, ScanFinished, TargetFound

logger = logging.getLogger(__name__)

# Directories never worth descending into while looking for targets
DEFAULT_EXCLUDES = frozenset({".git"})

DEFAULT_MAX_WORKERS = 8

_WALK_DONE = object()


def get_directory_size(path: Path, cancel: threading.Event | None = None) -> tuple[int, int, int]:
    """
    Size of everything below a directory using os.scandir.

    Symlinks are counted neither as files nor followed as directories.
    Entries that cannot be read are skipped without aborting the count.

    Args:
        path: Directory to measure
        cancel: Stops the count early when set; the partial totals are returned

    Returns:
        Tuple of (total_bytes, file_count, dir_count)
    """
    total_size = 0
    file_count = 0
    dir_count = 0

    stack = [path]
    while stack:
        if cancel is not None and cancel.is_set():
            break
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                            file_count += 1
                        elif entry.is_dir(follow_symlinks=False):
                            dir_count += 1
                            stack.append(Path(entry.path))
                    except (PermissionError, OSError):
                        continue
        except (PermissionError, OSError):
            continue

    return total_size, file_count, dir_count


def find_target_directories(
    root: Path,
    target_name: str,
    exclude: Iterable[str] = DEFAULT_EXCLUDES,
    cancel: threading.Event | None = None,
) -> Generator[Path, None, None]:
    """
    Find directories named exactly ``target_name`` below ``root``.

    A match is never descended into, so nested targets inside a match are
    not reported separately.

    Args:
        root: Directory to start searching from
        target_name: Directory name to match (e.g. 'node_modules')
        exclude: Directory names that are skipped entirely
        cancel: Optional event that stops the walk when set

    Yields:
        Paths to matching directories
    """
    if cancel is not None and cancel.is_set():
        return

    excluded = frozenset(exclude)
    try:
        with os.scandir(root) as entries:
            subdirs = []
            for entry in entries:
                try:
                    if not entry.is_dir(follow_symlinks=False):
                        continue
                except OSError:
                    continue

                if entry.name == target_name:
                    yield Path(entry.path)
                elif entry.name not in excluded:
                    subdirs.append(Path(entry.path))
    except (PermissionError, OSError) as e:
        logger.debug("Skipping unreadable directory %s: %s", root, e)
        return

    for subdir in subdirs:
        yield from find_target_directories(subdir, target_name, excluded, cancel)


def _measure(path: Path, cancel: threading.Event | None = None) -> TargetFound:
    size, files, _ = get_directory_size(path, cancel)
    logger.debug("Measured %s: %d bytes in %d files", path, size, files)
    return TargetFound(path=str(path), size_bytes=size, file_count=files)


def scan_events(
    root: Path,
    target_name: str,
    max_workers: int = DEFAULT_MAX_WORKERS,
    exclude: Iterable[str] = DEFAULT_EXCLUDES,
    cancel: threading.Event | None = None,
) -> Generator[ScanEvent, None, None]:
    """
    Walk ``root`` and yield discovery events one at a time.

    The walk runs on its own thread and each matched directory is measured
    on a thread pool. Finished measurements are funnelled through a queue so
    the caller sees them serialized, in completion order. A single
    :class:`ScanFinished` is always the last event.

    Once ``cancel`` is set, measurements that have not started are dropped
    and no further :class:`TargetFound` events are yielded.
    """
    events: queue.Queue = queue.Queue()
    submitted: list[Future] = []

    def walk() -> None:
        try:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                for path in find_target_directories(root, target_name, exclude, cancel):
                    future = pool.submit(_measure, path, cancel)
                    submitted.append(future)
                    future.add_done_callback(events.put)
                if cancel is not None and cancel.is_set():
                    pool.shutdown(wait=False, cancel_futures=True)
        finally:
            events.put(_WALK_DONE)

    walker = threading.Thread(target=walk, name="nmclean-walk", daemon=True)
    walker.start()

    found = 0
    total = 0
    while True:
        item = events.get()
        if item is _WALK_DONE:
            break
        future: Future = item
        if cancel is not None and cancel.is_set():
            for pending in list(submitted):
                pending.cancel()
            continue
        event = future.result()
        found += 1
        total += event.size_bytes
        yield event

    cancelled = cancel is not None and cancel.is_set()
    logger.info("Scan of %s finished: %d found, %d bytes%s", root, found, total, " (cancelled)" if cancelled else "")
    yield ScanFinished(found_count=found, total_bytes=total, cancelled=cancelled)


class Scanner:
    """Runs a scan and hands every event to a callback.

    ``run`` blocks, so callers put it on a worker thread. Events reach the
    callback one at a time from that thread.
    """

    def __init__(
        self,
        root: Path,
        target_name: str,
        on_event: Callable[[ScanEvent], None],
        max_workers: int = DEFAULT_MAX_WORKERS,
        exclude: Iterable[str] = DEFAULT_EXCLUDES,
    ):
        self.root = Path(root)
        self.target_name = target_name
        self.on_event = on_event
        self.max_workers = max_workers
        self.exclude = frozenset(exclude)
        self._cancel = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Ask the walk to stop; a final ScanFinished is still delivered."""
        self._cancel.set()

    def run(self) -> None:
        logger.info("Scanning %s for %s", self.root, self.target_name)
        for event in scan_events(
            self.root,
            self.target_name,
            max_workers=self.max_workers,
            exclude=self.exclude,
            cancel=self._cancel,
        ):
            if self.cancelled and isinstance(event, TargetFound):
                continue
            self.on_event(event)
