"""Deletion of selected junk directories."""

from __future__ import annotations

import logging
import os
import shutil
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Mapping

from devjunk.models.clean_result import CleanOutcome, CleanResult
from devjunk.models.scan_result import ScanItem

log = logging.getLogger(__name__)

ProgressCallback = Callable[[Path, str], None]  # (path, status)

CANCELLED = "cancelled"


class Cleaner:
    """Deletes path trees, isolating failures per path.

    The cleaner does not check paths against the junk catalog, so it can
    also be used to remove arbitrary directories. Deletion is not atomic
    across paths: whatever was removed before a failure or cancellation
    stays removed.
    """

    def __init__(self, max_workers: int = 4) -> None:
        self.max_workers = max_workers

    def clean_items(
        self,
        items: Iterable[ScanItem],
        dry_run: bool,
        on_progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> CleanResult:
        """Clean scan items, using their scanned sizes for byte accounting."""
        items = list(items)
        return self.clean(
            [item.path for item in items],
            dry_run,
            sizes={item.path: item.size_bytes for item in items},
            on_progress=on_progress,
            cancel=cancel,
        )

    def clean(
        self,
        paths: Iterable[Path | str],
        dry_run: bool,
        sizes: Mapping[Path, int] | None = None,
        on_progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> CleanResult:
        """Delete each path tree, or only report what would be deleted.

        Args:
            paths: Paths to delete, typically from a previous scan.
            dry_run: If True, the filesystem is not touched and every path
                is reported as deleted.
            sizes: Known size of each path. Paths missing here count as 0
                bytes freed.
            on_progress: Called with ``(path, status)`` where status is
                ``deleting``, ``done`` or ``error``. May be called from
                worker threads.
            cancel: Set this event to stop starting new deletions. Paths not
                yet started are reported as failed with error ``cancelled``.

        Returns:
            Result partitioning every requested path into deleted or failed.
        """
        requested = [Path(os.path.abspath(os.fspath(p))) for p in paths]
        sizes = {Path(os.path.abspath(p)): s for p, s in (sizes or {}).items()}
        cancel = cancel or threading.Event()

        independent, covered = _split_covered(requested)
        outcomes: dict[int, CleanOutcome] = {}

        def settle(index: int) -> CleanOutcome:
            path = requested[index]
            return self._clean_one(path, sizes.get(path, 0), dry_run, on_progress, cancel)

        if self.max_workers > 1 and len(independent) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="devjunk-clean") as pool:
                futures = {i: pool.submit(settle, i) for i in independent}
                try:
                    for i, future in futures.items():
                        outcomes[i] = future.result()
                finally:
                    # Drop deletions not yet started if interrupted.
                    for future in futures.values():
                        future.cancel()
        else:
            for i in independent:
                outcomes[i] = settle(i)

        # Shallowest first, so every ancestor is settled before its descendants.
        for index, ancestor in sorted(covered.items(), key=lambda kv: len(requested[kv[0]].parts)):
            if outcomes[ancestor].ok:
                path = requested[index]
                log.debug("%s was removed with %s", path, requested[ancestor])
                outcomes[index] = CleanOutcome(path)
                if on_progress:
                    on_progress(path, "done")
            else:
                outcomes[index] = settle(index)

        result = CleanResult.aggregate((outcomes[i] for i in range(len(requested))), dry_run)
        log.info(
            "%s %d of %d path(s), %d bytes, %d failed",
            "Would delete" if dry_run else "Deleted",
            result.deleted_count,
            len(requested),
            result.bytes_freed,
            result.failed_count,
        )
        return result

    @staticmethod
    def _clean_one(
        path: Path,
        size: int,
        dry_run: bool,
        on_progress: ProgressCallback | None,
        cancel: threading.Event,
    ) -> CleanOutcome:
        if cancel.is_set():
            return CleanOutcome(path, error=CANCELLED)

        if dry_run:
            log.debug("Would delete: %s", path)
            if on_progress:
                on_progress(path, "done")
            return CleanOutcome(path, size)

        if on_progress:
            on_progress(path, "deleting")
        try:
            remove_tree(path)
        except OSError as e:
            log.warning("Failed to delete %s: %s", path, e)
            if on_progress:
                on_progress(path, "error")
            return CleanOutcome(path, error=str(e))

        log.debug("Deleted: %s", path)
        if on_progress:
            on_progress(path, "done")
        return CleanOutcome(path, size)


def remove_tree(path: Path) -> None:
    """Remove a directory tree, or unlink a file or symlink.

    Symlinks are removed themselves and never followed.

    Raises:
        OSError: If the path is missing or cannot be fully removed.
    """
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _split_covered(paths: list[Path]) -> tuple[list[int], dict[int, int]]:
    """Separate independent paths from ones inside (or equal to) another.

    Returns the indices of independent paths and a map from each covered
    path's index to the index of its nearest requested ancestor (or of the
    first occurrence, for duplicates).
    """
    first_index: dict[Path, int] = {}
    for index, path in enumerate(paths):
        first_index.setdefault(path, index)

    independent: list[int] = []
    covered: dict[int, int] = {}
    for index, path in enumerate(paths):
        if first_index[path] != index:
            covered[index] = first_index[path]
            continue
        ancestor = next((first_index[p] for p in path.parents if p in first_index), None)
        if ancestor is None:
            independent.append(index)
        else:
            covered[index] = ancestor
    return independent, covered
