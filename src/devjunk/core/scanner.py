"""Parallel directory scanner."""

from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from devjunk.core.catalog import JunkCatalog
from devjunk.core.errors import InvalidRootError, NoValidRootsError, ScanCancelledError
from devjunk.core.progress import ProgressChannel
from devjunk.models.junk_kind import JunkKind
from devjunk.models.scan_options import ScanOptions
from devjunk.models.scan_result import ScanItem, ScanProgress, ScanResult, SkippedPath
from devjunk.utils import dir_info, format_elapsed, is_hidden

log = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], None]


def default_scan_workers() -> int:
    """Worker count for scanning, bounded regardless of input size."""
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass(slots=True)
class _Visit:
    """Findings of a single directory listing."""

    items: list[ScanItem] = field(default_factory=list)
    subdirs: list[str] = field(default_factory=list)
    skipped: list[SkippedPath] = field(default_factory=list)


class Scanner:
    """Walks root directories and reports junk directories found in them.

    Each pool task lists exactly one directory and returns what it found.
    A single coordinator (the calling thread) submits follow-up tasks for
    subdirectories and owns all aggregation, so workers share no mutable
    state.
    """

    def __init__(self, catalog: JunkCatalog, max_workers: int | None = None) -> None:
        self.catalog = catalog
        self.max_workers = max_workers or default_scan_workers()

    def scan(
        self,
        roots: Iterable[Path | str],
        options: ScanOptions | None = None,
        on_progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult:
        """Scan *roots* for junk directories.

        Args:
            roots: Directories to scan. Invalid roots are reported in
                ``ScanResult.invalid_roots`` without stopping the others.
            options: Depth limit and hidden-directory handling.
            on_progress: Receives ScanProgress snapshots from a separate
                thread; it never slows down the scan.
            cancel: Set this event to abandon the scan.

        Returns:
            Aggregated scan result.

        Raises:
            NoValidRootsError: If no root could be scanned.
            ScanCancelledError: If *cancel* was set before completion.
        """
        options = options or ScanOptions()
        cancel = cancel or threading.Event()

        valid_roots, invalid = _validate_roots(roots)
        if not valid_roots:
            raise NoValidRootsError(invalid)

        start = time.monotonic()
        channel = ProgressChannel(on_progress) if on_progress else None
        try:
            items, skipped = self._walk(valid_roots, options, cancel, channel)
        finally:
            if channel:
                channel.close()

        result = ScanResult.aggregate(
            items,
            skipped,
            [SkippedPath(e.path, e.reason) for e in invalid],
        )
        log.info(
            "Scanned %d root(s) in %s: %d items, %d bytes, %d skipped",
            len(valid_roots),
            format_elapsed(time.monotonic() - start),
            result.item_count,
            result.total_size_bytes,
            len(result.skipped),
        )
        return result

    def _walk(
        self,
        roots: list[str],
        options: ScanOptions,
        cancel: threading.Event,
        channel: ProgressChannel[ScanProgress] | None,
    ) -> tuple[list[ScanItem], list[SkippedPath]]:
        items: list[ScanItem] = []
        skipped: list[SkippedPath] = []
        dirs_scanned = 0
        pending: dict[Future[_Visit], tuple[str, int]] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="devjunk-scan") as pool:

            def submit(directory: str, depth: int) -> None:
                visit = self._visit_root if depth == 0 else self._visit
                future = pool.submit(visit, directory, depth, options, cancel)
                pending[future] = (directory, depth)

            try:
                for root in roots:
                    submit(root, 0)

                while pending:
                    done, _ = wait(pending, return_when=FIRST_COMPLETED)
                    if cancel.is_set():
                        raise ScanCancelledError("Scan cancelled")
                    for future in done:
                        directory, depth = pending.pop(future)
                        visit = future.result()
                        items.extend(visit.items)
                        skipped.extend(visit.skipped)
                        dirs_scanned += 1
                        if channel:
                            channel.publish(ScanProgress(Path(directory), len(items), dirs_scanned))
                        for subdir in visit.subdirs:
                            submit(subdir, depth + 1)
            finally:
                # Drop queued work on cancellation or an unexpected error.
                for future in pending:
                    future.cancel()

        return items, skipped

    def _visit_root(self, root: str, depth: int, options: ScanOptions, cancel: threading.Event) -> _Visit:
        """Classify a root itself, then list it unless it is junk.

        A junk-named root is one terminal item, like any matched directory;
        a symlinked root is entered but never reported. Other roots are
        always entered, hidden or not.
        """
        if options.is_excluded(root):
            log.debug("Root is excluded: %s", root)
            return _Visit()

        kind = None if os.path.islink(root) else self.catalog.classify(os.path.basename(root))
        if kind is None:
            return self._visit(root, depth, options, cancel)

        visit = _Visit()
        if not cancel.is_set():
            self._add_item(visit, root, kind)
        return visit

    def _visit(self, directory: str, depth: int, options: ScanOptions, cancel: threading.Event) -> _Visit:
        """List one directory, classifying its children.

        Children sit at ``depth + 1``; they are only classified within the
        depth limit and only descended into when their own children would
        still be within it.
        """
        visit = _Visit()
        if cancel.is_set():
            return visit

        child_depth = depth + 1
        if options.max_depth is not None and child_depth > options.max_depth:
            return visit

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            log.debug("Skipping unreadable directory %s: %s", directory, e)
            visit.skipped.append(SkippedPath(Path(directory), str(e)))
            return visit

        descend = options.max_depth is None or child_depth < options.max_depth
        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except OSError as e:
                log.debug("Cannot stat %s: %s", entry.path, e)
                continue

            if options.is_excluded(entry.path):
                continue

            kind = self.catalog.classify(entry.name)
            if kind is not None:
                self._add_item(visit, entry.path, kind)
                continue

            if is_hidden(entry.name) and not options.include_hidden:
                continue
            if descend:
                visit.subdirs.append(entry.path)

        return visit

    @staticmethod
    def _add_item(visit: _Visit, path: str, kind: JunkKind) -> None:
        """Record a terminal match, sized once and never classified further."""
        size, count, unreadable = dir_info(path)
        visit.items.append(ScanItem(Path(path), kind, size, count))
        visit.skipped.extend(SkippedPath(Path(p), error) for p, error in unreadable)
        log.debug("Found %s: %s (%d bytes)", kind.id, path, size)


def _validate_roots(roots: Iterable[Path | str]) -> tuple[list[str], list[InvalidRootError]]:
    """Normalize roots and split them into scannable and invalid ones."""
    valid: list[str] = []
    invalid: list[InvalidRootError] = []
    for root in roots:
        path = os.path.abspath(os.path.expanduser(os.fspath(root)))
        if not os.path.exists(path):
            invalid.append(InvalidRootError(Path(path), "Path does not exist"))
        elif not os.path.isdir(path):
            invalid.append(InvalidRootError(Path(path), "Path is not a directory"))
        elif path not in valid:
            valid.append(path)

    for error in invalid:
        log.warning("%s", error)

    return valid, invalid
