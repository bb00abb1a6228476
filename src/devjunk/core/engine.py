"""Scanning and cleaning orchestration engine."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Iterable

from devjunk.core.catalog import JunkCatalog
from devjunk.core.cleaner import Cleaner, ProgressCallback as CleanProgressCallback
from devjunk.core.scanner import ProgressCallback as ScanProgressCallback, Scanner
from devjunk.kinds import default_catalog
from devjunk.models.clean_result import CleanResult
from devjunk.models.junk_kind import JunkKind
from devjunk.models.scan_options import ScanOptions
from devjunk.models.scan_result import ScanResult

log = logging.getLogger(__name__)


class DevJunkEngine:
    """Entry point tying a catalog to a scanner and a cleaner.

    The engine remembers the most recent scan in memory so that ``clean``
    can account bytes for paths the caller only names. A fully successful
    real clean forgets that scan, since its items are no longer valid.
    """

    def __init__(
        self,
        catalog: JunkCatalog | None = None,
        scan_workers: int | None = None,
        clean_workers: int = 4,
    ) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.scanner = Scanner(self.catalog, max_workers=scan_workers)
        self.cleaner = Cleaner(max_workers=clean_workers)
        self._last_scan: ScanResult | None = None
        self._lock = threading.Lock()

    def list_junk_kinds(self) -> list[JunkKind]:
        """All junk kinds this engine recognizes, in catalog order."""
        return self.catalog.list_kinds()

    def scan(
        self,
        roots: Iterable[Path | str],
        options: ScanOptions | None = None,
        on_progress: ScanProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> ScanResult:
        """Scan roots for junk directories. See Scanner.scan."""
        result = self.scanner.scan(roots, options, on_progress=on_progress, cancel=cancel)
        with self._lock:
            self._last_scan = result
        return result

    def clean(
        self,
        paths: Iterable[Path | str],
        dry_run: bool,
        sizes: dict[Path, int] | None = None,
        on_progress: CleanProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> CleanResult:
        """Delete paths, taking sizes from the last scan unless given."""
        if sizes is None:
            sizes = self._last_scan_sizes()
        result = self.cleaner.clean(paths, dry_run, sizes=sizes, on_progress=on_progress, cancel=cancel)
        if result.is_success and not dry_run:
            self.forget_last_scan()
        return result

    def get_last_scan(self) -> ScanResult | None:
        """Get the cached result of the most recent scan."""
        with self._lock:
            return self._last_scan

    def forget_last_scan(self) -> None:
        with self._lock:
            self._last_scan = None

    def _last_scan_sizes(self) -> dict[Path, int]:
        last = self.get_last_scan()
        if last is None:
            log.debug("No previous scan, sizes of cleaned paths are unknown")
            return {}
        return last.sizes()
