"""Scan result dataclasses."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from devjunk.models.junk_kind import JunkKind
from devjunk.utils import bytes_to_human

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanItem:
    """One matched junk directory.

    ``size_bytes`` and ``file_count`` cover regular files in the whole
    subtree; symlinks are never followed.
    """

    path: Path
    kind: JunkKind
    size_bytes: int
    file_count: int

    @property
    def size_display(self) -> str:
        return bytes_to_human(self.size_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "kind": self.kind.id,
            "kindDisplay": self.kind.name,
            "sizeBytes": self.size_bytes,
            "sizeDisplay": self.size_display,
            "fileCount": self.file_count,
        }


@dataclass(frozen=True, slots=True)
class SkippedPath:
    """A path the scanner could not use, with the reason."""

    path: Path
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"path": str(self.path), "error": self.error}


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Snapshot of a running scan. Each snapshot replaces the previous one."""

    current_path: Path
    items_found: int
    dirs_scanned: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentPath": str(self.current_path),
            "itemsFound": self.items_found,
            "dirsScanned": self.dirs_scanned,
        }


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Result of scanning one or more roots for junk directories."""

    items: tuple[ScanItem, ...] = ()
    skipped: tuple[SkippedPath, ...] = ()
    invalid_roots: tuple[SkippedPath, ...] = ()

    @classmethod
    def aggregate(
        cls,
        items: Iterable[ScanItem],
        skipped: Iterable[SkippedPath] = (),
        invalid_roots: Iterable[SkippedPath] = (),
    ) -> ScanResult:
        """Reduce raw scan findings into a result.

        Items are deduplicated by path, keeping the first occurrence, and
        any item lying inside another item's directory is dropped so that
        overlapping roots never report a junk directory twice.
        """
        unique: dict[Path, ScanItem] = {}
        for item in items:
            if item.path in unique:
                log.debug("Dropping duplicate item: %s", item.path)
                continue
            unique[item.path] = item

        kept = tuple(
            item for item in unique.values()
            if not any(parent in unique for parent in item.path.parents)
        )
        if len(kept) != len(unique):
            log.debug("Dropped %d items nested in other items", len(unique) - len(kept))

        return cls(items=kept, skipped=tuple(skipped), invalid_roots=tuple(invalid_roots))

    @property
    def total_size_bytes(self) -> int:
        return sum(item.size_bytes for item in self.items)

    @property
    def total_file_count(self) -> int:
        return sum(item.file_count for item in self.items)

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def total_size_display(self) -> str:
        return bytes_to_human(self.total_size_bytes)

    def sorted_by_size(self) -> ScanResult:
        """Return a copy with the largest items first."""
        items = tuple(sorted(self.items, key=lambda i: i.size_bytes, reverse=True))
        return ScanResult(items=items, skipped=self.skipped, invalid_roots=self.invalid_roots)

    def sorted_by_path(self) -> ScanResult:
        """Return a copy with items ordered by path."""
        items = tuple(sorted(self.items, key=lambda i: i.path))
        return ScanResult(items=items, skipped=self.skipped, invalid_roots=self.invalid_roots)

    def sizes(self) -> dict[Path, int]:
        """Map each item path to its size, as consumed by the cleaner."""
        return {item.path: item.size_bytes for item in self.items}

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "totalSizeBytes": self.total_size_bytes,
            "totalSizeDisplay": self.total_size_display,
            "totalFileCount": self.total_file_count,
            "itemCount": self.item_count,
            "skipped": [s.to_dict() for s in self.skipped],
            "invalidRoots": [s.to_dict() for s in self.invalid_roots],
        }
