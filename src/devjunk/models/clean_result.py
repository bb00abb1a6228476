"""Cleaning result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from devjunk.utils import bytes_to_human


@dataclass(frozen=True, slots=True)
class CleanFailure:
    """A selected path that could not be removed."""

    path: Path
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"path": str(self.path), "error": self.error}


@dataclass(frozen=True, slots=True)
class CleanOutcome:
    """What happened to one requested path. ``error`` is None on success."""

    path: Path
    size_bytes: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Result of a cleaning operation.

    ``deleted`` and ``failed`` partition the requested paths. ``bytes_freed``
    is the sum of the known sizes of deleted paths; it is never measured
    from disk after the fact.
    """

    deleted: tuple[Path, ...] = ()
    failed: tuple[CleanFailure, ...] = ()
    bytes_freed: int = 0
    was_dry_run: bool = False

    @classmethod
    def aggregate(cls, outcomes: Iterable[CleanOutcome], was_dry_run: bool) -> CleanResult:
        deleted: list[Path] = []
        failed: list[CleanFailure] = []
        freed = 0
        for outcome in outcomes:
            if outcome.ok:
                deleted.append(outcome.path)
                freed += outcome.size_bytes
            else:
                failed.append(CleanFailure(outcome.path, outcome.error))
        return cls(deleted=tuple(deleted), failed=tuple(failed), bytes_freed=freed, was_dry_run=was_dry_run)

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def is_success(self) -> bool:
        return not self.failed

    @property
    def bytes_freed_display(self) -> str:
        return bytes_to_human(self.bytes_freed)

    def to_dict(self) -> dict[str, Any]:
        return {
            "deleted": [str(p) for p in self.deleted],
            "deletedCount": self.deleted_count,
            "failed": [f.to_dict() for f in self.failed],
            "failedCount": self.failed_count,
            "bytesFreed": self.bytes_freed,
            "bytesFreedDisplay": self.bytes_freed_display,
            "wasDryRun": self.was_dry_run,
            "isSuccess": self.is_success,
        }
