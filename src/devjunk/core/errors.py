"""Exceptions raised across the scan/clean call boundary.

Per-path problems (unreadable subdirectories, undeletable paths) are not
raised; they are reported as data inside ScanResult and CleanResult.
"""

from __future__ import annotations

from pathlib import Path


class DevJunkError(Exception):
    """Base class for devjunk errors."""


class InvalidRootError(DevJunkError):
    """A scan root does not exist or is not a directory."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{reason}: {path}")
        self.path = path
        self.reason = reason


class NoValidRootsError(DevJunkError):
    """Every scan root was invalid, so there was nothing to scan."""

    def __init__(self, errors: list[InvalidRootError]) -> None:
        if errors:
            message = "; ".join(str(e) for e in errors)
        else:
            message = "No scan roots given"
        super().__init__(message)
        self.errors = errors


class CatalogConflictError(DevJunkError):
    """Two junk kinds claim the same id or an overlapping pattern."""


class UnknownKindError(DevJunkError):
    """A kind filter matched no junk kind in the catalog."""


class ScanCancelledError(DevJunkError):
    """The scan was cancelled before it finished. No partial result exists."""
