"""Scan configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling a directory scan.

    ``max_depth`` counts from the scan root: the root is depth 0 and its
    immediate children are depth 1. Directories deeper than ``max_depth``
    are neither classified nor descended into. ``None`` means unlimited.

    ``exclude_paths`` are skipped along with everything below them. They
    are normalized to absolute paths on construction.
    """

    max_depth: int | None = None
    include_hidden: bool = False
    exclude_paths: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")
        excluded = tuple(
            Path(os.path.abspath(os.path.expanduser(os.fspath(p)))) for p in self.exclude_paths
        )
        object.__setattr__(self, "exclude_paths", excluded)

    def is_excluded(self, path: Path | str) -> bool:
        """Whether *path* is an excluded path or lies below one."""
        if not self.exclude_paths:
            return False
        path = Path(path)
        return any(path == exc or exc in path.parents for exc in self.exclude_paths)
