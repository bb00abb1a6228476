"""Junk kind definitions."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any

_GLOB_CHARS = frozenset("*?[")


def is_glob(pattern: str) -> bool:
    """Whether *pattern* uses glob syntax rather than naming a directory exactly."""
    return any(ch in _GLOB_CHARS for ch in pattern)


@dataclass(frozen=True)
class KindGroup:
    """Display grouping for related junk kinds."""

    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class JunkKind:
    """A category of disposable development directory.

    Patterns are matched against the full directory basename and are
    case-sensitive. A pattern is either an exact name (``node_modules``)
    or a simple glob (``*.egg-info``); globs never descend into paths.
    """

    id: str
    name: str
    patterns: tuple[str, ...]
    description: str = ""
    group: KindGroup | None = None

    @property
    def exact_patterns(self) -> tuple[str, ...]:
        return tuple(p for p in self.patterns if not is_glob(p))

    @property
    def glob_patterns(self) -> tuple[str, ...]:
        return tuple(p for p in self.patterns if is_glob(p))

    def matches(self, name: str) -> bool:
        """Check whether a directory basename belongs to this kind."""
        for pattern in self.patterns:
            if is_glob(pattern):
                if fnmatchcase(name, pattern):
                    return True
            elif name == pattern:
                return True
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.name,
            "patterns": list(self.patterns),
            "description": self.description,
            "group": {"id": self.group.id, "name": self.group.name} if self.group else None,
        }

    def __str__(self) -> str:
        return self.name
