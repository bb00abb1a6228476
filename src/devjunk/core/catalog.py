"""Central junk kind catalog."""

from __future__ import annotations

import logging
from fnmatch import fnmatchcase
from typing import Iterable, Iterator

from devjunk.core.errors import CatalogConflictError, UnknownKindError
from devjunk.models.junk_kind import JunkKind

log = logging.getLogger(__name__)


class JunkCatalog:
    """Immutable, ordered registry of junk kinds.

    Catalog order is the tie-break when more than one kind could match a
    name. Construction fails with CatalogConflictError if two kinds share an
    id or a pattern, or if a glob of one kind matches an exact name of
    another, so that classification is never ambiguous for listed names.
    """

    def __init__(self, kinds: Iterable[JunkKind]) -> None:
        self._kinds: tuple[JunkKind, ...] = tuple(kinds)
        self._by_id: dict[str, JunkKind] = {}
        self._exact: dict[str, JunkKind] = {}
        self._globs: list[tuple[str, JunkKind]] = []

        for kind in self._kinds:
            if kind.id in self._by_id:
                raise CatalogConflictError(f"Junk kind '{kind.id}' is defined more than once")
            self._by_id[kind.id] = kind

        owners: dict[str, JunkKind] = {}
        for kind in self._kinds:
            for pattern in kind.patterns:
                other = owners.get(pattern)
                if other is not None:
                    raise CatalogConflictError(
                        f"Pattern '{pattern}' is claimed by both '{other.id}' and '{kind.id}'"
                    )
                owners[pattern] = kind
            self._exact.update((p, kind) for p in kind.exact_patterns)
            self._globs.extend((p, kind) for p in kind.glob_patterns)

        for glob, glob_kind in self._globs:
            for name, exact_kind in self._exact.items():
                if exact_kind is not glob_kind and fnmatchcase(name, glob):
                    raise CatalogConflictError(
                        f"Pattern '{glob}' of '{glob_kind.id}' also matches "
                        f"'{name}' of '{exact_kind.id}'"
                    )

        log.debug("Catalog built with %d junk kinds", len(self._kinds))

    def classify(self, name: str) -> JunkKind | None:
        """Return the kind a directory basename belongs to, or None."""
        # Exact hits cannot also match a foreign glob, construction rejects that.
        kind = self._exact.get(name)
        if kind is not None:
            return kind
        for pattern, kind in self._globs:
            if fnmatchcase(name, pattern):
                return kind
        return None

    def list_kinds(self) -> list[JunkKind]:
        """All kinds in catalog order."""
        return list(self._kinds)

    def get(self, kind_id: str) -> JunkKind | None:
        """Get a kind by its id."""
        return self._by_id.get(kind_id)

    def select(self, filters: Iterable[str]) -> JunkCatalog:
        """Build a sub-catalog of kinds whose id contains any of *filters*.

        Matching is case-insensitive, so ``python`` selects every Python kind.

        Raises:
            UnknownKindError: If no kind matches any filter.
        """
        needles = [f.lower() for f in filters if f]
        selected = [k for k in self._kinds if any(n in k.id.lower() for n in needles)]
        if not selected:
            raise UnknownKindError(f"No junk kind matches: {', '.join(needles) or '(empty filter)'}")
        return JunkCatalog(selected)

    def __len__(self) -> int:
        return len(self._kinds)

    def __iter__(self) -> Iterator[JunkKind]:
        return iter(self._kinds)

    def __contains__(self, kind_id: str) -> bool:
        return kind_id in self._by_id
