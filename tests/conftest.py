"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from devjunk.core.catalog import JunkCatalog
from devjunk.models.junk_kind import JunkKind


def _write(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def write():
    """Create a file of a given size, making parent directories as needed."""
    return _write


@pytest.fixture
def catalog() -> JunkCatalog:
    """Two-kind catalog matching the documented end-to-end scenario."""
    return JunkCatalog([
        JunkKind("python_venv", "Python Venv", (".venv", "venv")),
        JunkKind("node_modules", "Node Modules", ("node_modules",)),
    ])


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A root holding one project with a venv, node_modules and sources.

    root/proj/.venv/lib/foo.py             10 bytes
    root/proj/node_modules/pkg/index.js    20 bytes
    root/proj/src/main.py                   5 bytes
    """
    root = tmp_path / "root"
    _write(root / "proj" / ".venv" / "lib" / "foo.py", 10)
    _write(root / "proj" / "node_modules" / "pkg" / "index.js", 20)
    _write(root / "proj" / "src" / "main.py", 5)
    return root
