"""Built-in junk kinds."""

from __future__ import annotations

from functools import lru_cache

from devjunk.core.catalog import JunkCatalog
from devjunk.models.junk_kind import JunkKind, KindGroup

_PYTHON = KindGroup("python", "Python", "Virtual environments, bytecode and tool caches")
_NODE = KindGroup("node", "Node.js", "Installed packages and framework build output")
_RUST = KindGroup("rust", "Rust", "Cargo build output")
_GO = KindGroup("go", "Go", "Vendored dependencies")
_GENERIC = KindGroup("generic", "Build output", "Common build and distribution directories")

BUILTIN_KINDS: tuple[JunkKind, ...] = (
    JunkKind("python_venv", "Python Venv", (".venv", "venv"), "Python virtual environment", _PYTHON),
    JunkKind("python_tox", "Python Tox", (".tox",), "tox test environments", _PYTHON),
    JunkKind("python_cache", "Python Cache", ("__pycache__",), "Compiled bytecode", _PYTHON),
    JunkKind("mypy_cache", "Mypy Cache", (".mypy_cache",), "mypy type checker cache", _PYTHON),
    JunkKind("pytest_cache", "Pytest Cache", (".pytest_cache",), "pytest cache", _PYTHON),
    JunkKind("ruff_cache", "Ruff Cache", (".ruff_cache",), "Ruff linter cache", _PYTHON),
    JunkKind("python_egg_info", "Egg Info", ("*.egg-info",), "setuptools package metadata", _PYTHON),
    JunkKind("node_modules", "Node Modules", ("node_modules",), "Installed npm packages", _NODE),
    JunkKind("next_dir", "Next.js", (".next",), "Next.js build output", _NODE),
    JunkKind("nuxt_dir", "Nuxt.js", (".nuxt",), "Nuxt.js build output", _NODE),
    JunkKind("rust_target", "Rust Target", ("target",), "Cargo target directory", _RUST),
    JunkKind("go_vendor", "Go Vendor", ("vendor",), "Vendored Go modules", _GO),
    JunkKind("build_dir", "Build Dir", ("build",), "Generic build output", _GENERIC),
    JunkKind("dist_dir", "Dist Dir", ("dist",), "Generic distribution output", _GENERIC),
    JunkKind("out_dir", "Out Dir", ("out",), "Generic output directory", _GENERIC),
)


@lru_cache(maxsize=None)
def default_catalog() -> JunkCatalog:
    """Return the process-wide catalog of built-in kinds."""
    return JunkCatalog(BUILTIN_KINDS)
