"""Tests for the junk catalog and built-in kinds."""

from __future__ import annotations

import pytest

from devjunk.core.catalog import JunkCatalog
from devjunk.core.errors import CatalogConflictError, UnknownKindError
from devjunk.kinds import BUILTIN_KINDS, default_catalog
from devjunk.models.junk_kind import JunkKind


class TestClassify:
    def test_exact_names(self, catalog):
        assert catalog.classify(".venv").id == "python_venv"
        assert catalog.classify("venv").id == "python_venv"
        assert catalog.classify("node_modules").id == "node_modules"

    def test_no_match(self, catalog):
        assert catalog.classify("src") is None

    def test_case_sensitive(self, catalog):
        assert catalog.classify("Node_Modules") is None
        assert catalog.classify("VENV") is None

    def test_full_basename_only(self):
        catalog = JunkCatalog([JunkKind("build_dir", "Build Dir", ("build",))])
        assert catalog.classify("my-build-archive") is None
        assert catalog.classify("build2") is None
        assert catalog.classify("build").id == "build_dir"

    def test_glob_pattern(self):
        catalog = JunkCatalog([JunkKind("egg", "Egg Info", ("*.egg-info",))])
        assert catalog.classify("devjunk.egg-info").id == "egg"
        assert catalog.classify("devjunk.egg-info.bak") is None

    def test_idempotent(self, catalog):
        assert catalog.classify("venv") is catalog.classify("venv")

    def test_catalog_order_breaks_glob_ties(self):
        catalog = JunkCatalog([
            JunkKind("first", "First", ("foo*",)),
            JunkKind("second", "Second", ("*bar",)),
        ])
        assert catalog.classify("foobar").id == "first"


class TestConstruction:
    def test_shared_pattern_rejected(self):
        with pytest.raises(CatalogConflictError):
            JunkCatalog([
                JunkKind("a", "A", ("build",)),
                JunkKind("b", "B", ("out", "build")),
            ])

    def test_duplicate_id_rejected(self):
        with pytest.raises(CatalogConflictError):
            JunkCatalog([
                JunkKind("a", "A", ("x",)),
                JunkKind("a", "Also A", ("y",)),
            ])

    def test_glob_overlapping_exact_name_rejected(self):
        with pytest.raises(CatalogConflictError):
            JunkCatalog([
                JunkKind("dist_dir", "Dist", ("dist",)),
                JunkKind("anything_d", "D*", ("d*",)),
            ])

    def test_glob_may_cover_own_exact_name(self):
        catalog = JunkCatalog([JunkKind("venvs", "Venvs", ("venv", "venv*"))])
        assert catalog.classify("venv").id == "venvs"
        assert catalog.classify("venv3").id == "venvs"


class TestIntrospection:
    def test_list_kinds_keeps_order(self, catalog):
        assert [k.id for k in catalog.list_kinds()] == ["python_venv", "node_modules"]

    def test_get_and_contains(self, catalog):
        assert catalog.get("node_modules").name == "Node Modules"
        assert catalog.get("missing") is None
        assert "python_venv" in catalog
        assert len(catalog) == 2

    def test_select_by_substring(self):
        selected = default_catalog().select(["PYTHON"])
        assert selected.list_kinds()
        assert all("python" in k.id for k in selected)

    def test_select_unknown_raises(self, catalog):
        with pytest.raises(UnknownKindError):
            catalog.select(["cobol"])

    def test_kind_to_dict(self, catalog):
        data = catalog.get("python_venv").to_dict()
        assert data["id"] == "python_venv"
        assert data["displayName"] == "Python Venv"
        assert data["patterns"] == [".venv", "venv"]


class TestBuiltinKinds:
    def test_default_catalog_loads(self):
        assert len(default_catalog()) == len(BUILTIN_KINDS)

    def test_default_catalog_is_shared(self):
        assert default_catalog() is default_catalog()

    @pytest.mark.parametrize(
        ("name", "kind_id"),
        [
            ("node_modules", "node_modules"),
            (".venv", "python_venv"),
            ("__pycache__", "python_cache"),
            ("target", "rust_target"),
            ("pkg.egg-info", "python_egg_info"),
            (".next", "next_dir"),
        ],
    )
    def test_known_names(self, name, kind_id):
        assert default_catalog().classify(name).id == kind_id

    def test_every_kind_has_a_group(self):
        assert all(k.group is not None for k in default_catalog())
