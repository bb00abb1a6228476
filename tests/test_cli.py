"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from devjunk.cli import main
from devjunk.kinds import BUILTIN_KINDS


@pytest.fixture
def runner():
    return CliRunner()


class TestTypes:
    def test_json(self, runner):
        result = runner.invoke(main, ["types", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [k["id"] for k in data] == [k.id for k in BUILTIN_KINDS]

    def test_table(self, runner):
        result = runner.invoke(main, ["types"])

        assert result.exit_code == 0
        assert "node_modules" in result.output
        assert "Python" in result.output


class TestScan:
    def test_json(self, runner, project):
        result = runner.invoke(main, ["scan", str(project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["itemCount"] == 2
        assert data["totalSizeBytes"] == 30
        # Sorted by size by default.
        assert [i["kind"] for i in data["items"]] == ["node_modules", "python_venv"]

    def test_table(self, runner, project):
        result = runner.invoke(main, ["scan", str(project)])

        assert result.exit_code == 0
        assert "node_modules" in result.output
        assert "Total: 2 directories" in result.output

    def test_max_depth(self, runner, project):
        result = runner.invoke(main, ["scan", str(project), "--max-depth", "1", "--json"])
        assert json.loads(result.output)["itemCount"] == 0

    def test_exclude(self, runner, project):
        excluded = project / "proj" / "node_modules"

        result = runner.invoke(main, ["scan", str(project), "--exclude", str(excluded), "--json"])

        assert result.exit_code == 0
        assert [i["kind"] for i in json.loads(result.output)["items"]] == ["python_venv"]

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path / "missing")])

        assert result.exit_code != 0
        assert "Path does not exist" in result.output

    def test_nothing_found(self, runner, tmp_path):
        result = runner.invoke(main, ["scan", str(tmp_path)])

        assert result.exit_code == 0
        assert "No junk directories found." in result.output

    def test_scan_never_deletes(self, runner, project):
        runner.invoke(main, ["scan", str(project)])
        assert (project / "proj" / ".venv").exists()


class TestClean:
    def test_dry_run_json(self, runner, project):
        result = runner.invoke(main, ["clean", str(project), "--dry-run", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["wasDryRun"] is True
        assert data["deletedCount"] == 2
        assert data["bytesFreed"] == 30
        assert (project / "proj" / ".venv").exists()
        assert (project / "proj" / "node_modules").exists()

    def test_kind_filter_with_yes(self, runner, project):
        result = runner.invoke(main, ["clean", str(project), "--kind", "venv", "-y"])

        assert result.exit_code == 0
        assert not (project / "proj" / ".venv").exists()
        assert (project / "proj" / "node_modules").exists()

    def test_exclude_keeps_excluded_directories(self, runner, project):
        result = runner.invoke(main, ["clean", str(project), "-e", str(project / "proj" / ".venv"), "-y"])

        assert result.exit_code == 0
        assert (project / "proj" / ".venv").exists()
        assert not (project / "proj" / "node_modules").exists()

    def test_unknown_kind(self, runner, project):
        result = runner.invoke(main, ["clean", str(project), "--kind", "cobol", "-y"])

        assert result.exit_code == 2
        assert (project / "proj" / ".venv").exists()

    def test_prompt_declined(self, runner, project):
        result = runner.invoke(main, ["clean", str(project)], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert (project / "proj" / ".venv").exists()

    def test_prompt_accepted(self, runner, project):
        result = runner.invoke(main, ["clean", str(project)], input="y\n")

        assert result.exit_code == 0
        assert "Deleted: 2 directories" in result.output
        assert not (project / "proj" / ".venv").exists()

    def test_interactive_select(self, runner, project):
        # Items are listed largest first, so [1] is node_modules.
        result = runner.invoke(main, ["clean", str(project)], input="select\n1\n")

        assert result.exit_code == 0
        assert not (project / "proj" / "node_modules").exists()
        assert (project / "proj" / ".venv").exists()

    def test_nothing_to_clean_json(self, runner, tmp_path):
        result = runner.invoke(main, ["clean", str(tmp_path), "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["deletedCount"] == 0

    def test_failure_exits_nonzero(self, runner, project, monkeypatch):
        def refuse(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr("devjunk.core.cleaner.remove_tree", refuse)

        result = runner.invoke(main, ["clean", str(project), "-y"])

        assert result.exit_code == 1
        assert "Failed to delete 2 directories" in result.output
