"""Unit tests for the check command."""

import json
from pathlib import Path
from typing import Any

from devtree.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def check_json(root: Path, *targets: str) -> list[dict[str, Any]]:
    """Run check with JSON output and return the parsed rows."""
    result = runner.invoke(app, ["check", "--root", str(root), "--format", "json", *targets])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCheckCommand:
    """Tests for devtree check."""

    def test_visible_path(self, python_project: Path) -> None:
        """Visible paths report no layer."""
        (row,) = check_json(python_project, "src/demo/core.py")

        assert row["target"] == "src/demo/core.py"
        assert row["exists"] is True
        assert row["ignored"] is False
        assert row["layer"] is None
        assert row["source"] is None

    def test_gitignored_ancestor(self, python_project: Path) -> None:
        """Entries inside an ignored directory name that directory."""
        (row,) = check_json(python_project, "build/lib/demo.py")

        root = python_project.resolve()
        assert row["ignored"] is True
        assert row["layer"] == "gitignore"
        assert row["source"] == str(root / "build")

    def test_layers(self, python_project: Path) -> None:
        """Each row reports the layer that decided it."""
        rows = check_json(python_project, "debug.log", "src/demo/__pycache__", ".venv/bin/python")

        assert [row["layer"] for row in rows] == ["gitignore", "smart", "dot"]

    def test_missing_path(self, python_project: Path) -> None:
        """Missing paths are reported as not existing."""
        (row,) = check_json(python_project, "nope.txt")

        assert row["exists"] is False
        assert row["ignored"] is False

    def test_path_outside_root_skipped(self, python_project: Path) -> None:
        """Targets outside the root are skipped with a warning."""
        result = runner.invoke(app, ["check", "--root", str(python_project), "../elsewhere"])

        assert result.exit_code == 0
        assert "Skipping path outside" in result.output

    def test_no_gitignore(self, python_project: Path) -> None:
        """Disabling the gitignore layer makes ignored files visible."""
        result = runner.invoke(
            app,
            ["check", "-r", str(python_project), "--no-gitignore", "-f", "json", "debug.log"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]["ignored"] is False

    def test_table_output(self, python_project: Path) -> None:
        """Table output shows a status per path."""
        result = runner.invoke(
            app, ["check", "-r", str(python_project), "README.md", "debug.log", "gone.txt"]
        )

        assert result.exit_code == 0
        assert "visible" in result.stdout
        assert "ignored" in result.stdout
        assert "missing" in result.stdout
        assert "gitignore" in result.stdout
