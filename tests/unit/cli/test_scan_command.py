"""Unit tests for the scan commands."""

import json
from collections.abc import Callable
from pathlib import Path

from devtree.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()

MakeTree = Callable[[dict[str, str | None]], Path]


class TestScanExtensions:
    """Tests for devtree scan extensions."""

    def test_table_output(self, python_project: Path) -> None:
        """Visible extensions are listed in a table."""
        result = runner.invoke(app, ["scan", "extensions", str(python_project)])

        assert result.exit_code == 0
        assert ".py" in result.stdout
        assert ".toml" in result.stdout
        assert ".log" not in result.stdout
        assert "Found 3 extensions" in result.stdout

    def test_json_output(self, python_project: Path) -> None:
        """JSON output carries the sorted list and access flags."""
        result = runner.invoke(
            app, ["scan", "extensions", str(python_project), "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["root"] == str(python_project.resolve())
        assert data["extensions"] == [".md", ".py", ".toml"]
        assert data["root_access_denied"] is False
        assert data["had_access_denied"] is False

    def test_root_only(self, python_project: Path) -> None:
        """--root-only skips subdirectories."""
        result = runner.invoke(
            app, ["scan", "extensions", str(python_project), "--root-only", "-f", "json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["extensions"] == [".md", ".toml"]

    def test_folder_selection(self, make_tree: MakeTree) -> None:
        """--folder adds the selected folders to the root files."""
        root = make_tree({"README.md": "", "src/a.py": "", "docs/b.rst": ""})

        result = runner.invoke(
            app, ["scan", "extensions", str(root), "--folder", "docs", "-f", "json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["extensions"] == [".md", ".rst"]

    def test_root_only_conflicts_with_folder(self, python_project: Path) -> None:
        """--root-only and --folder are mutually exclusive."""
        result = runner.invoke(
            app, ["scan", "extensions", str(python_project), "--root-only", "--folder", "src"]
        )

        assert result.exit_code == 1
        assert "cannot be combined" in result.output

    def test_no_gitignore(self, python_project: Path) -> None:
        """--no-gitignore includes gitignored files."""
        result = runner.invoke(
            app, ["scan", "extensions", str(python_project), "--no-gitignore", "-f", "json"]
        )

        assert result.exit_code == 0
        assert ".log" in json.loads(result.stdout)["extensions"]

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory reports that nothing was found."""
        result = runner.invoke(app, ["scan", "extensions", str(tmp_path)])

        assert result.exit_code == 0
        assert "No extensions found" in result.stdout


class TestScanFolders:
    """Tests for devtree scan folders."""

    def test_table_output(self, python_project: Path) -> None:
        """Visible top-level folders are listed."""
        result = runner.invoke(app, ["scan", "folders", str(python_project)])

        assert result.exit_code == 0
        assert "src" in result.stdout
        assert "tests" in result.stdout
        assert "Found 2 folders" in result.stdout

    def test_json_output(self, python_project: Path) -> None:
        """Ignored, artifact and dot folders are excluded."""
        result = runner.invoke(app, ["scan", "folders", str(python_project), "-f", "JSON"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["folders"] == ["src", "tests"]

    def test_missing_path(self, tmp_path: Path) -> None:
        """A missing path exits with code 1."""
        result = runner.invoke(app, ["scan", "folders", str(tmp_path / "missing")])
        assert result.exit_code == 1
