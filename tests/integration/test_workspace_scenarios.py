"""Integration tests for whole-workspace scans.

These tests verify the end-to-end workflow from scope discovery through
rule building to tree and inventory output, including multi-project
workspaces and nested ignore files.
"""

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from devtree.cli.main import app
from devtree.core.pathcmp import file_extension
from devtree.core.scan_options import ScanOptionsUseCase
from devtree.filesystem.models import TreeFilterOptions, TreeNode
from devtree.filesystem.scanner import FileSystemScanner
from devtree.filesystem.tree import TreeBuilder
from devtree.ignore.builder import IgnoreOption, IgnoreRulesBuilder
from devtree.ignore.rules import IgnoreRules
from typer.testing import CliRunner

runner = CliRunner()

MakeTree = Callable[[dict[str, str | None]], Path]

DEFAULT_OPTIONS = set(IgnoreOption) - {IgnoreOption.EXTENSIONLESS_FILES}


@pytest.fixture
def monorepo(make_tree: MakeTree) -> Path:
    """Workspace with a frontend and a backend project and no root marker."""
    return make_tree(
        {
            "frontend/package.json": "{}",
            "frontend/src/app.ts": "",
            "frontend/node_modules/left-pad/index.js": "",
            "frontend/dist/bundle.js": "",
            "backend/pyproject.toml": "",
            "backend/.gitignore": "*.db\n",
            "backend/app.db": "",
            "backend/app/main.py": "",
            "backend/app/__pycache__/main.cpython-312.pyc": "",
            "notes": None,
        }
    )


@pytest.fixture
def docs_project(make_tree: MakeTree) -> Path:
    """Project whose docs folder carries its own ignore file."""
    return make_tree(
        {
            "pyproject.toml": "",
            ".gitignore": "*.tmp\n",
            "docs/.gitignore": "_build/\n",
            "docs/_build/index.html": "",
            "docs/index.rst": "",
            "docs/draft.tmp": "",
            "src/pkg/__init__.py": "",
        }
    )


def tree_for(root: Path, options: set[IgnoreOption] | None = None) -> TreeNode:
    """Build rules and tree for ``root``."""
    rules = IgnoreRulesBuilder().build(str(root), options or DEFAULT_OPTIONS)
    node = TreeBuilder().build(str(root), TreeFilterOptions(ignore_rules=rules)).value
    assert node is not None
    return node


def names(node: TreeNode, *path: str) -> list[str]:
    """Return child names of the node reached by ``path``."""
    for name in path:
        found = node.find(name)
        assert found is not None
        node = found
    return node.child_names


def scan_all(root: Path) -> tuple[IgnoreRules, TreeNode, set[str], list[str]]:
    """Run the tree and both inventories over ``root`` with the same rules."""
    rules = IgnoreRulesBuilder().build(str(root), DEFAULT_OPTIONS)
    tree = TreeBuilder().build(str(root), TreeFilterOptions(ignore_rules=rules)).value
    assert tree is not None
    scanner = FileSystemScanner()
    extensions = scanner.get_extensions(str(root), rules).value
    folders = scanner.get_root_folder_names(str(root), rules).value
    return rules, tree, extensions, folders


def tree_extensions(node: TreeNode) -> set[str]:
    """Return the extensions of every file in a tree."""
    return {file_extension(n.name) for n in node.walk() if not n.is_directory} - {""}


def tree_folders(node: TreeNode) -> list[str]:
    """Return the names of the root's directory children."""
    return [n.name for n in node.children if n.is_directory]


class TestScanModesAgree:
    """Gitignore scenarios checked across the tree and both inventories."""

    def test_negated_log_file(self, make_tree: MakeTree) -> None:
        """``bin/``, ``*.log`` and ``!important.log`` keep only important.log."""
        root = make_tree(
            {
                ".gitignore": "bin/\n*.log\n!important.log\n",
                "bin/x.txt": "",
                "app.log": "",
                "important.log": "",
            }
        )

        rules, tree, extensions, folders = scan_all(root)

        assert tree.child_names == ["important.log"]
        assert extensions == {".log"}
        assert folders == []
        assert rules.is_ignored(str(root / "app.log"), False, "app.log") is True
        assert extensions == tree_extensions(tree)
        assert folders == tree_folders(tree)

    def test_contents_pattern_hides_obj_directories(self, make_tree: MakeTree) -> None:
        """``**/obj/*`` hides both obj directories when no negation exists."""
        root = make_tree(
            {
                ".gitignore": "**/obj/*\n",
                "repo/obj/a.o": "",
                "repo/src/obj/b.o": "",
                "repo/src/main.c": "",
            }
        )

        rules, tree, extensions, folders = scan_all(root)

        assert names(tree, "repo") == ["src"]
        assert names(tree, "repo", "src") == ["main.c"]
        assert rules.is_ignored(str(root / "repo" / "obj"), True, "obj") is True
        assert rules.is_ignored(str(root / "repo" / "src" / "obj"), True, "obj") is True
        assert extensions == {".c"}
        assert folders == ["repo"]
        assert extensions == tree_extensions(tree)
        assert folders == tree_folders(tree)

    def test_negation_keeps_obj_directories_visible(self, make_tree: MakeTree) -> None:
        """Adding a negation leaves the emptied obj directories in every mode."""
        root = make_tree(
            {
                ".gitignore": "**/obj/*\n!keep.me\n",
                "repo/obj/a.o": "",
                "repo/src/main.c": "",
            }
        )

        _, tree, extensions, folders = scan_all(root)

        assert names(tree, "repo") == ["obj", "src"]
        assert names(tree, "repo", "obj") == []
        assert extensions == tree_extensions(tree) == {".c"}
        assert folders == tree_folders(tree) == ["repo"]


class TestMonorepo:
    """Workspaces holding several independent projects."""

    def test_each_project_uses_its_own_rules(self, monorepo: Path) -> None:
        """Artifacts and ignored files are hidden per project."""
        tree = tree_for(monorepo)

        assert tree.child_names == ["backend", "frontend", "notes"]
        assert names(tree, "frontend") == ["src", "package.json"]
        assert names(tree, "backend") == ["app", "pyproject.toml"]
        assert names(tree, "backend", "app") == ["main.py"]

    def test_smart_ignore_toggle_is_independent(self, monorepo: Path) -> None:
        """Without smart ignore, artifacts reappear while gitignore still applies."""
        tree = tree_for(monorepo, DEFAULT_OPTIONS - {IgnoreOption.SMART_IGNORE})

        assert names(tree, "frontend") == ["dist", "node_modules", "src", "package.json"]
        assert names(tree, "backend") == ["app", "pyproject.toml"]

    def test_availability(self, monorepo: Path) -> None:
        """Both conditional options are offered for a mixed workspace."""
        availability = IgnoreRulesBuilder().get_availability(str(monorepo))

        assert availability.include_gitignore is True
        assert availability.include_smart_ignore is True

    def test_scan_options(self, monorepo: Path) -> None:
        """Inventories exclude artifacts and ignored files."""
        rules = IgnoreRulesBuilder().build(str(monorepo), DEFAULT_OPTIONS)

        result = ScanOptionsUseCase().execute(str(monorepo), rules)

        assert result.extensions == [".json", ".py", ".toml", ".ts"]
        assert result.root_folders == ["backend", "frontend", "notes"]

    def test_check_reports_smart_layer(self, monorepo: Path) -> None:
        """check names the artifact folder hiding a file."""
        result = runner.invoke(
            app,
            ["check", "-r", str(monorepo), "-f", "json", "frontend/node_modules/left-pad/index.js"],
        )

        assert result.exit_code == 0
        (row,) = json.loads(result.stdout)
        assert row["layer"] == "smart"
        assert row["source"] == str(monorepo.resolve() / "frontend" / "node_modules")


class TestNestedIgnoreFiles:
    """Projects with ignore files below the project root."""

    def test_nested_rules_chain_to_root_rules(self, docs_project: Path) -> None:
        """Nested ignore files add patterns and inherit the root file's."""
        tree = tree_for(docs_project)

        assert tree.child_names == ["docs", "src", "pyproject.toml"]
        assert names(tree, "docs") == ["index.rst"]

    def test_discovery_disabled_by_config(
        self, docs_project: Path, isolated_config: Path
    ) -> None:
        """discover_nested = false leaves nested ignore files unread."""
        config_file = isolated_config / "devtree" / "config.toml"
        config_file.parent.mkdir(parents=True)
        config_file.write_text("discover_nested = false\n")

        result = runner.invoke(
            app, ["check", "-r", str(docs_project), "-f", "json", "docs/_build", "docs/draft.tmp"]
        )

        assert result.exit_code == 0
        build, draft = json.loads(result.stdout)
        assert build["ignored"] is False
        assert draft["ignored"] is True

    def test_custom_ignore_file_name(self, make_tree: MakeTree) -> None:
        """A configured ignore file name replaces .gitignore."""
        root = make_tree(
            {
                ".ignore": "out/\n",
                ".gitignore": "src/\n",
                "out/a.txt": "",
                "src/b.txt": "",
            }
        )

        rules = IgnoreRulesBuilder(ignore_file_name=".ignore").build(str(root), DEFAULT_OPTIONS)
        tree = TreeBuilder().build(str(root), TreeFilterOptions(ignore_rules=rules)).value

        assert tree is not None
        assert tree.child_names == ["src"]


class TestCliWorkflow:
    """Command sequences a user would run."""

    def test_init_then_tree(self, docs_project: Path, isolated_config: Path) -> None:
        """A freshly written config reproduces the default view."""
        init = runner.invoke(app, ["config", "init"])
        tree = runner.invoke(app, ["-q", "tree", str(docs_project), "--no-icons"])

        assert init.exit_code == 0
        assert (isolated_config / "devtree" / "config.toml").exists()
        assert tree.exit_code == 0
        assert "index.rst" in tree.stdout
        assert "_build" not in tree.stdout
        assert "draft.tmp" not in tree.stdout

    def test_scan_then_filtered_tree(self, monorepo: Path) -> None:
        """Folders listed by scan can be passed to tree."""
        scan = runner.invoke(app, ["scan", "folders", str(monorepo), "-f", "json"])
        folders = json.loads(scan.stdout)["folders"]

        tree = runner.invoke(
            app, ["tree", str(monorepo), "--folder", folders[0], "--ext", ".py", "--no-icons"]
        )

        assert tree.exit_code == 0
        assert "main.py" in tree.stdout
        assert "frontend" not in tree.stdout
        assert "pyproject.toml" not in tree.stdout
