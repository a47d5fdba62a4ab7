"""Unit tests for smart-ignore artifact rules."""

from pathlib import Path
from unittest.mock import patch

import pytest
from devtree.smart.base import EMPTY_RESULT, ArtifactRule, SmartIgnoreResult
from devtree.smart.rules import CommonArtifactRule, MarkerArtifactRule
from devtree.smart.tables import (
    COMMON_FILE_NAMES,
    DOTNET,
    ECOSYSTEM_TABLES,
    FRONTEND,
    PYTHON,
    RUST,
)


class TestSmartIgnoreResult:
    """Tests for SmartIgnoreResult."""

    def test_empty_result(self) -> None:
        """The default result hides nothing."""
        assert EMPTY_RESULT.is_empty is True
        assert SmartIgnoreResult(folder_names=frozenset({"dist"})).is_empty is False

    def test_union(self) -> None:
        """Union merges folder and file names."""
        left = SmartIgnoreResult(frozenset({"dist"}), frozenset({"a.txt"}))
        right = SmartIgnoreResult(frozenset({"target"}), frozenset())
        combined = left.union(right)
        assert combined.folder_names == frozenset({"dist", "target"})
        assert combined.file_names == frozenset({"a.txt"})


class TestArtifactRuleInterface:
    """Tests for the ArtifactRule ABC."""

    def test_cannot_instantiate_abstract(self) -> None:
        """ArtifactRule cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ArtifactRule()  # type: ignore[abstract]

    def test_ecosystems_are_unique(self) -> None:
        """Every table names a distinct ecosystem."""
        names = [table.ecosystem for table in ECOSYSTEM_TABLES]
        assert len(names) == len(set(names))


class TestMarkerArtifactRule:
    """Tests for MarkerArtifactRule."""

    def test_marker_file_activates_table(self, tmp_path: Path) -> None:
        """A marker at the top level returns the table's names."""
        (tmp_path / "package.json").write_text("{}")
        result = MarkerArtifactRule(FRONTEND).evaluate(str(tmp_path))
        assert "node_modules" in result.folder_names
        assert "dist" in result.folder_names

    def test_no_marker_returns_empty(self, tmp_path: Path) -> None:
        """Without a marker nothing is hidden."""
        (tmp_path / "main.c").write_text("")
        assert MarkerArtifactRule(FRONTEND).evaluate(str(tmp_path)) is EMPTY_RESULT

    def test_marker_lookup_is_not_recursive(self, tmp_path: Path) -> None:
        """Markers in subdirectories do not activate the table."""
        nested = tmp_path / "sub"
        nested.mkdir()
        (nested / "Cargo.toml").write_text("")
        assert MarkerArtifactRule(RUST).evaluate(str(tmp_path)).is_empty is True

    def test_marker_directory_does_not_count(self, tmp_path: Path) -> None:
        """A directory named like a marker file is not a marker."""
        (tmp_path / "pyproject.toml").mkdir()
        assert MarkerArtifactRule(PYTHON).evaluate(str(tmp_path)).is_empty is True

    def test_marker_extension(self, tmp_path: Path) -> None:
        """A project file extension activates the .NET table."""
        (tmp_path / "App.csproj").write_text("<Project />")
        result = MarkerArtifactRule(DOTNET).evaluate(str(tmp_path))
        assert result.folder_names == frozenset({"bin", "obj"})

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root returns an empty result."""
        result = MarkerArtifactRule(PYTHON).evaluate(str(tmp_path / "missing"))
        assert result is EMPTY_RESULT

    def test_unreadable_root(self, tmp_path: Path) -> None:
        """A root that cannot be listed returns an empty result."""
        with patch("devtree.smart.rules.os.scandir", side_effect=PermissionError("denied")):
            result = MarkerArtifactRule(DOTNET).evaluate(str(tmp_path))
        assert result is EMPTY_RESULT

    def test_ecosystem_and_table(self) -> None:
        """The rule exposes its table and ecosystem name."""
        rule = MarkerArtifactRule(PYTHON)
        assert rule.ecosystem == "python"
        assert rule.table is PYTHON


class TestCommonArtifactRule:
    """Tests for CommonArtifactRule."""

    def test_applies_everywhere(self, tmp_path: Path) -> None:
        """OS clutter names apply to any root, even a missing one."""
        rule = CommonArtifactRule()
        assert rule.evaluate(str(tmp_path)).file_names == COMMON_FILE_NAMES
        assert rule.evaluate(str(tmp_path / "missing")).file_names == COMMON_FILE_NAMES
        assert rule.ecosystem == "common"
