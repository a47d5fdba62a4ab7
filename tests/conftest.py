"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from devtree.ignore.builder import MATCHER_CACHE

TreeFactory = Callable[[dict[str, str | None]], Path]


def write_tree(root: Path, entries: dict[str, str | None]) -> Path:
    """Create files and directories beneath ``root``.

    Keys are forward-slash relative paths. A value of None creates a
    directory, a string creates a file with that content.
    """
    for relative, content in entries.items():
        path = root.joinpath(*relative.split("/"))
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
    return root


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory,
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory for every test."""
    config_home = tmp_path_factory.mktemp("xdg-config")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture(autouse=True)
def clear_matcher_cache() -> Iterator[None]:
    """Start and end every test with an empty ignore-file cache."""
    MATCHER_CACHE.clear()
    yield
    MATCHER_CACHE.clear()


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeFactory:
    """Return a factory that builds a directory tree under ``tmp_path/root``."""

    def factory(entries: dict[str, str | None]) -> Path:
        root = tmp_path / "root"
        root.mkdir(exist_ok=True)
        return write_tree(root, entries)

    return factory


@pytest.fixture
def python_project(make_tree: TreeFactory) -> Path:
    """A Python project with artifacts and a .gitignore."""
    return make_tree(
        {
            "pyproject.toml": "[project]\nname = 'demo'\n",
            ".gitignore": "*.log\nbuild/\n",
            "README.md": "# demo\n",
            "src/demo/__init__.py": "",
            "src/demo/core.py": "VALUE = 1\n",
            "src/demo/__pycache__/core.cpython-312.pyc": "",
            "tests/test_core.py": "",
            "build/lib/demo.py": "",
            "debug.log": "trace\n",
            ".venv/bin/python": "",
        }
    )


@pytest.fixture
def deny_listing() -> Callable[..., Callable[..., Any]]:
    """Return a factory for ``os.scandir`` stand-ins that refuse some directories.

    The stand-in raises PermissionError for the given directories and
    lists everything else. Unlike permission bits it also applies to root.
    """
    real_scandir = os.scandir

    def factory(*denied: Path) -> Callable[..., Any]:
        blocked = {os.path.abspath(path) for path in denied}

        def scandir(path: str = ".") -> Any:
            if os.path.abspath(path) in blocked:
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        return scandir

    return factory
