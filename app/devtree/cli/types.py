"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from devtree.core.config import ConfigError, DevtreeConfig, load_config_or_default
from devtree.ignore.builder import IgnoreOption, IgnoreRulesBuilder
from devtree.ignore.rules import IgnoreRules
from devtree.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def load_cli_config() -> DevtreeConfig:
    """Load the user configuration, exiting with code 1 if it is invalid."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def resolve_root(path: Path) -> Path:
    """Resolve a scan root argument, exiting with code 1 if it is not a directory.

    Args:
        path: Path given on the command line.

    Returns:
        Absolute, resolved directory path.
    """
    root = path.expanduser().resolve()
    if not root.exists():
        print_error(f"Path does not exist: {root}")
        raise typer.Exit(code=1)
    if not root.is_dir():
        print_error(f"Not a directory: {root}")
        raise typer.Exit(code=1)
    return root


def select_options(
    config: DevtreeConfig,
    *,
    no_gitignore: bool = False,
    no_smart: bool = False,
    show_hidden: bool = False,
    show_dot: bool = False,
    hide_extensionless: bool = False,
) -> set[IgnoreOption]:
    """Combine configured option defaults with command-line overrides.

    Args:
        config: Loaded configuration.
        no_gitignore: Disable the gitignore layer.
        no_smart: Disable smart ignore.
        show_hidden: Show entries with the hidden attribute.
        show_dot: Show dot-prefixed entries.
        hide_extensionless: Hide files without an extension.

    Returns:
        Set of enabled ignore options.
    """
    options = config.ignore.selected_options()
    if no_gitignore:
        options.discard(IgnoreOption.USE_GITIGNORE)
    if no_smart:
        options.discard(IgnoreOption.SMART_IGNORE)
    if show_hidden:
        options -= {IgnoreOption.HIDDEN_FOLDERS, IgnoreOption.HIDDEN_FILES}
    if show_dot:
        options -= {IgnoreOption.DOT_FOLDERS, IgnoreOption.DOT_FILES}
    if hide_extensionless:
        options.add(IgnoreOption.EXTENSIONLESS_FILES)
    return options


def build_rules(
    root: Path,
    config: DevtreeConfig,
    options: set[IgnoreOption],
    folders: list[str] | None = None,
) -> IgnoreRules:
    """Build ignore rules for a scan root from the configuration."""
    builder = IgnoreRulesBuilder(
        ignore_file_name=config.ignore_file_name,
        discover_nested=config.discover_nested,
    )
    return builder.build(str(root), options, folders or None)
