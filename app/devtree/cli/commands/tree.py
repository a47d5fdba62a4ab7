"""Tree command implementation.

Renders the visible directory tree of a path under the configured
ignore policy and optional extension, folder and name filters.
"""

from pathlib import Path
from typing import Annotated

import typer

from devtree.cli.types import build_rules, load_cli_config, resolve_root, select_options
from devtree.filesystem.models import TreeFilterOptions
from devtree.filesystem.tree import TreeBuilder
from devtree.utils.formatting import build_rich_tree, console, print_error, print_warning


def normalize_extension(value: str) -> str:
    """Return an extension with exactly one leading dot ("py" -> ".py")."""
    value = value.strip()
    return value if value.startswith(".") else f".{value}"


def tree(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to display."),
    ] = Path("."),
    extensions: Annotated[
        list[str] | None,
        typer.Option(
            "--ext",
            "-e",
            help="Only show files with this extension (repeatable).",
        ),
    ] = None,
    folders: Annotated[
        list[str] | None,
        typer.Option(
            "--folder",
            "-f",
            help="Only show this top-level folder (repeatable).",
        ),
    ] = None,
    name_filter: Annotated[
        str | None,
        typer.Option(
            "--filter",
            help="Only show entries whose name contains this text (case-insensitive).",
        ),
    ] = None,
    no_gitignore: Annotated[
        bool,
        typer.Option("--no-gitignore", help="Do not apply .gitignore files."),
    ] = False,
    no_smart: Annotated[
        bool,
        typer.Option("--no-smart", help="Do not hide ecosystem build artifacts."),
    ] = False,
    show_hidden: Annotated[
        bool,
        typer.Option(
            "--show-hidden",
            help="Show hidden entries (on Linux and macOS this includes dot-prefixed names).",
        ),
    ] = False,
    show_dot: Annotated[
        bool,
        typer.Option("--show-dot", help="Do not apply the dot-prefixed name filter."),
    ] = False,
    hide_extensionless: Annotated[
        bool,
        typer.Option("--hide-extensionless", help="Hide files without an extension."),
    ] = False,
    no_icons: Annotated[
        bool,
        typer.Option("--no-icons", help="Do not prefix entries with icons."),
    ] = False,
) -> None:
    """Show the filtered directory tree.

    Examples:
        devtree tree                        # Current directory
        devtree tree ~/src/app --ext .py    # Python files only
        devtree tree . --folder src         # Only the src folder
        devtree tree . --filter test        # Names containing "test"
        devtree tree . --no-gitignore       # Ignore .gitignore files
    """
    quiet = bool((ctx.obj or {}).get("quiet", False))
    root = resolve_root(path)
    config = load_cli_config()

    options = select_options(
        config,
        no_gitignore=no_gitignore,
        no_smart=no_smart,
        show_hidden=show_hidden,
        show_dot=show_dot,
        hide_extensionless=hide_extensionless,
    )
    rules = build_rules(root, config, options, folders)
    filter_options = TreeFilterOptions(
        ignore_rules=rules,
        allowed_extensions=(
            frozenset(normalize_extension(ext) for ext in extensions) if extensions else None
        ),
        allowed_root_folders=frozenset(folders) if folders else None,
        name_filter=name_filter,
    )

    result = TreeBuilder().build(str(root), filter_options)
    if result.value is None:
        print_error(f"Path does not exist: {root}")
        raise typer.Exit(code=1)

    if result.root_access_denied:
        print_error(f"Permission denied: {root}")
        raise typer.Exit(code=1)

    console.print(build_rich_tree(result.value, show_icons=not no_icons))

    if result.had_access_denied:
        print_warning("Some directories could not be read and are marked (access denied).")

    if not quiet:
        nodes = list(result.value.walk())[1:]
        directories = sum(1 for node in nodes if node.is_directory)
        files = len(nodes) - directories
        console.print(f"\n[dim]{directories} directories, {files} files[/dim]")
