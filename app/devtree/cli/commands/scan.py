"""Scan command implementation.

Lists the inventories a directory offers for filtering: the file
extensions found under it and its visible top-level folders.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from devtree.cli.types import (
    OutputFormat,
    build_rules,
    load_cli_config,
    resolve_root,
    select_options,
)
from devtree.core.pathcmp import name_sort_key
from devtree.core.scan_options import ScanOptionsUseCase
from devtree.filesystem.scanner import FileSystemScanner
from devtree.utils.formatting import (
    console,
    create_list_table,
    print_error,
    print_info,
    print_warning,
)

app = typer.Typer(
    help="List extensions and top-level folders of a directory.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def extensions(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to scan."),
    ] = Path("."),
    root_only: Annotated[
        bool,
        typer.Option("--root-only", help="Only scan files directly in the directory."),
    ] = False,
    folders: Annotated[
        list[str] | None,
        typer.Option(
            "--folder",
            help="Scan root files plus this top-level folder (repeatable).",
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
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List the distinct file extensions of visible files.

    Examples:
        devtree scan extensions                  # Whole tree
        devtree scan extensions . --root-only    # Root files only
        devtree scan extensions . --folder src   # Root files plus src/
    """
    if root_only and folders:
        print_error("--root-only and --folder cannot be combined.")
        raise typer.Exit(code=1)

    root = resolve_root(path)
    config = load_cli_config()
    options = select_options(config, no_gitignore=no_gitignore, no_smart=no_smart)
    rules = build_rules(root, config, options, folders)

    if root_only:
        result = FileSystemScanner().get_root_file_extensions(str(root), rules)
    elif folders:
        result = ScanOptionsUseCase().get_extensions_for_root_folders(str(root), folders, rules)
    else:
        result = FileSystemScanner().get_extensions(str(root), rules)

    _report(
        ctx,
        root,
        "extensions",
        sorted(result.value, key=name_sort_key),
        result.root_access_denied,
        result.had_access_denied,
        output_format,
    )


@app.command()
def folders(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to scan."),
    ] = Path("."),
    no_gitignore: Annotated[
        bool,
        typer.Option("--no-gitignore", help="Do not apply .gitignore files."),
    ] = False,
    no_smart: Annotated[
        bool,
        typer.Option("--no-smart", help="Do not hide ecosystem build artifacts."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List the visible top-level folders of a directory."""
    root = resolve_root(path)
    config = load_cli_config()
    options = select_options(config, no_gitignore=no_gitignore, no_smart=no_smart)
    rules = build_rules(root, config, options)

    result = FileSystemScanner().get_root_folder_names(str(root), rules)
    _report(
        ctx,
        root,
        "folders",
        result.value,
        result.root_access_denied,
        result.had_access_denied,
        output_format,
    )


# === Private helper functions ===


def _report(
    ctx: typer.Context,
    root: Path,
    kind: str,
    values: list[str],
    root_access_denied: bool,
    had_access_denied: bool,
    output_format: OutputFormat,
) -> None:
    """Print an inventory as a table or JSON, exiting 1 if the root was unreadable."""
    if output_format == OutputFormat.JSON:
        data: dict[str, Any] = {
            "root": str(root),
            kind: values,
            "root_access_denied": root_access_denied,
            "had_access_denied": had_access_denied,
        }
        console.print_json(json.dumps(data))
    elif root_access_denied:
        print_error(f"Permission denied: {root}")
    elif not values:
        print_info(f"No {kind} found in {root}")
    else:
        table = create_list_table(f"{kind.capitalize()} in {root}", kind[:-1].capitalize())
        for value in values:
            table.add_row(value)
        console.print(table)

        quiet = bool((ctx.obj or {}).get("quiet", False))
        if not quiet:
            console.print(f"\n[dim]Found {len(values)} {kind}[/dim]")

    if root_access_denied:
        raise typer.Exit(code=1)
    if had_access_denied and output_format == OutputFormat.TABLE:
        print_warning("Some directories could not be read and were skipped.")
