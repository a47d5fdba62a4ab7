"""Check command implementation.

Reports, per path, whether it would appear in the tree and which ignore
layer hides it otherwise.
"""

import json
import os
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape
from rich.table import Table

from devtree.cli.types import (
    OutputFormat,
    build_rules,
    load_cli_config,
    resolve_root,
    select_options,
)
from devtree.core.pathcmp import PATH_COMPARER
from devtree.filesystem.decisions import explain_path
from devtree.ignore.rules import IgnoreLayer
from devtree.utils.formatting import console, print_warning

_LAYER_STYLES = {
    IgnoreLayer.GITIGNORE.value: "layer.gitignore",
    IgnoreLayer.SMART.value: "layer.smart",
}


def check(
    targets: Annotated[
        list[str],
        typer.Argument(help="Paths to check, relative to the root or absolute."),
    ],
    root_path: Annotated[
        Path,
        typer.Option("--root", "-r", help="Scan root the targets are checked against."),
    ] = Path("."),
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
        typer.Option("--show-hidden", help="Do not apply the hidden attribute filter."),
    ] = False,
    show_dot: Annotated[
        bool,
        typer.Option("--show-dot", help="Do not apply the dot-prefixed name filter."),
    ] = False,
    hide_extensionless: Annotated[
        bool,
        typer.Option("--hide-extensionless", help="Hide files without an extension."),
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
    """Explain whether paths are visible and which layer hides them.

    Examples:
        devtree check build/out.bin               # Against the current directory
        devtree check -r ~/src/app node_modules   # Against another root
        devtree check src/.env --format json
    """
    root = resolve_root(root_path)
    config = load_cli_config()
    options = select_options(
        config,
        no_gitignore=no_gitignore,
        no_smart=no_smart,
        show_hidden=show_hidden,
        show_dot=show_dot,
        hide_extensionless=hide_extensionless,
    )
    rules = build_rules(root, config, options)

    rows: list[dict[str, Any]] = []
    for target in targets:
        full_path = os.path.normpath(os.path.join(root, os.path.expanduser(target)))
        if not PATH_COMPARER.is_same_or_under(full_path, str(root)):
            print_warning(f"Skipping path outside {root}: {target}")
            continue

        exists = os.path.lexists(full_path)
        layer, source = explain_path(rules, str(root), full_path) if exists else (None, None)
        rows.append(
            {
                "target": target,
                "path": full_path,
                "exists": exists,
                "ignored": layer is not None,
                "layer": layer.value if layer is not None else None,
                "source": source,
            }
        )

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return

    _print_table(rows, root)


# === Private helper functions ===


def _print_table(rows: list[dict[str, Any]], root: Path) -> None:
    """Display check results as a Rich table."""
    table = Table(title=f"Visibility in {escape(str(root))}", show_lines=False)
    table.add_column("Path", style="bold")
    table.add_column("Status")
    table.add_column("Layer", width=14)
    table.add_column("Hidden by", style="dim")

    for row in rows:
        if not row["exists"]:
            status = "[error]missing[/]"
        elif row["ignored"]:
            status = "[warning]ignored[/]"
        else:
            status = "[success]visible[/]"
        layer = "-"
        if row["layer"] is not None:
            style = _LAYER_STYLES.get(row["layer"], "layer.attribute")
            layer = f"[{style}]{row['layer']}[/]"
        source = "-"
        if row["source"] is not None:
            source = escape(os.path.relpath(row["source"], root))
        table.add_row(escape(row["target"]), status, layer, source)

    console.print(table)
