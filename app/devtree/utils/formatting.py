"""Terminal output for devtree.

Shared Rich consoles (stdout for results, stderr for diagnostics and log
records), message helpers, inventory tables and tree rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from devtree.core.theme import get_theme

if TYPE_CHECKING:
    from devtree.filesystem.models import TreeNode


def _color_system(stream: TextIO) -> str | None:
    """Use truecolor on terminals so theme hex colours render exactly."""
    return "truecolor" if stream.isatty() else None


# Theme is read once, at import
console = Console(theme=get_theme(), color_system=_color_system(sys.stdout))
err_console = Console(theme=get_theme(), stderr=True, color_system=_color_system(sys.stderr))

_ICON_GLYPHS: dict[str, str] = {
    "folder": "\U0001f4c1",
    "folder-locked": "\U0001f512",
    "code": "\U0001f4dc",
    "markup": "\U0001f310",
    "config": "⚙",
    "image": "\U0001f5bc",
    "archive": "\U0001f4e6",
    "text": "\U0001f4c4",
    "file": "\U0001f4c4",
}


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: Log at DEBUG level instead of WARNING.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


def _node_label(node: TreeNode, show_icons: bool) -> str:
    name = escape(node.name)
    glyph = f"{_ICON_GLYPHS.get(node.icon_key, '')} " if show_icons else ""
    if node.is_access_denied:
        return f"{glyph}[tree.denied]{name}[/] [dim](access denied)[/]"
    if node.is_directory:
        return f"{glyph}[tree.folder]{name}[/]"
    return f"{glyph}[tree.file]{name}[/]"


def build_rich_tree(root: TreeNode, show_icons: bool = True) -> Tree:
    """Convert a TreeNode hierarchy into a Rich Tree for display.

    Args:
        root: Root node of the scanned tree.
        show_icons: Prefix labels with an icon glyph.

    Returns:
        Rich Tree mirroring the node hierarchy.
    """
    tree = Tree(_node_label(root, show_icons), guide_style="border")
    stack: list[tuple[TreeNode, Tree]] = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            child_branch = branch.add(_node_label(child, show_icons))
            if child.children:
                stack.append((child, child_branch))
    return tree


def create_list_table(title: str, column: str) -> Table:
    """Create a pre-configured single-column table for inventories.

    Args:
        title: Table title.
        column: Header of the value column.

    Returns:
        Rich Table with zebra striping.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column(column, style="text", no_wrap=True)
    return table


def print_info(message: str) -> None:
    """Print a neutral status line to stdout."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a non-fatal problem to stderr."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print a fatal problem to stderr."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a completed action to stdout."""
    console.print(f"[success]{message}[/]")
