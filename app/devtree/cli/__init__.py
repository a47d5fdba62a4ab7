"""CLI package for devtree.

This package contains the Typer application and all subcommands.
"""

from devtree.cli.main import app

__all__ = ["app"]
