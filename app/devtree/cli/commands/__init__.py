"""CLI commands for devtree.

This package contains all subcommand implementations.
"""

from devtree.cli.commands import check, config, scan, tree

__all__ = ["check", "config", "scan", "tree"]
