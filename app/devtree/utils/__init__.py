"""Utility modules for devtree.

This module exports commonly used utility functions.
"""

from devtree.utils.formatting import (
    build_rich_tree,
    configure_logging,
    console,
    create_list_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "build_rich_tree",
    "configure_logging",
    "console",
    "create_list_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
