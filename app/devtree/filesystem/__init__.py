"""Filesystem scanning module.

This module provides the tree builder, the inventory scanner and the
shared per-entry decision logic they apply.
"""

from devtree.filesystem.decisions import (
    EntryDecision,
    decide,
    explain_path,
    is_visible_directory,
)
from devtree.filesystem.icons import icon_key_for
from devtree.filesystem.models import ScanCancelledError, ScanResult, TreeFilterOptions, TreeNode
from devtree.filesystem.scanner import FileSystemScanner
from devtree.filesystem.tree import TreeBuilder

__all__ = [
    "EntryDecision",
    "FileSystemScanner",
    "ScanCancelledError",
    "ScanResult",
    "TreeBuilder",
    "TreeFilterOptions",
    "TreeNode",
    "decide",
    "explain_path",
    "icon_key_for",
    "is_visible_directory",
]
