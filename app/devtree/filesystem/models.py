"""Filesystem domain models for tree scanning.

This module defines the data structures produced by the scanners:
tree nodes, scan results carrying access-denied flags, and the filter
options that narrow a tree build.
"""

from collections.abc import Collection, Iterator
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from devtree.core.errors import DevtreeError
from devtree.core.pathcmp import PATH_COMPARER
from devtree.ignore.rules import IgnoreRules

T = TypeVar("T")


class ScanCancelledError(DevtreeError):
    """Raised when a scan is cancelled through its cancellation event."""


@dataclass(frozen=True, slots=True)
class TreeNode:
    """One visible entry of a scanned tree.

    Children are built before their parent node, so a node is never
    observable in a partially built state.

    Attributes:
        name: Bare entry name.
        full_path: Absolute path of the entry.
        is_directory: True for directories.
        is_access_denied: True if the directory could not be listed.
        icon_key: Presentation key (see :mod:`devtree.filesystem.icons`).
        children: Visible children, directories first.
    """

    name: str
    full_path: str
    is_directory: bool
    is_access_denied: bool = False
    icon_key: str = "file"
    children: tuple["TreeNode", ...] = ()

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and all descendants in pre-order."""
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, name: str) -> "TreeNode | None":
        """Return the direct child with the given name, if any."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    @property
    def child_names(self) -> list[str]:
        """Names of the direct children in display order."""
        return [child.name for child in self.children]


@dataclass(frozen=True, slots=True)
class ScanResult(Generic[T]):
    """Scanner payload with access-denied flags.

    Attributes:
        value: The scan payload.
        root_access_denied: The scan root itself could not be listed.
        had_access_denied: Some directory could not be listed.
    """

    value: T
    root_access_denied: bool = False
    had_access_denied: bool = False


def _casefold_set(values: Collection[str] | None) -> frozenset[str] | None:
    if values is None:
        return None
    return frozenset(value.casefold() for value in values)


@dataclass(frozen=True, slots=True)
class TreeFilterOptions:
    """Filters applied while building a tree.

    Attributes:
        ignore_rules: Ignore policy for the scan.
        allowed_extensions: Extensions (with leading dot) of files to keep,
            compared case-insensitively. None keeps every extension.
            Extensionless files are governed only by ``ignore_rules``.
        allowed_root_folders: Top-level directory names to keep. None
            keeps every top-level directory.
        name_filter: Case-insensitive substring entries must contain.
            Directories are kept when they match or have matching children.
    """

    ignore_rules: IgnoreRules = field(default_factory=IgnoreRules)
    allowed_extensions: frozenset[str] | None = None
    allowed_root_folders: frozenset[str] | None = None
    name_filter: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "allowed_extensions", _casefold_set(self.allowed_extensions))
        if self.allowed_root_folders is not None:
            keys = frozenset(PATH_COMPARER.key(name) for name in self.allowed_root_folders)
            object.__setattr__(self, "allowed_root_folders", keys)
        if self.name_filter is not None and not self.name_filter.strip():
            object.__setattr__(self, "name_filter", None)

    def allows_extension(self, extension: str) -> bool:
        """Check whether files with ``extension`` are kept."""
        if self.allowed_extensions is None:
            return True
        return extension.casefold() in self.allowed_extensions

    def allows_root_folder(self, name: str) -> bool:
        """Check whether the top-level directory ``name`` is kept."""
        if self.allowed_root_folders is None:
            return True
        return PATH_COMPARER.key(name) in self.allowed_root_folders

    def matches_name(self, name: str) -> bool:
        """Check whether ``name`` passes the name filter."""
        if self.name_filter is None:
            return True
        return self.name_filter.casefold() in name.casefold()
