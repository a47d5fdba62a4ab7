"""Scan options use case.

Combines scanner inventories into the option lists offered to the user
before a tree build: sorted extensions and top-level folder names.
"""

import os
from collections.abc import Iterable
from dataclasses import dataclass

from devtree.core.pathcmp import name_sort_key
from devtree.filesystem.models import ScanResult
from devtree.filesystem.scanner import FileSystemScanner
from devtree.ignore.rules import IgnoreRules


@dataclass(frozen=True, slots=True)
class ScanOptionsResult:
    """Extension and folder inventories of a scan root.

    Attributes:
        extensions: Distinct extensions, sorted case-insensitively.
        root_folders: Visible top-level folder names, sorted case-insensitively.
        root_access_denied: The root could not be listed by either scan.
        had_access_denied: Some directory could not be listed.
    """

    extensions: list[str]
    root_folders: list[str]
    root_access_denied: bool = False
    had_access_denied: bool = False


class ScanOptionsUseCase:
    """Builds selection inventories from a FileSystemScanner.

    Args:
        scanner: Scanner to query. Defaults to a new FileSystemScanner.
    """

    def __init__(self, scanner: FileSystemScanner | None = None) -> None:
        self._scanner = scanner or FileSystemScanner()

    def execute(self, root: str, rules: IgnoreRules) -> ScanOptionsResult:
        """Collect the whole-tree extensions and top-level folders of a root."""
        extensions = self._scanner.get_extensions(root, rules)
        folders = self._scanner.get_root_folder_names(root, rules)
        return ScanOptionsResult(
            extensions=sorted(extensions.value, key=name_sort_key),
            root_folders=sorted(folders.value, key=name_sort_key),
            root_access_denied=extensions.root_access_denied or folders.root_access_denied,
            had_access_denied=extensions.had_access_denied or folders.had_access_denied,
        )

    def get_extensions_for_root_folders(
        self,
        root: str,
        folders: Iterable[str],
        rules: IgnoreRules,
    ) -> ScanResult[set[str]]:
        """Collect extensions of root-level files plus the selected folders.

        Root-level files are always included, so a root holding only files
        still yields its extensions with no folder selected.

        Args:
            root: Scan root directory.
            folders: Selected top-level folder names.
            rules: Ignore policy.

        Returns:
            ScanResult with extensions deduplicated case-insensitively.
        """
        root_files = self._scanner.get_root_file_extensions(root, rules)
        extensions = {ext.casefold(): ext for ext in root_files.value}
        root_access_denied = root_files.root_access_denied
        had_access_denied = root_files.had_access_denied

        for folder in folders:
            result = self._scanner.get_extensions(os.path.join(root, folder), rules)
            for ext in result.value:
                extensions.setdefault(ext.casefold(), ext)
            root_access_denied = root_access_denied or result.root_access_denied
            had_access_denied = had_access_denied or result.had_access_denied

        return ScanResult(set(extensions.values()), root_access_denied, had_access_denied)

    def can_read_root(self, root: str) -> bool:
        """Check whether the root directory can be listed."""
        return self._scanner.can_read_root(root)
