"""Filesystem scanner for selection inventories.

Collects the distinct file extensions and the top-level folder names of
a directory tree under an ignore policy. Callers use these inventories to
offer extension and folder filters before building the full tree.
"""

import logging
import os
import threading

from devtree.core.pathcmp import file_extension, name_sort_key
from devtree.filesystem.decisions import (
    EntryDecision,
    decide,
    is_visible_directory,
    raise_if_cancelled,
)
from devtree.filesystem.models import ScanResult
from devtree.ignore.rules import IgnoreRules

logger = logging.getLogger(__name__)


def is_directory_entry(entry: os.DirEntry[str]) -> bool:
    """Check whether a directory entry is (or links to) a directory."""
    try:
        return entry.is_dir()
    except OSError:
        return False


def directory_identity(path: str) -> tuple[int, int] | None:
    """Return the ``(st_dev, st_ino)`` pair of a directory, following links."""
    try:
        info = os.stat(path)
    except OSError:
        return None
    return (info.st_dev, info.st_ino)


def _is_missing_root(root: str) -> bool:
    return not root or not root.strip() or not os.path.isdir(root)


def _add_extension(extensions: dict[str, str], name: str) -> None:
    """Record the extension of ``name``, deduplicating case-insensitively."""
    extension = file_extension(name)
    if extension:
        extensions.setdefault(extension.casefold(), extension)


class FileSystemScanner:
    """Scans a directory tree for extension and folder inventories.

    Scanners are stateless; every call is independent and may run
    concurrently with other calls. Permission failures are recorded in
    the result flags and never abort a scan.

    Example:
        >>> scanner = FileSystemScanner()
        >>> result = scanner.get_extensions("/work/project", IgnoreRules())
        >>> sorted(result.value)
        ['.md', '.py', '.toml']
    """

    def can_read_root(self, root: str) -> bool:
        """Check whether the root directory can be listed.

        Only a permission failure counts as unreadable; other errors
        (such as a missing root) are left to the scan itself.
        """
        try:
            with os.scandir(root) as entries:
                next(entries, None)
        except PermissionError:
            return False
        except OSError:
            return True
        return True

    def get_extensions(
        self,
        root: str,
        rules: IgnoreRules,
        cancel: threading.Event | None = None,
    ) -> ScanResult[set[str]]:
        """Collect the distinct extensions of visible files in the whole tree.

        Ignored directories are pruned unless negation rules require
        walking them. Symlinked directories are followed once per scan.

        Args:
            root: Scan root directory.
            rules: Ignore policy.
            cancel: Optional cancellation event.

        Returns:
            ScanResult with the set of extensions (first-seen casing).

        Raises:
            ScanCancelledError: If ``cancel`` is set during the scan.
        """
        raise_if_cancelled(cancel)
        if _is_missing_root(root):
            return ScanResult(set())

        root = os.path.abspath(root)
        extensions: dict[str, str] = {}
        root_access_denied = False
        had_access_denied = False
        visited: set[tuple[int, int]] = set()
        pending: list[str] = [root]

        identity = directory_identity(root)
        if identity is not None:
            visited.add(identity)

        while pending:
            raise_if_cancelled(cancel)
            directory = pending.pop()
            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except PermissionError:
                logger.warning("Permission denied scanning directory: %s", directory)
                had_access_denied = True
                if directory == root:
                    root_access_denied = True
                continue
            except OSError as e:
                logger.debug("Cannot list %s: %s", directory, e)
                continue

            for entry in entries:
                raise_if_cancelled(cancel)
                if is_directory_entry(entry):
                    if decide(rules, entry.path, True, entry.name) is EntryDecision.SKIP:
                        continue
                    identity = directory_identity(entry.path)
                    if identity is not None:
                        if identity in visited:
                            logger.debug("Skipping already visited directory: %s", entry.path)
                            continue
                        visited.add(identity)
                    pending.append(entry.path)
                elif decide(rules, entry.path, False, entry.name) is EntryDecision.KEEP:
                    _add_extension(extensions, entry.name)

        return ScanResult(set(extensions.values()), root_access_denied, had_access_denied)

    def get_root_file_extensions(
        self,
        root: str,
        rules: IgnoreRules,
        cancel: threading.Event | None = None,
    ) -> ScanResult[set[str]]:
        """Collect the distinct extensions of visible files directly in the root.

        Args:
            root: Scan root directory.
            rules: Ignore policy.
            cancel: Optional cancellation event.

        Returns:
            ScanResult with the set of extensions.

        Raises:
            ScanCancelledError: If ``cancel`` is set during the scan.
        """
        raise_if_cancelled(cancel)
        if _is_missing_root(root):
            return ScanResult(set())

        root = os.path.abspath(root)
        try:
            with os.scandir(root) as it:
                entries = list(it)
        except PermissionError:
            logger.warning("Permission denied scanning directory: %s", root)
            return ScanResult(set(), root_access_denied=True, had_access_denied=True)
        except OSError as e:
            logger.debug("Cannot list %s: %s", root, e)
            return ScanResult(set())

        extensions: dict[str, str] = {}
        for entry in entries:
            raise_if_cancelled(cancel)
            if is_directory_entry(entry):
                continue
            if decide(rules, entry.path, False, entry.name) is EntryDecision.KEEP:
                _add_extension(extensions, entry.name)

        return ScanResult(set(extensions.values()))

    def get_root_folder_names(
        self,
        root: str,
        rules: IgnoreRules,
        cancel: threading.Event | None = None,
    ) -> ScanResult[list[str]]:
        """List the visible immediate subfolders of the root.

        A folder that is ignored but walked for negation exemptions is
        only listed when it contains at least one visible descendant, the
        same rule the tree builder applies (:func:`is_visible_directory`).

        Args:
            root: Scan root directory.
            rules: Ignore policy.
            cancel: Optional cancellation event.

        Returns:
            ScanResult with folder names sorted case-insensitively.

        Raises:
            ScanCancelledError: If ``cancel`` is set during the scan.
        """
        raise_if_cancelled(cancel)
        if _is_missing_root(root):
            return ScanResult([])

        root = os.path.abspath(root)
        try:
            with os.scandir(root) as it:
                entries = list(it)
        except PermissionError:
            logger.warning("Permission denied scanning directory: %s", root)
            return ScanResult([], root_access_denied=True, had_access_denied=True)
        except OSError as e:
            logger.debug("Cannot list %s: %s", root, e)
            return ScanResult([])

        names: list[str] = []
        had_access_denied = False
        for entry in entries:
            raise_if_cancelled(cancel)
            if not is_directory_entry(entry):
                continue
            decision = decide(rules, entry.path, True, entry.name)
            has_content = denied = False
            if decision is EntryDecision.DESCEND:
                has_content, denied = self._has_visible_descendant(entry.path, rules, cancel)
                had_access_denied = had_access_denied or denied
            if is_visible_directory(decision, has_content, denied):
                names.append(entry.name)

        names.sort(key=name_sort_key)
        return ScanResult(names, had_access_denied=had_access_denied)

    def _has_visible_descendant(
        self,
        directory: str,
        rules: IgnoreRules,
        cancel: threading.Event | None,
    ) -> tuple[bool, bool]:
        """Walk an ignored directory looking for a re-included entry.

        A directory that cannot be listed counts as visible so that it
        is reported rather than silently dropped.

        Returns:
            Tuple of (has visible descendant, hit access denied).
        """
        visited: set[tuple[int, int]] = set()
        pending: list[str] = [directory]
        while pending:
            raise_if_cancelled(cancel)
            current = pending.pop()
            identity = directory_identity(current)
            if identity is not None:
                if identity in visited:
                    continue
                visited.add(identity)
            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except PermissionError:
                logger.warning("Permission denied scanning directory: %s", current)
                return True, True
            except OSError as e:
                logger.debug("Cannot list %s: %s", current, e)
                continue

            for entry in entries:
                raise_if_cancelled(cancel)
                is_directory = is_directory_entry(entry)
                decision = decide(rules, entry.path, is_directory, entry.name)
                if decision is EntryDecision.KEEP:
                    return True, False
                if decision is EntryDecision.DESCEND:
                    pending.append(entry.path)
        return False, False
