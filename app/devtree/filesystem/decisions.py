"""Per-entry visibility decisions shared by the scanners."""

import os
import threading
from enum import Enum

from devtree.filesystem.models import ScanCancelledError
from devtree.ignore.rules import IgnoreLayer, IgnoreRules


class EntryDecision(str, Enum):
    """Outcome of evaluating one directory entry.

    Attributes:
        KEEP: Entry is visible.
        SKIP: Entry is hidden along with everything beneath it.
        DESCEND: Directory is ignored but must be walked because negation
            rules may re-include descendants.
    """

    KEEP = "keep"
    SKIP = "skip"
    DESCEND = "descend"


def decide(rules: IgnoreRules, path: str, is_directory: bool, name: str) -> EntryDecision:
    """Decide how a scanner treats one entry.

    Args:
        rules: Ignore policy for the scan.
        path: Full path of the entry.
        is_directory: True for directories.
        name: Bare entry name.

    Returns:
        KEEP, SKIP or (directories only) DESCEND.
    """
    if not rules.is_ignored(path, is_directory, name):
        return EntryDecision.KEEP
    if is_directory and rules.should_traverse_ignored_directory(path, name):
        return EntryDecision.DESCEND
    return EntryDecision.SKIP


def is_visible_directory(decision: EntryDecision, has_visible_content: bool, denied: bool) -> bool:
    """Check whether a directory appears in scan output.

    Every scan mode lists a directory by this rule. A kept directory is
    shown even when empty. An ignored directory that is walked for
    re-included entries is shown only when something beneath it is
    visible or it could not be listed.

    Args:
        decision: Result of :func:`decide` for the directory.
        has_visible_content: True if any descendant is visible.
        denied: True if the directory or a descendant could not be listed.
    """
    if decision is EntryDecision.SKIP:
        return False
    if decision is EntryDecision.DESCEND:
        return has_visible_content or denied
    return True


def raise_if_cancelled(cancel: threading.Event | None) -> None:
    """Raise ScanCancelledError if ``cancel`` is set."""
    if cancel is not None and cancel.is_set():
        raise ScanCancelledError("Scan cancelled")


def explain_path(rules: IgnoreRules, root: str, path: str) -> tuple[IgnoreLayer | None, str | None]:
    """Explain why a path beneath ``root`` is hidden from a scan.

    Walks from the root down to ``path`` the way the scanners do, so an
    entry inside a skipped directory is reported against that directory.

    Args:
        rules: Ignore policy for the scan.
        root: Scan root directory.
        path: Full path of the entry to explain.

    Returns:
        The hiding layer and the path it applies to, or ``(None, None)``
        when the entry is visible.
    """
    relative = os.path.relpath(path, root)
    if relative == os.curdir:
        return None, None

    parts = relative.split(os.sep)
    current = root
    for index, part in enumerate(parts):
        current = os.path.join(current, part)
        is_last = index == len(parts) - 1
        is_directory = os.path.isdir(current) if is_last else True
        layer = rules.explain(current, is_directory, part)
        if layer is None:
            continue
        if is_last or not rules.should_traverse_ignored_directory(current, part):
            return layer, current
    return None, None
