"""Platform path comparison policy.

Path case sensitivity is decided once per process and shared by the
gitignore matcher and the ignore rules scope resolution: case-insensitive
on Windows and macOS, case-sensitive elsewhere. Display order folds case
on every platform (:func:`name_sort_key`).
"""

import sys
from dataclasses import dataclass


def _default_ignore_case() -> bool:
    return sys.platform == "win32" or sys.platform == "darwin"


def normalize_separators(path: str) -> str:
    """Convert backslashes to forward slashes."""
    return path.replace("\\", "/")


def name_sort_key(name: str) -> tuple[str, str]:
    """Display sort key: case-folded on every platform, ties broken ordinally."""
    return (name.casefold(), name)


def file_extension(name: str) -> str:
    """Return the extension of a file name, including the leading dot.

    The extension is the text from the last ``.``; a name ending in ``.``
    has none. ``.gitignore`` has the extension ``.gitignore``.

    Args:
        name: Bare file name.

    Returns:
        Extension such as ``".py"``, or an empty string.
    """
    index = name.rfind(".")
    if index < 0 or index == len(name) - 1:
        return ""
    return name[index:]


@dataclass(frozen=True, slots=True)
class PathComparer:
    """Compares path strings under one case sensitivity policy.

    Attributes:
        ignore_case: True if comparisons fold case.
    """

    ignore_case: bool

    def key(self, value: str) -> str:
        """Return the comparison key for a path or name."""
        return value.casefold() if self.ignore_case else value

    def equals(self, left: str, right: str) -> bool:
        """Check whether two paths or names are equal under this policy."""
        return self.key(left) == self.key(right)

    def sort_key(self, value: str) -> tuple[str, str]:
        """Return a sort key that is stable for names differing only in case."""
        return (self.key(value), value)

    def is_same_or_under(self, path: str, root: str) -> bool:
        """Check whether ``path`` equals ``root`` or lies beneath it.

        Both arguments are normalized to forward slashes and trailing
        separators are ignored. Matching respects segment boundaries, so
        ``/repo/projector`` is not under ``/repo/project``.

        Args:
            path: Candidate path.
            root: Scope root path.

        Returns:
            True if ``path`` is ``root`` or a descendant of it.
        """
        normalized_root = self.key(normalize_separators(root).rstrip("/"))
        normalized_path = self.key(normalize_separators(path).rstrip("/"))
        if not normalized_root:
            # Filesystem root ("/") strips to the empty string
            return normalized_path.startswith("/") or not normalized_path
        if normalized_path == normalized_root:
            return True
        return normalized_path.startswith(normalized_root + "/")


PATH_COMPARER = PathComparer(ignore_case=_default_ignore_case())
