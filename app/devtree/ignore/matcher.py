"""Gitignore pattern compiler and evaluator.

A matcher is built from the lines of one ignore file and evaluates paths
relative to the directory that file lives in (its scope root). A matcher
for a nested ignore file may chain to the matcher of its enclosing
directory, whose patterns are evaluated first. Nearest-scope selection
happens in :mod:`devtree.ignore.rules`.

Glob segments are translated by pathspec's gitignore pattern; negation,
anchoring, directory-only filtering and case folding are applied here.

Supported syntax:
- ``#`` comments, blank lines, ``\\#`` and ``\\!`` escapes
- ``!`` negation (last matching pattern wins)
- leading ``/`` anchors to the scope root, trailing ``/`` matches directories only
- ``*``, ``?``, ``**`` (leading, middle and trailing) and ``[...]`` classes
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from pathspec.patterns.gitignore.basic import GitIgnoreBasicPattern

from devtree.core.pathcmp import PATH_COMPARER, PathComparer, normalize_separators

logger = logging.getLogger(__name__)


class MatchKind(str, Enum):
    """How a pattern reached an entry.

    Attributes:
        ENTRY: The pattern matched the entry itself.
        ANCESTOR: The pattern matched only a directory above the entry.
    """

    ENTRY = "entry"
    ANCESTOR = "ancestor"


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """One compiled ignore-file line.

    Attributes:
        source: Original line as written in the ignore file.
        negated: True for ``!`` patterns that re-include paths.
        anchored: True if the line started with ``/``.
        directory_only: True if the pattern ended with ``/``.
        match_by_name: True if the pattern is matched against the bare name.
        regex: Compiled matcher over the name or the relative path.
        content_parent: Pattern for the directory whose contents this
            pattern hides (patterns ending in ``/*`` or ``/**``), if any.
    """

    source: str
    negated: bool
    anchored: bool
    directory_only: bool
    match_by_name: bool
    regex: re.Pattern[str]
    content_parent: "CompiledPattern | None" = None

    def match_kind(
        self,
        relative_path: str,
        name: str,
        is_directory: bool,
        ancestors: list[str],
    ) -> MatchKind | None:
        """Report whether this pattern covers an entry, and how.

        Excluding a directory excludes everything beneath it, so a match
        on any ancestor directory also covers the entry.

        Args:
            relative_path: Entry path relative to the scope root.
            name: Bare entry name.
            is_directory: True if the entry is a directory.
            ancestors: Relative paths of the entry's ancestor directories.

        Returns:
            ENTRY, ANCESTOR, or None when the pattern does not apply.
        """
        if not self.directory_only or is_directory:
            target = name if self.match_by_name else relative_path
            if self.regex.fullmatch(target) is not None:
                return MatchKind.ENTRY

        for ancestor in ancestors:
            target = ancestor.rsplit("/", 1)[-1] if self.match_by_name else ancestor
            if self.regex.fullmatch(target) is not None:
                return MatchKind.ANCESTOR
        return None

    def matches(
        self,
        relative_path: str,
        name: str,
        is_directory: bool,
        ancestors: list[str],
    ) -> bool:
        """Check whether this pattern covers an entry or one of its ancestors."""
        return self.match_kind(relative_path, name, is_directory, ancestors) is not None


class GitIgnoreMatcher:
    """Evaluates the patterns of one ignore file against paths in its scope.

    Instances are immutable once built and safe to share between threads.
    Use :meth:`build` to construct one and :attr:`EMPTY` when no rules apply.

    Example:
        >>> matcher = GitIgnoreMatcher.build("/repo", ["*.log", "!keep.log"])
        >>> matcher.is_ignored("/repo/app.log", False, "app.log")
        True
        >>> matcher.is_ignored("/repo/keep.log", False, "keep.log")
        False
    """

    EMPTY: "GitIgnoreMatcher"

    __slots__ = ("_comparer", "_has_negation_rules", "_parent", "_patterns", "_root")

    def __init__(
        self,
        root: str,
        patterns: tuple[CompiledPattern, ...],
        comparer: PathComparer = PATH_COMPARER,
        parent: "GitIgnoreMatcher | None" = None,
    ) -> None:
        self._root = root
        self._patterns = patterns
        self._comparer = comparer
        self._parent = parent
        self._has_negation_rules = any(p.negated for p in patterns) or (
            parent is not None and parent.has_negation_rules
        )

    def __repr__(self) -> str:
        return f"GitIgnoreMatcher(root={self._root!r}, patterns={len(self._patterns)})"

    @property
    def root(self) -> str:
        """Normalized scope root (forward slashes, no trailing separator)."""
        return self._root

    @property
    def patterns(self) -> tuple[CompiledPattern, ...]:
        """Compiled patterns in declaration order."""
        return self._patterns

    @property
    def parent(self) -> "GitIgnoreMatcher | None":
        """Matcher of the enclosing ignore file, evaluated before this one."""
        return self._parent

    @property
    def has_negation_rules(self) -> bool:
        """True if any pattern in this matcher or its parents uses ``!``."""
        return self._has_negation_rules

    @classmethod
    def build(
        cls,
        root: str,
        lines: Iterable[str],
        *,
        comparer: PathComparer = PATH_COMPARER,
        parent: "GitIgnoreMatcher | None" = None,
    ) -> "GitIgnoreMatcher":
        """Compile ignore-file lines for one scope root.

        Malformed lines never raise: a line whose translation cannot be
        compiled is skipped.

        Args:
            root: Directory containing the ignore file.
            lines: Raw ignore-file lines.
            comparer: Case sensitivity policy for the compiled patterns.
            parent: Matcher of an enclosing ignore file to inherit from.

        Returns:
            A new matcher, or :attr:`EMPTY` if ``root`` is blank.
        """
        if not root or not root.strip():
            return cls.EMPTY

        normalized_root = normalize_separators(root).rstrip("/")
        if not normalized_root:
            return cls.EMPTY

        flags = re.IGNORECASE if comparer.ignore_case else 0
        patterns: list[CompiledPattern] = []
        for raw in lines:
            pattern = _compile_line(raw, flags)
            if pattern is not None:
                patterns.append(pattern)

        if parent is cls.EMPTY:
            parent = None
        return cls(normalized_root, tuple(patterns), comparer, parent)

    def is_ignored(self, path: str, is_directory: bool, name: str | None = None) -> bool:
        """Check whether a path is ignored by this matcher.

        The result is the polarity of the last pattern that matches the
        path or one of its ancestors. A directory that no pattern matches
        directly is still reported ignored when a pattern hides its
        contents (``bin/*``), unless any negation rule exists.

        Args:
            path: Full path of the entry.
            is_directory: True if the entry is a directory.
            name: Bare entry name. Derived from ``path`` when omitted.

        Returns:
            True if the entry is ignored.
        """
        if not path:
            return False

        if self._evaluate(path, is_directory, name)[0]:
            return True

        if is_directory and not self._has_negation_rules:
            return self._contents_ignored(path)

        return False

    def should_traverse_ignored_directory(self, path: str, name: str | None = None) -> bool:
        """Check whether an ignored directory must still be walked.

        Negation rules may re-include entries below an ignored directory,
        so such directories are traversed whenever any negation exists.
        Without negations the whole subtree can be pruned.

        Args:
            path: Full path of the ignored directory.
            name: Bare directory name.

        Returns:
            True if the directory must be traversed.
        """
        _ = (path, name)  # Decision depends on the rule set only
        return self._has_negation_rules

    def _evaluate(self, path: str, is_directory: bool, name: str | None) -> tuple[bool, bool]:
        """Apply the patterns along the chain in declaration order.

        A negation that reaches the entry only through an ancestor does
        not re-include an entry that a plain pattern matched directly:
        ``*.txt`` followed by ``!keep/`` keeps ``keep/a.txt`` ignored.

        Returns:
            Tuple of (ignored, ignored by a pattern matching the entry itself).
        """
        ignored = False
        by_entry = False
        if self._parent is not None:
            ignored, by_entry = self._parent._evaluate(path, is_directory, name)

        relative_path = self._relative_path(path) if self._patterns else None
        if not relative_path:
            return ignored, by_entry

        segments = relative_path.split("/")
        entry_name = name or segments[-1]
        ancestors = ["/".join(segments[:i]) for i in range(1, len(segments))]

        for pattern in self._patterns:
            kind = pattern.match_kind(relative_path, entry_name, is_directory, ancestors)
            if kind is None:
                continue
            if pattern.negated and kind is MatchKind.ANCESTOR and by_entry:
                continue
            ignored = not pattern.negated
            by_entry = ignored and kind is MatchKind.ENTRY
        return ignored, by_entry

    def _contents_ignored(self, path: str) -> bool:
        """Check whether a pattern targets only the contents of a directory."""
        if self._parent is not None and self._parent._contents_ignored(path):
            return True

        relative_path = self._relative_path(path) if self._patterns else None
        if not relative_path:
            return False

        name = relative_path.rsplit("/", 1)[-1]
        for pattern in self._patterns:
            parent = pattern.content_parent
            if parent is None:
                continue
            if parent.match_kind(relative_path, name, True, []) is MatchKind.ENTRY:
                return True
        return False

    def _relative_path(self, path: str) -> str | None:
        """Return ``path`` relative to the scope root, or None if outside it."""
        normalized = normalize_separators(path).rstrip("/")
        if not self._comparer.is_same_or_under(normalized, self._root):
            return None
        return normalized[len(self._root) :].lstrip("/")


GitIgnoreMatcher.EMPTY = GitIgnoreMatcher("", ())


def _compile_line(raw: str, flags: int) -> CompiledPattern | None:
    """Compile a single ignore-file line.

    Args:
        raw: Raw line text.
        flags: Regex flags (case sensitivity).

    Returns:
        CompiledPattern, or None for blank, comment and malformed lines.
    """
    line = raw.strip()
    if not line or line.startswith("#"):
        return None

    if line.startswith(("\\#", "\\!")):
        line = line[1:]
        negated = False
    else:
        negated = line.startswith("!")
        if negated:
            line = line[1:]

    line = normalize_separators(line).strip()
    directory_only = line.endswith("/")
    line = line.rstrip("/")
    anchored = line.startswith("/")
    line = line.lstrip("/")
    if not line:
        return None

    try:
        regex, match_by_name = _compile_glob(line, anchored, flags)
        content_parent = None
        if not negated and not directory_only:
            content_parent = _compile_content_parent(raw, line, anchored, flags)
    except (ValueError, re.error) as e:
        logger.debug("Skipping malformed ignore pattern %r: %s", raw, e)
        return None

    return CompiledPattern(
        source=raw,
        negated=negated,
        anchored=anchored,
        directory_only=directory_only,
        match_by_name=match_by_name,
        regex=regex,
        content_parent=content_parent,
    )


def _compile_content_parent(
    raw: str, glob: str, anchored: bool, flags: int
) -> CompiledPattern | None:
    """Compile the parent-directory pattern of a contents-only pattern."""
    for suffix in ("/**", "/*"):
        if glob.endswith(suffix):
            parent = glob[: -len(suffix)]
            if not parent or parent.endswith("/"):
                return None
            regex, match_by_name = _compile_glob(parent, anchored, flags)
            return CompiledPattern(
                source=raw,
                negated=False,
                anchored=anchored,
                directory_only=True,
                match_by_name=match_by_name,
                regex=regex,
            )
    return None


def normalize_glob(glob: str) -> tuple[str, bool]:
    """Rewrite a glob so that it matches one entry exactly.

    Runs of ``**`` segments collapse into one, leading ``**`` segments are
    removed (the glob then floats to any depth), a lone ``**`` becomes
    ``*`` and a trailing ``**`` becomes ``**/*``.

    Args:
        glob: Glob text without negation, anchoring or trailing slash.

    Returns:
        Tuple of (rewritten glob, True if a leading ``**`` was removed).
    """
    segments: list[str] = []
    for segment in glob.split("/"):
        if segment == "**" and segments and segments[-1] == "**":
            continue
        segments.append(segment)

    floats = False
    while len(segments) > 1 and segments[0] == "**":
        segments.pop(0)
        floats = True

    if segments == ["**"]:
        return "*", True
    if segments[-1] == "**":
        segments.append("*")
    return "/".join(segments), floats


def _compile_glob(glob: str, anchored: bool, flags: int) -> tuple[re.Pattern[str], bool]:
    """Compile a glob into a regex over a bare name or a relative path.

    Returns:
        Tuple of (compiled regex, True if it is matched against bare names).

    Raises:
        ValueError: If pathspec rejects the glob.
        re.error: If the translated expression does not compile.
    """
    body, floats = normalize_glob(glob)
    floats = floats or not anchored
    match_by_name = floats and "/" not in body

    # A leading "/" keeps pathspec from adding its own "**/" prefix
    source = "**/" + body if floats and not match_by_name else "/" + body
    regex, _ = GitIgnoreBasicPattern.pattern_to_regex(source)
    if regex is None:
        raise ValueError(f"no expression for {glob!r}")
    return re.compile(regex, flags), match_by_name
