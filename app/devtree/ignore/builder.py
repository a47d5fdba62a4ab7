"""Ignore rules builder.

Discovers the project scopes of a scan root, decides which ignore options
apply there, and assembles the IgnoreRules value consumed by the scanners.

Scope discovery:
- A root with an ignore file, a project marker or no subfolders is one scope.
- Otherwise each candidate subfolder (the selected root folders, or every
  immediate subfolder) becomes a scope when the selection is explicit or
  when at least two candidates look like projects.
"""

import logging
import os
import threading
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from enum import Enum

from devtree.core.pathcmp import PATH_COMPARER, file_extension
from devtree.ignore.matcher import GitIgnoreMatcher
from devtree.ignore.rules import IgnoreRules, ScopedMatcher
from devtree.smart.base import EMPTY_RESULT, SmartIgnoreResult
from devtree.smart.detector import SmartIgnoreDetector

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_FILE_NAME = ".gitignore"

# Maximum number of compiled ignore files kept in memory
MATCHER_CACHE_LIMIT = 64

_PROJECT_MARKER_FILES: tuple[str, ...] = (
    "package.json",
    "pyproject.toml",
    "pom.xml",
    "build.gradle",
    "build.gradle.kts",
    "go.mod",
    "Cargo.toml",
    "composer.json",
    "pubspec.yaml",
    "Gemfile",
)

_PROJECT_MARKER_EXTENSIONS: frozenset[str] = frozenset(
    {".sln", ".csproj", ".fsproj", ".vbproj", ".vcxproj"}
)

# Never descended into while looking for nested ignore files
_VCS_DIRECTORIES: frozenset[str] = frozenset({".git", ".hg", ".svn"})


class IgnoreOption(str, Enum):
    """User-selectable ignore options.

    Attributes:
        SMART_IGNORE: Hide ecosystem build artifacts.
        USE_GITIGNORE: Apply ignore files found in the scanned tree.
        HIDDEN_FOLDERS: Hide directories with the hidden attribute.
        HIDDEN_FILES: Hide files with the hidden attribute.
        DOT_FOLDERS: Hide dot-prefixed directories.
        DOT_FILES: Hide dot-prefixed files.
        EXTENSIONLESS_FILES: Hide files without an extension.
    """

    SMART_IGNORE = "smart_ignore"
    USE_GITIGNORE = "use_gitignore"
    HIDDEN_FOLDERS = "hidden_folders"
    HIDDEN_FILES = "hidden_files"
    DOT_FOLDERS = "dot_folders"
    DOT_FILES = "dot_files"
    EXTENSIONLESS_FILES = "extensionless_files"


_OPTION_LABELS: dict[IgnoreOption, str] = {
    IgnoreOption.SMART_IGNORE: "Smart ignore (build artifacts)",
    IgnoreOption.USE_GITIGNORE: "Use .gitignore",
    IgnoreOption.HIDDEN_FOLDERS: "Hidden folders",
    IgnoreOption.HIDDEN_FILES: "Hidden files",
    IgnoreOption.DOT_FOLDERS: "Dot folders",
    IgnoreOption.DOT_FILES: "Dot files",
    IgnoreOption.EXTENSIONLESS_FILES: "Files without extension",
}


@dataclass(frozen=True, slots=True)
class IgnoreOptionsAvailability:
    """Which conditional ignore options make sense for a scan root.

    Attributes:
        include_gitignore: At least one scope has an ignore file.
        include_smart_ignore: Smart ignore can be toggled independently.
        include_extensionless_files: Offer the extensionless-files toggle.
    """

    include_gitignore: bool
    include_smart_ignore: bool
    include_extensionless_files: bool = False


@dataclass(frozen=True, slots=True)
class IgnoreOptionDescriptor:
    """One ignore option as presented to the user.

    Attributes:
        option: Option identifier.
        label: Human-readable label.
        default_checked: Whether the option starts enabled.
    """

    option: IgnoreOption
    label: str
    default_checked: bool


def get_ignore_options(availability: IgnoreOptionsAvailability) -> list[IgnoreOptionDescriptor]:
    """List the ignore options offered for a scan root, in display order.

    Args:
        availability: Conditional options computed for the root.

    Returns:
        Option descriptors. Extensionless files default to unchecked,
        everything else to checked.
    """
    options: list[IgnoreOption] = []
    if availability.include_smart_ignore:
        options.append(IgnoreOption.SMART_IGNORE)
    if availability.include_gitignore:
        options.append(IgnoreOption.USE_GITIGNORE)
    options.extend(
        (
            IgnoreOption.HIDDEN_FOLDERS,
            IgnoreOption.HIDDEN_FILES,
            IgnoreOption.DOT_FOLDERS,
            IgnoreOption.DOT_FILES,
        )
    )
    if availability.include_extensionless_files:
        options.append(IgnoreOption.EXTENSIONLESS_FILES)

    return [
        IgnoreOptionDescriptor(
            option=option,
            label=_OPTION_LABELS[option],
            default_checked=option != IgnoreOption.EXTENSIONLESS_FILES,
        )
        for option in options
    ]


@dataclass(frozen=True, slots=True)
class ProjectScope:
    """A directory treated as an independent project root.

    Attributes:
        root: Absolute scope root.
        has_ignore_file: The root directly contains an ignore file.
        looks_like_project: The root has an ignore file or a project marker.
    """

    root: str
    has_ignore_file: bool
    looks_like_project: bool


@dataclass(frozen=True, slots=True)
class ScanContext:
    """Project scopes discovered for one scan root."""

    scopes: tuple[ProjectScope, ...] = ()

    @property
    def is_single_scope_with_ignore_file(self) -> bool:
        return len(self.scopes) == 1 and self.scopes[0].has_ignore_file

    @property
    def has_any_ignore_file(self) -> bool:
        return any(scope.has_ignore_file for scope in self.scopes)

    @property
    def has_any_without_ignore_file(self) -> bool:
        return any(not scope.has_ignore_file for scope in self.scopes)

    @classmethod
    def from_scopes(cls, scopes: Iterable[ProjectScope]) -> "ScanContext":
        """Deduplicate and sort scopes by root."""
        unique: dict[str, ProjectScope] = {}
        for scope in scopes:
            unique.setdefault(PATH_COMPARER.key(scope.root), scope)
        ordered = sorted(unique.values(), key=lambda s: PATH_COMPARER.sort_key(s.root))
        return cls(tuple(ordered))


class _MatcherCache:
    """Compiled ignore files keyed by path and validated by (mtime, size)."""

    def __init__(self, limit: int = MATCHER_CACHE_LIMIT) -> None:
        self._limit = limit
        self._entries: dict[str, tuple[tuple[int, int], GitIgnoreMatcher]] = {}
        self._lock = threading.Lock()

    def load(
        self,
        scope_root: str,
        ignore_path: str,
        parent: GitIgnoreMatcher | None = None,
    ) -> GitIgnoreMatcher:
        """Return the compiled matcher for an ignore file.

        Args:
            scope_root: Directory containing the ignore file.
            ignore_path: Path of the ignore file.
            parent: Enclosing matcher for nested ignore files.

        Returns:
            Compiled matcher, or EMPTY if the file cannot be read.
        """
        try:
            info = os.stat(ignore_path)
        except OSError as e:
            logger.debug("Cannot stat ignore file %s: %s", ignore_path, e)
            return GitIgnoreMatcher.EMPTY

        signature = (info.st_mtime_ns, info.st_size)
        key = f"{PATH_COMPARER.key(ignore_path)}\0{id(parent) if parent is not None else 0}"

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None and cached[0] == signature and cached[1].parent is parent:
                return cached[1]

        try:
            with open(ignore_path, encoding="utf-8", errors="replace") as f:
                lines = f.read().splitlines()
        except OSError as e:
            logger.warning("Cannot read ignore file %s: %s", ignore_path, e)
            return GitIgnoreMatcher.EMPTY

        matcher = GitIgnoreMatcher.build(scope_root, lines, parent=parent)
        logger.debug("Compiled %d patterns from %s", len(matcher.patterns), ignore_path)

        with self._lock:
            self._entries[key] = (signature, matcher)
            if len(self._entries) > self._limit:
                self._entries.clear()

        return matcher

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


MATCHER_CACHE = _MatcherCache()


class IgnoreRulesBuilder:
    """Builds IgnoreRules for a scan root from the selected options.

    Args:
        detector: Smart-ignore detector. Defaults to the built-in rules.
        ignore_file_name: Name of the ignore files to honour.
        discover_nested: Also honour ignore files below scope roots.
    """

    def __init__(
        self,
        detector: SmartIgnoreDetector | None = None,
        *,
        ignore_file_name: str = DEFAULT_IGNORE_FILE_NAME,
        discover_nested: bool = True,
    ) -> None:
        self._detector = detector or SmartIgnoreDetector()
        self._ignore_file_name = ignore_file_name
        self._discover_nested = discover_nested

    def build(
        self,
        root: str,
        selected_options: Collection[IgnoreOption],
        selected_root_folders: Collection[str] | None = None,
    ) -> IgnoreRules:
        """Assemble the ignore policy for a scan.

        Smart ignore is only offered as its own toggle when some scope
        lacks an ignore file; for a single project with an ignore file it
        follows the gitignore toggle instead.

        Args:
            root: Scan root directory.
            selected_options: Options the user enabled.
            selected_root_folders: Top-level folders selected for the scan,
                or None for all.

        Returns:
            Immutable ignore rules.
        """
        context = self.discover_context(root, selected_root_folders)
        availability = _availability(context)

        requested_gitignore = (
            availability.include_gitignore and IgnoreOption.USE_GITIGNORE in selected_options
        )
        if availability.include_smart_ignore:
            use_smart_ignore = IgnoreOption.SMART_IGNORE in selected_options
        else:
            use_smart_ignore = context.is_single_scope_with_ignore_file and requested_gitignore

        smart = EMPTY_RESULT
        smart_roots: tuple[str, ...] = ()
        if use_smart_ignore:
            smart_roots = tuple(scope.root for scope in context.scopes)
            smart = self._detector.build_for_roots(smart_roots)

        scoped: tuple[ScopedMatcher, ...] = ()
        if requested_gitignore:
            scoped = self._build_scoped_matchers(context, smart)

        rules = IgnoreRules(
            ignore_hidden_folders=IgnoreOption.HIDDEN_FOLDERS in selected_options,
            ignore_hidden_files=IgnoreOption.HIDDEN_FILES in selected_options,
            ignore_dot_folders=IgnoreOption.DOT_FOLDERS in selected_options,
            ignore_dot_files=IgnoreOption.DOT_FILES in selected_options,
            ignore_extensionless_files=IgnoreOption.EXTENSIONLESS_FILES in selected_options,
            smart_ignored_folders=smart.folder_names,
            smart_ignored_files=smart.file_names,
            smart_ignore_scope_roots=smart_roots,
            use_smart_ignore=use_smart_ignore,
            use_gitignore=bool(scoped),
            scoped_matchers=scoped,
        )
        logger.debug(
            "Built ignore rules for %s: %d scopes, gitignore=%s (%d matchers), smart=%s",
            root,
            len(context.scopes),
            rules.use_gitignore,
            len(scoped),
            rules.use_smart_ignore,
        )
        return rules

    def get_availability(
        self,
        root: str,
        selected_root_folders: Collection[str] | None = None,
    ) -> IgnoreOptionsAvailability:
        """Compute which conditional ignore options apply to a root."""
        return _availability(self.discover_context(root, selected_root_folders))

    def discover_context(
        self,
        root: str,
        selected_root_folders: Collection[str] | None = None,
    ) -> ScanContext:
        """Discover the project scopes of a scan root.

        Args:
            root: Scan root directory.
            selected_root_folders: Explicit top-level folder selection.

        Returns:
            Scan context; empty if the root is blank or not a directory.
        """
        if not root or not root.strip() or not os.path.isdir(root):
            return ScanContext()

        root = os.path.abspath(root)
        explicit = bool(selected_root_folders)
        root_has_ignore = self._has_ignore_file(root)
        candidates = self._candidate_directories(root, selected_root_folders)

        if root_has_ignore or _has_project_marker(root) or not candidates:
            return ScanContext.from_scopes([ProjectScope(root, root_has_ignore, True)])

        scopes: list[ProjectScope] = []
        for directory in candidates:
            has_ignore = self._has_ignore_file(directory)
            looks_like_project = has_ignore or _has_project_marker(directory)
            scopes.append(ProjectScope(directory, has_ignore, looks_like_project))

        if not explicit and sum(1 for scope in scopes if scope.looks_like_project) < 2:
            return ScanContext.from_scopes([ProjectScope(root, root_has_ignore, True)])

        return ScanContext.from_scopes(scopes)

    def _has_ignore_file(self, directory: str) -> bool:
        return os.path.isfile(os.path.join(directory, self._ignore_file_name))

    def _candidate_directories(
        self,
        root: str,
        selected_root_folders: Collection[str] | None,
    ) -> list[str]:
        """Resolve the directories that may become scopes."""
        candidates: list[str] = []
        if selected_root_folders:
            for folder in selected_root_folders:
                if not folder or not folder.strip():
                    continue
                path = os.path.abspath(os.path.join(root, folder.strip()))
                if os.path.isdir(path):
                    candidates.append(path)
        else:
            try:
                with os.scandir(root) as entries:
                    candidates.extend(entry.path for entry in entries if entry.is_dir())
            except OSError as e:
                logger.debug("Cannot list %s for scope discovery: %s", root, e)

        unique = {PATH_COMPARER.key(path): path for path in candidates}
        return sorted(unique.values(), key=PATH_COMPARER.sort_key)

    def _build_scoped_matchers(
        self,
        context: ScanContext,
        smart: SmartIgnoreResult,
    ) -> tuple[ScopedMatcher, ...]:
        """Compile the ignore files of every scope, plus nested ones."""
        scoped: list[ScopedMatcher] = []
        for scope in context.scopes:
            top: ScopedMatcher | None = None
            if scope.has_ignore_file:
                ignore_path = os.path.join(scope.root, self._ignore_file_name)
                matcher = MATCHER_CACHE.load(scope.root, ignore_path)
                if matcher is not GitIgnoreMatcher.EMPTY:
                    top = ScopedMatcher(scope.root, matcher)
                    scoped.append(top)
            if self._discover_nested:
                scoped.extend(self._discover_nested_matchers(scope.root, top, smart))
        return tuple(scoped)

    def _discover_nested_matchers(
        self,
        scope_root: str,
        top: ScopedMatcher | None,
        smart: SmartIgnoreResult,
    ) -> list[ScopedMatcher]:
        """Walk below a scope root collecting nested ignore files.

        Directories hidden by VCS metadata, smart-ignore names or an
        enclosing matcher without negations are not descended into.
        Symlinked directories are not followed.
        """
        smart_folders = frozenset(name.casefold() for name in smart.folder_names)
        found: list[ScopedMatcher] = []
        stack: list[tuple[str, GitIgnoreMatcher | None]] = [
            (scope_root, top.matcher if top else None)
        ]

        while stack:
            directory, enclosing = stack.pop()
            try:
                with os.scandir(directory) as entries:
                    subdirs = [entry for entry in entries if entry.is_dir(follow_symlinks=False)]
            except OSError as e:
                logger.debug("Skipping %s during ignore file discovery: %s", directory, e)
                continue

            for entry in subdirs:
                if entry.name in _VCS_DIRECTORIES or entry.name.casefold() in smart_folders:
                    continue
                if (
                    enclosing is not None
                    and not enclosing.has_negation_rules
                    and enclosing.is_ignored(entry.path, True, entry.name)
                ):
                    continue

                matcher = enclosing
                ignore_path = os.path.join(entry.path, self._ignore_file_name)
                if os.path.isfile(ignore_path):
                    nested = MATCHER_CACHE.load(entry.path, ignore_path, parent=enclosing)
                    if nested is not GitIgnoreMatcher.EMPTY:
                        found.append(ScopedMatcher(entry.path, nested))
                        matcher = nested
                stack.append((entry.path, matcher))

        if found:
            logger.debug("Found %d nested ignore files under %s", len(found), scope_root)
        return found


def _availability(context: ScanContext) -> IgnoreOptionsAvailability:
    if not context.scopes:
        return IgnoreOptionsAvailability(include_gitignore=False, include_smart_ignore=False)
    return IgnoreOptionsAvailability(
        include_gitignore=context.has_any_ignore_file,
        include_smart_ignore=(
            not context.is_single_scope_with_ignore_file and context.has_any_without_ignore_file
        ),
    )


def _has_project_marker(directory: str) -> bool:
    """Check the top level of a directory for a project marker file."""
    for marker in _PROJECT_MARKER_FILES:
        if os.path.isfile(os.path.join(directory, marker)):
            return True

    extensions = frozenset(ext.casefold() for ext in _PROJECT_MARKER_EXTENSIONS)
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if file_extension(entry.name).casefold() in extensions and entry.is_file():
                    return True
    except OSError as e:
        logger.debug("Cannot list %s for project markers: %s", directory, e)
    return False
