"""Ignore policy aggregate.

IgnoreRules combines the attribute toggles, the smart-ignore name sets and
the scoped gitignore matchers into one read-only value consulted by the
scanners for every entry.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from devtree.core.attributes import is_hidden
from devtree.core.pathcmp import PATH_COMPARER, file_extension, normalize_separators
from devtree.ignore.matcher import GitIgnoreMatcher


class IgnoreLayer(str, Enum):
    """Policy layer responsible for hiding an entry.

    Attributes:
        HIDDEN: Platform hidden attribute.
        DOT: Dot-prefixed name.
        SMART: Smart-ignore artifact name.
        EXTENSIONLESS: File without an extension.
        GITIGNORE: Pattern in a scoped ignore file.
    """

    HIDDEN = "hidden"
    DOT = "dot"
    SMART = "smart"
    EXTENSIONLESS = "extensionless"
    GITIGNORE = "gitignore"


@dataclass(frozen=True, slots=True)
class ScopedMatcher:
    """A gitignore matcher bound to the directory its ignore file lives in.

    Attributes:
        root: Scope root directory.
        matcher: Compiled patterns of the scope's ignore file.
    """

    root: str
    matcher: GitIgnoreMatcher


def _casefold_all(names: Iterable[str]) -> frozenset[str]:
    return frozenset(name.casefold() for name in names)


@dataclass(frozen=True, slots=True)
class IgnoreRules:
    """Immutable ignore policy for one scan.

    Smart-ignore names are compared case-insensitively on every platform.

    Attributes:
        ignore_hidden_folders: Hide directories with the hidden attribute.
        ignore_hidden_files: Hide files with the hidden attribute.
        ignore_dot_folders: Hide directories whose name starts with ``.``.
        ignore_dot_files: Hide files whose name starts with ``.``.
        ignore_extensionless_files: Hide files without an extension.
        smart_ignored_folders: Directory names hidden by smart ignore.
        smart_ignored_files: File names hidden by smart ignore.
        smart_ignore_scope_roots: Roots under which smart ignore applies.
        use_smart_ignore: Enable the smart-ignore layer.
        use_gitignore: Enable the gitignore layer.
        scoped_matchers: One matcher per discovered ignore file.
    """

    ignore_hidden_folders: bool = False
    ignore_hidden_files: bool = False
    ignore_dot_folders: bool = False
    ignore_dot_files: bool = False
    ignore_extensionless_files: bool = False
    smart_ignored_folders: frozenset[str] = field(default_factory=frozenset)
    smart_ignored_files: frozenset[str] = field(default_factory=frozenset)
    smart_ignore_scope_roots: tuple[str, ...] = ()
    use_smart_ignore: bool = False
    use_gitignore: bool = False
    scoped_matchers: tuple[ScopedMatcher, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "smart_ignored_folders", _casefold_all(self.smart_ignored_folders))
        object.__setattr__(self, "smart_ignored_files", _casefold_all(self.smart_ignored_files))
        object.__setattr__(self, "smart_ignore_scope_roots", tuple(self.smart_ignore_scope_roots))
        object.__setattr__(self, "scoped_matchers", tuple(self.scoped_matchers))

    def resolve_gitignore_matcher(self, path: str) -> GitIgnoreMatcher:
        """Return the matcher of the nearest enclosing scope.

        Args:
            path: Full path of the entry.

        Returns:
            The matcher whose root is the longest ancestor-or-self of
            ``path``, or :attr:`GitIgnoreMatcher.EMPTY`.
        """
        if not self.use_gitignore or not self.scoped_matchers or not path:
            return GitIgnoreMatcher.EMPTY

        best: GitIgnoreMatcher = GitIgnoreMatcher.EMPTY
        best_length = -1
        for scoped in self.scoped_matchers:
            if not PATH_COMPARER.is_same_or_under(path, scoped.root):
                continue
            length = len(normalize_separators(scoped.root).rstrip("/"))
            if length > best_length:
                best = scoped.matcher
                best_length = length
        return best

    def should_apply_smart_ignore(self, path: str) -> bool:
        """Check whether smart-ignore names apply at ``path``."""
        if not self.use_smart_ignore or not path:
            return False
        return any(
            PATH_COMPARER.is_same_or_under(path, root) for root in self.smart_ignore_scope_roots
        )

    def explain(self, path: str, is_directory: bool, name: str) -> IgnoreLayer | None:
        """Return the first policy layer that hides an entry.

        Layers are evaluated cheapest first: dot prefix, smart-ignore
        names, extensionless files, hidden attribute, gitignore.

        Args:
            path: Full path of the entry.
            is_directory: True if the entry is a directory.
            name: Bare entry name.

        Returns:
            The deciding layer, or None if the entry is visible.
        """
        layer = self._attribute_layer(path, is_directory, name)
        if layer is not None:
            return layer
        if self.resolve_gitignore_matcher(path).is_ignored(path, is_directory, name):
            return IgnoreLayer.GITIGNORE
        return None

    def is_ignored(self, path: str, is_directory: bool, name: str) -> bool:
        """Check whether any enabled policy layer hides an entry."""
        return self.explain(path, is_directory, name) is not None

    def should_traverse_ignored_directory(self, path: str, name: str) -> bool:
        """Check whether an ignored directory must still be walked.

        Only directories hidden by the gitignore layer alone are walked,
        and only when their matcher carries negation rules that may
        re-include descendants.

        Args:
            path: Full path of the ignored directory.
            name: Bare directory name.

        Returns:
            True if the directory must be traversed.
        """
        if self._attribute_layer(path, True, name) is not None:
            return False
        matcher = self.resolve_gitignore_matcher(path)
        if not matcher.is_ignored(path, True, name):
            return False
        return matcher.should_traverse_ignored_directory(path, name)

    def _attribute_layer(self, path: str, is_directory: bool, name: str) -> IgnoreLayer | None:
        """Evaluate every layer except gitignore."""
        ignore_dot = self.ignore_dot_folders if is_directory else self.ignore_dot_files
        if ignore_dot and name.startswith("."):
            return IgnoreLayer.DOT

        if self.should_apply_smart_ignore(path):
            names = self.smart_ignored_folders if is_directory else self.smart_ignored_files
            if name.casefold() in names:
                return IgnoreLayer.SMART

        if not is_directory and self.ignore_extensionless_files and not file_extension(name):
            return IgnoreLayer.EXTENSIONLESS

        ignore_hidden = self.ignore_hidden_folders if is_directory else self.ignore_hidden_files
        if ignore_hidden and is_hidden(path, name):
            return IgnoreLayer.HIDDEN

        return None
