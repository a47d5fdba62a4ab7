"""Tree builder.

Builds the visible TreeNode hierarchy of a directory under an ignore
policy and the extension, root-folder and name filters of a
TreeFilterOptions value.
"""

import logging
import os
import threading
from dataclasses import dataclass, field

from devtree.core.pathcmp import file_extension, name_sort_key
from devtree.filesystem.decisions import (
    EntryDecision,
    decide,
    is_visible_directory,
    raise_if_cancelled,
)
from devtree.filesystem.icons import icon_key_for
from devtree.filesystem.models import ScanResult, TreeFilterOptions, TreeNode
from devtree.filesystem.scanner import directory_identity, is_directory_entry

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _BuildState:
    """Mutable bookkeeping for one build."""

    root_access_denied: bool = False
    had_access_denied: bool = False
    visited: set[tuple[int, int]] = field(default_factory=set)


def _entry_sort_key(entry: os.DirEntry[str]) -> tuple[int, str, str]:
    folded, name = name_sort_key(entry.name)
    return (0 if is_directory_entry(entry) else 1, folded, name)


class TreeBuilder:
    """Builds filtered directory trees.

    Builders are stateless; concurrent builds do not share state.

    Example:
        >>> builder = TreeBuilder()
        >>> result = builder.build("/work/project", TreeFilterOptions())
        >>> result.value.child_names
        ['src', 'README.md']
    """

    def build(
        self,
        root: str,
        options: TreeFilterOptions,
        cancel: threading.Event | None = None,
    ) -> ScanResult[TreeNode | None]:
        """Build the visible tree beneath ``root``.

        Args:
            root: Scan root directory.
            options: Filters and ignore policy.
            cancel: Optional cancellation event.

        Returns:
            ScanResult whose value is the root node, or None if the root
            does not exist. A root that cannot be listed yields a
            childless node marked access denied.

        Raises:
            ScanCancelledError: If ``cancel`` is set during the build.
        """
        raise_if_cancelled(cancel)
        if not root or not root.strip() or not os.path.isdir(root):
            return ScanResult(None)

        root = os.path.abspath(root)
        state = _BuildState()
        identity = directory_identity(root)
        if identity is not None:
            state.visited.add(identity)

        children, denied = self._build_children(root, options, True, state, cancel)
        name = os.path.basename(root) or root
        node = TreeNode(
            name=name,
            full_path=root,
            is_directory=True,
            is_access_denied=denied,
            icon_key=icon_key_for(name, True, denied),
            children=children,
        )
        return ScanResult(node, state.root_access_denied, state.had_access_denied)

    def _build_children(
        self,
        path: str,
        options: TreeFilterOptions,
        is_root: bool,
        state: _BuildState,
        cancel: threading.Event | None,
    ) -> tuple[tuple[TreeNode, ...], bool]:
        """Build the visible children of one directory.

        Returns:
            Tuple of (children in display order, directory was denied).
        """
        raise_if_cancelled(cancel)
        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=_entry_sort_key)
        except PermissionError:
            logger.warning("Permission denied scanning directory: %s", path)
            state.had_access_denied = True
            if is_root:
                state.root_access_denied = True
            return (), True
        except OSError as e:
            logger.debug("Cannot list %s: %s", path, e)
            return (), False

        rules = options.ignore_rules
        children: list[TreeNode] = []
        for entry in entries:
            raise_if_cancelled(cancel)
            name = entry.name
            full_path = entry.path

            if not is_directory_entry(entry):
                node = self._file_node(entry, options)
                if node is not None:
                    children.append(node)
                continue

            if is_root and not options.allows_root_folder(name):
                continue

            decision = decide(rules, full_path, True, name)
            if decision is EntryDecision.SKIP:
                continue

            identity = directory_identity(full_path)
            if identity is not None:
                if identity in state.visited:
                    logger.debug("Skipping already visited directory: %s", full_path)
                    continue
                state.visited.add(identity)

            sub_children, denied = self._build_children(full_path, options, False, state, cancel)

            if not is_visible_directory(decision, bool(sub_children), denied):
                continue
            if options.name_filter is not None:
                if not sub_children and not options.matches_name(name):
                    continue

            children.append(
                TreeNode(
                    name=name,
                    full_path=full_path,
                    is_directory=True,
                    is_access_denied=denied,
                    icon_key=icon_key_for(name, True, denied),
                    children=sub_children,
                )
            )

        return tuple(children), False

    def _file_node(self, entry: os.DirEntry[str], options: TreeFilterOptions) -> TreeNode | None:
        """Return the node for a file entry, or None if it is filtered out."""
        name = entry.name
        if decide(options.ignore_rules, entry.path, False, name) is not EntryDecision.KEEP:
            return None

        extension = file_extension(name)
        if extension and not options.allows_extension(extension):
            return None

        if not options.matches_name(name):
            return None

        return TreeNode(
            name=name,
            full_path=entry.path,
            is_directory=False,
            icon_key=icon_key_for(name, False),
        )
