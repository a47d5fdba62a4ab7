"""Concrete smart-ignore rules."""

import logging
import os

from devtree.core.pathcmp import PATH_COMPARER
from devtree.smart.base import EMPTY_RESULT, ArtifactRule, SmartIgnoreResult
from devtree.smart.tables import COMMON_FILE_NAMES, ArtifactTable

logger = logging.getLogger(__name__)


class MarkerArtifactRule(ArtifactRule):
    """Hides an ecosystem's artifacts under roots that contain its markers.

    Markers are only looked up directly inside the root, never recursively.

    Args:
        table: Marker and artifact names of the ecosystem.
    """

    def __init__(self, table: ArtifactTable) -> None:
        self._table = table

    def __repr__(self) -> str:
        return f"MarkerArtifactRule({self._table.ecosystem!r})"

    @property
    def ecosystem(self) -> str:
        return self._table.ecosystem

    @property
    def table(self) -> ArtifactTable:
        """Return the artifact table this rule applies."""
        return self._table

    def evaluate(self, root: str) -> SmartIgnoreResult:
        if not os.path.isdir(root):
            return EMPTY_RESULT

        try:
            has_marker = self._has_marker(root)
        except OSError as e:
            logger.debug("Cannot inspect %s for %s markers: %s", root, self.ecosystem, e)
            return EMPTY_RESULT

        if not has_marker:
            return EMPTY_RESULT

        logger.debug("Detected %s project at %s", self.ecosystem, root)
        return SmartIgnoreResult(
            folder_names=self._table.folder_names,
            file_names=self._table.file_names,
        )

    def _has_marker(self, root: str) -> bool:
        """Check the top level of ``root`` for any marker file.

        Raises:
            OSError: If the directory cannot be listed.
        """
        for marker in self._table.marker_files:
            if os.path.isfile(os.path.join(root, marker)):
                return True

        if not self._table.marker_extensions:
            return False

        extensions = tuple(PATH_COMPARER.key(ext) for ext in self._table.marker_extensions)
        with os.scandir(root) as entries:
            for entry in entries:
                if PATH_COMPARER.key(entry.name).endswith(extensions) and entry.is_file():
                    return True
        return False


class CommonArtifactRule(ArtifactRule):
    """Hides operating-system clutter files under every root."""

    @property
    def ecosystem(self) -> str:
        return "common"

    def evaluate(self, root: str) -> SmartIgnoreResult:
        _ = root  # Applies everywhere
        return SmartIgnoreResult(file_names=COMMON_FILE_NAMES)
