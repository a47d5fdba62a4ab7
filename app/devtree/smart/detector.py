"""Smart-ignore detector.

Runs every artifact rule against the scan roots and unions the names
they report into the sets consumed by IgnoreRules.
"""

import logging
from collections.abc import Iterable

from devtree.smart.base import EMPTY_RESULT, ArtifactRule, SmartIgnoreResult
from devtree.smart.rules import CommonArtifactRule, MarkerArtifactRule
from devtree.smart.tables import ECOSYSTEM_TABLES

logger = logging.getLogger(__name__)


def default_rules() -> tuple[ArtifactRule, ...]:
    """Return the built-in rules: one per ecosystem table plus OS clutter."""
    marker_rules = tuple(MarkerArtifactRule(table) for table in ECOSYSTEM_TABLES)
    return (*marker_rules, CommonArtifactRule())


class SmartIgnoreDetector:
    """Aggregates artifact rules over one or more roots.

    Args:
        rules: Ordered rules to evaluate. Defaults to :func:`default_rules`.
    """

    def __init__(self, rules: Iterable[ArtifactRule] | None = None) -> None:
        self._rules = tuple(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> tuple[ArtifactRule, ...]:
        """Return the rules evaluated by this detector."""
        return self._rules

    def build(self, root: str) -> SmartIgnoreResult:
        """Union every rule's result for one root.

        Args:
            root: Directory to inspect.

        Returns:
            Combined folder and file names to hide.
        """
        result = EMPTY_RESULT
        for rule in self._rules:
            result = result.union(rule.evaluate(root))
        return result

    def build_for_roots(self, roots: Iterable[str]) -> SmartIgnoreResult:
        """Union :meth:`build` over several roots.

        Args:
            roots: Directories to inspect (the scan root, or each selected
                top-level folder).

        Returns:
            Combined folder and file names to hide.
        """
        result = EMPTY_RESULT
        for root in roots:
            result = result.union(self.build(root))
        logger.debug(
            "Smart ignore: %d folder names, %d file names",
            len(result.folder_names),
            len(result.file_names),
        )
        return result
