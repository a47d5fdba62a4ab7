"""Abstract base class for smart-ignore artifact rules.

This module defines the ArtifactRule interface that every ecosystem
rule implements, and the result type the rules produce.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SmartIgnoreResult:
    """Names a rule hides under the root it evaluated.

    Attributes:
        folder_names: Directory names to hide.
        file_names: File names to hide.
    """

    folder_names: frozenset[str] = field(default_factory=frozenset)
    file_names: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        """True if the result hides nothing."""
        return not self.folder_names and not self.file_names

    def union(self, other: "SmartIgnoreResult") -> "SmartIgnoreResult":
        """Combine two results into one."""
        return SmartIgnoreResult(
            folder_names=self.folder_names | other.folder_names,
            file_names=self.file_names | other.file_names,
        )


EMPTY_RESULT = SmartIgnoreResult()


class ArtifactRule(ABC):
    """Abstract base class for all smart-ignore rules.

    A rule inspects the top level of one directory and reports which
    build-artifact names of its ecosystem should be hidden there.

    Example:
        >>> rule = MarkerArtifactRule(PYTHON)
        >>> result = rule.evaluate("/work/project")
        >>> "__pycache__" in result.folder_names
        True
    """

    @property
    @abstractmethod
    def ecosystem(self) -> str:
        """Return the ecosystem this rule handles.

        Returns:
            Short ecosystem identifier (e.g. "python", "dotnet").
        """

    @abstractmethod
    def evaluate(self, root: str) -> SmartIgnoreResult:
        """Evaluate the rule for one directory.

        Must never raise for missing or unreadable directories.

        Args:
            root: Directory to inspect.

        Returns:
            Names to hide, or an empty result if the rule does not apply.
        """
