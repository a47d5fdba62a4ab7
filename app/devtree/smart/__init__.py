"""Smart-ignore artifact detection.

This module detects project ecosystems from marker files and reports
the build-artifact names that should be hidden under each project root.
"""

from devtree.smart.base import EMPTY_RESULT, ArtifactRule, SmartIgnoreResult
from devtree.smart.detector import SmartIgnoreDetector, default_rules
from devtree.smart.rules import CommonArtifactRule, MarkerArtifactRule
from devtree.smart.tables import (
    COMMON_FILE_NAMES,
    DOTNET,
    ECOSYSTEM_TABLES,
    FRONTEND,
    GO,
    JVM,
    PHP,
    PYTHON,
    RUBY,
    RUST,
    ArtifactTable,
)

__all__ = [
    "COMMON_FILE_NAMES",
    "DOTNET",
    "ECOSYSTEM_TABLES",
    "EMPTY_RESULT",
    "FRONTEND",
    "GO",
    "JVM",
    "PHP",
    "PYTHON",
    "RUBY",
    "RUST",
    "ArtifactRule",
    "ArtifactTable",
    "CommonArtifactRule",
    "MarkerArtifactRule",
    "SmartIgnoreDetector",
    "SmartIgnoreResult",
    "default_rules",
]
