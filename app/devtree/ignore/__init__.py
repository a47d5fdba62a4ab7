"""Ignore policy: gitignore matching, policy aggregation and rule building."""

from devtree.ignore.builder import (
    DEFAULT_IGNORE_FILE_NAME,
    MATCHER_CACHE,
    IgnoreOption,
    IgnoreOptionDescriptor,
    IgnoreOptionsAvailability,
    IgnoreRulesBuilder,
    ProjectScope,
    ScanContext,
    get_ignore_options,
)
from devtree.ignore.matcher import CompiledPattern, GitIgnoreMatcher, MatchKind, normalize_glob
from devtree.ignore.rules import IgnoreLayer, IgnoreRules, ScopedMatcher

__all__ = [
    "DEFAULT_IGNORE_FILE_NAME",
    "MATCHER_CACHE",
    "CompiledPattern",
    "GitIgnoreMatcher",
    "IgnoreLayer",
    "IgnoreOption",
    "IgnoreOptionDescriptor",
    "IgnoreOptionsAvailability",
    "IgnoreRules",
    "IgnoreRulesBuilder",
    "MatchKind",
    "ProjectScope",
    "ScanContext",
    "ScopedMatcher",
    "get_ignore_options",
    "normalize_glob",
]
