"""Base exception for devtree."""


class DevtreeError(Exception):
    """Base exception for all devtree errors."""
