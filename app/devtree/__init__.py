"""devtree - Ignore-aware project tree scanning.

Combines .gitignore files, ecosystem-aware smart ignore and simple
attribute filters into one visibility decision per filesystem entry.
"""

__version__ = "0.4.0"
