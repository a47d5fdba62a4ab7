"""Platform hidden-attribute query."""

import logging
import os
import stat
import sys

logger = logging.getLogger(__name__)

_FILE_ATTRIBUTE_HIDDEN = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0x2)
_UF_HIDDEN = getattr(stat, "UF_HIDDEN", 0x8000)


def is_hidden(path: str, name: str | None = None) -> bool:
    """Check whether a filesystem entry carries the platform hidden attribute.

    On Windows this is the ``FILE_ATTRIBUTE_HIDDEN`` flag. Elsewhere a
    dot-prefixed name counts as hidden, as does the BSD/macOS
    ``UF_HIDDEN`` flag. An entry whose attributes cannot be read is
    treated as hidden.

    Args:
        path: Full path of the entry.
        name: Bare entry name. Derived from ``path`` when omitted.

    Returns:
        True if the entry is hidden.
    """
    entry_name = name or os.path.basename(path.rstrip("/\\"))
    if sys.platform != "win32" and entry_name.startswith("."):
        return True

    try:
        info = os.lstat(path)
    except OSError as e:
        logger.debug("Cannot read attributes of %s: %s", path, e)
        return True

    if sys.platform == "win32":
        return bool(getattr(info, "st_file_attributes", 0) & _FILE_ATTRIBUTE_HIDDEN)
    return bool(getattr(info, "st_flags", 0) & _UF_HIDDEN)
