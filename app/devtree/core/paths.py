"""Locations of devtree's user files.

devtree keeps its files in one XDG configuration directory,
``$XDG_CONFIG_HOME/devtree`` or ``~/.config/devtree`` when the variable
is unset or empty:

- ``config.toml``: ignore defaults and ignore-file discovery settings
- ``theme.toml``: optional colour overrides
"""

import os
from pathlib import Path

APP_NAME = "devtree"
CONFIG_FILE_NAME = "config.toml"
THEME_FILE_NAME = "theme.toml"


def get_config_dir() -> Path:
    """Return the devtree configuration directory.

    The directory is not created; see :func:`ensure_config_dir`.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_NAME


def get_config_path() -> Path:
    """Return the path of ``config.toml``."""
    return get_config_dir() / CONFIG_FILE_NAME


def get_theme_path() -> Path:
    """Return the path of the optional ``theme.toml``."""
    return get_config_dir() / THEME_FILE_NAME


def ensure_config_dir() -> Path:
    """Create the configuration directory and its parents if missing.

    Returns:
        The configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    config_dir = get_config_dir()
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {config_dir}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {config_dir}: {e}"
        raise RuntimeError(msg) from e
    return config_dir
