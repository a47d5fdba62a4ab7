"""Colour theme for devtree output.

Defaults live in :class:`ThemeColors`. Individual colours can be
overridden in the ``[colors]`` table of ``~/.config/devtree/theme.toml``::

    [colors]
    folder = "#3b82f6"
    layer_smart = "#a3e635"
"""

import logging
import sys
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from devtree.core.paths import get_theme_path

logger = logging.getLogger(__name__)

# Rich style name -> (style template, ThemeColors field)
_STYLES: dict[str, tuple[str, str]] = {
    "text": ("{}", "text"),
    "muted": ("{}", "muted"),
    "dim": ("{}", "muted"),
    "header": ("{}", "header"),
    "bold_header": ("bold {}", "header"),
    "border": ("{}", "border"),
    "success": ("{}", "success"),
    "warning": ("{}", "warning"),
    "error": ("bold {}", "error"),
    "info": ("{}", "info"),
    "tree.folder": ("bold {}", "folder"),
    "tree.file": ("{}", "file"),
    "tree.denied": ("bold {}", "denied"),
    "layer.gitignore": ("{}", "layer_gitignore"),
    "layer.smart": ("{}", "layer_smart"),
    "layer.attribute": ("{}", "layer_attribute"),
}


class ThemeColors(BaseModel):
    """Hex colours used by devtree's Rich styles (#RGB or #RRGGBB)."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Tree entries
    folder: str = "#0e8ac8"
    file: str = "#dfe6e9"
    denied: str = "#d44ebc"

    # Ignore layers in check output
    layer_gitignore: str = "#faf870"
    layer_smart: str = "#c1ff62"
    layer_attribute: str = "#b2bec3"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Reject anything but a #RGB or #RRGGBB string."""
        field = info.field_name
        if not isinstance(v, str):
            raise ValueError(f"{field}: color must be a string")

        color = v.strip()
        digits = color[1:]
        if not color.startswith("#"):
            raise ValueError(f"{field}: color must start with '#'")
        if len(digits) not in (3, 6):
            raise ValueError(f"{field}: color must be #RGB or #RRGGBB format")
        if any(c not in "0123456789abcdefABCDEF" for c in digits):
            raise ValueError(f"{field}: invalid hex color '{color}'")
        return color


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the ``[colors]`` table of a theme file.

    Non-string values are dropped.

    Returns:
        Colour overrides, or None if the file is missing or unusable.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme file %s: %s", path, e)
        print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring non-table 'colors' entry in %s", path)
        return None
    return {str(key): value for key, value in colors.items() if isinstance(value, str)}


def load_theme(path: Path | None = None) -> ThemeColors:
    """Return the default colours with user overrides applied.

    Args:
        path: Theme file. Defaults to ``theme.toml`` in the config directory.

    Returns:
        ThemeColors; the defaults when the overrides do not validate.
    """
    theme_path = path or get_theme_path()
    overrides = _load_toml_colors(theme_path)
    if not overrides:
        return ThemeColors()

    try:
        colors = ThemeColors(**overrides)
    except ValidationError as e:
        logger.warning("Ignoring invalid theme %s: %s", theme_path, e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()

    logger.debug("Applied %d colour overrides from %s", len(overrides), theme_path)
    return colors


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme for a set of colours.

    Args:
        colors: Colours to use. Loaded from the user theme when None.
    """
    palette = (colors or load_theme()).model_dump()
    return Theme(
        {style: template.format(palette[field]) for style, (template, field) in _STYLES.items()}
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the process-wide Rich theme, building it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme


def reload_theme() -> Theme:
    """Rebuild the process-wide Rich theme from the theme file."""
    global _cached_theme
    _cached_theme = get_rich_theme()
    return _cached_theme
