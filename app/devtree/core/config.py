"""devtree configuration and settings.

This module provides the configuration model and I/O functions for the
default ignore options and ignore-file discovery settings.

Configuration is stored in ~/.config/devtree/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from devtree.core.errors import DevtreeError
from devtree.core.paths import get_config_path
from devtree.ignore.builder import DEFAULT_IGNORE_FILE_NAME, IgnoreOption

logger = logging.getLogger(__name__)


class IgnoreDefaults(BaseModel):
    """Default state of each ignore option.

    Field names match the :class:`IgnoreOption` values.
    """

    model_config = ConfigDict(extra="forbid")

    smart_ignore: Annotated[bool, Field(description="Hide ecosystem build artifacts")] = True
    use_gitignore: Annotated[bool, Field(description="Apply .gitignore files")] = True
    hidden_folders: Annotated[bool, Field(description="Hide hidden directories")] = True
    hidden_files: Annotated[bool, Field(description="Hide hidden files")] = True
    dot_folders: Annotated[bool, Field(description="Hide dot-prefixed directories")] = True
    dot_files: Annotated[bool, Field(description="Hide dot-prefixed files")] = True
    extensionless_files: Annotated[
        bool,
        Field(description="Hide files without an extension"),
    ] = False

    def selected_options(self) -> set[IgnoreOption]:
        """Return the options enabled by default."""
        return {IgnoreOption(name) for name, enabled in self.model_dump().items() if enabled}


class DevtreeConfig(BaseModel):
    """Configuration for devtree.

    Attributes:
        ignore: Default state of each ignore option.
        discover_nested: Honour ignore files below project roots.
        ignore_file_name: Name of the ignore files to honour.
    """

    model_config = ConfigDict(extra="forbid")

    ignore: IgnoreDefaults = Field(default_factory=IgnoreDefaults)
    discover_nested: Annotated[
        bool,
        Field(description="Honour ignore files found below project roots"),
    ] = True
    ignore_file_name: Annotated[
        str,
        Field(min_length=1, description="Ignore file name (default: .gitignore)"),
    ] = DEFAULT_IGNORE_FILE_NAME

    @field_validator("ignore_file_name")
    @classmethod
    def validate_ignore_file_name(cls, v: str) -> str:
        """Ensure the ignore file name is a bare file name."""
        name = v.strip()
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            msg = f"ignore_file_name must be a bare file name, got {v!r}"
            raise ValueError(msg)
        return name


class ConfigError(DevtreeError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> DevtreeConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated DevtreeConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return DevtreeConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def load_config_or_default(path: Path | None = None) -> DevtreeConfig:
    """Load configuration, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file, using defaults")
        return DevtreeConfig()


def save_config(config: DevtreeConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The DevtreeConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config.model_dump(), f)
        os.replace(tmp_path, config_path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
