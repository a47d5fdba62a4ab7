"""Unit tests for the config commands."""

import tomllib
from pathlib import Path

from devtree.cli.main import app
from devtree.core.config import DevtreeConfig, load_config
from typer.testing import CliRunner

runner = CliRunner()


def config_file(config_home: Path) -> Path:
    """Return the config file under an XDG config home."""
    return config_home / "devtree" / "config.toml"


class TestConfigPath:
    """Tests for devtree config path."""

    def test_prints_path(self, isolated_config: Path) -> None:
        """The configured location is printed."""
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert result.stdout.strip() == str(config_file(isolated_config))


class TestConfigInit:
    """Tests for devtree config init."""

    def test_writes_defaults(self, isolated_config: Path) -> None:
        """init writes the default configuration."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert "Configuration written" in result.stdout
        assert load_config(config_file(isolated_config)) == DevtreeConfig()

    def test_refuses_to_overwrite(self, isolated_config: Path) -> None:
        """An existing file is kept without --force."""
        path = config_file(isolated_config)
        path.parent.mkdir(parents=True)
        path.write_text("discover_nested = false\n")

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert path.read_text() == "discover_nested = false\n"

    def test_force_overwrites(self, isolated_config: Path) -> None:
        """--force replaces an existing file."""
        path = config_file(isolated_config)
        path.parent.mkdir(parents=True)
        path.write_text("discover_nested = false\n")

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert load_config(path).discover_nested is True


class TestConfigShow:
    """Tests for devtree config show."""

    def test_shows_defaults(self) -> None:
        """Without a file the defaults are printed as TOML."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "showing defaults" in result.stdout
        toml_text = result.stdout.split("\n", 1)[1]
        assert tomllib.loads(toml_text) == DevtreeConfig().model_dump()

    def test_shows_file_values(self, isolated_config: Path) -> None:
        """Values from the config file are shown."""
        path = config_file(isolated_config)
        path.parent.mkdir(parents=True)
        path.write_text('ignore_file_name = ".ignore"\n')

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Configuration from" in result.stdout
        assert 'ignore_file_name = ".ignore"' in result.stdout
