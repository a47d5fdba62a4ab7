"""Config command implementation.

Shows, creates and locates the devtree configuration file.
"""

from typing import Annotated

import tomli_w
import typer
from rich.markup import escape

from devtree.cli.types import load_cli_config
from devtree.core.config import ConfigError, DevtreeConfig, save_config
from devtree.core.paths import ensure_config_dir, get_config_path
from devtree.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the devtree configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Print the effective configuration as TOML."""
    config_path = get_config_path()
    config = load_cli_config()

    if config_path.exists():
        print_info(f"Configuration from {escape(str(config_path))}")
    else:
        print_info("No configuration file, showing defaults")
    console.print(tomli_w.dumps(config.model_dump()), markup=False, highlight=False)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing configuration file."),
    ] = False,
) -> None:
    """Write a configuration file with the default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        ensure_config_dir()
        saved = save_config(DevtreeConfig(), config_path)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Configuration written to {saved}")


@app.command()
def path() -> None:
    """Print the configuration file path."""
    typer.echo(get_config_path())
