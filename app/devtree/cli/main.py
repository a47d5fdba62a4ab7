"""devtree command line entry point.

Holds the root Typer app, the options shared by every command and the
command registry.
"""

from typing import Annotated

import typer

from devtree import __version__
from devtree.cli.commands import check, config, scan, tree
from devtree.utils.formatting import configure_logging

app = typer.Typer(
    name="devtree",
    help="Show directory trees without build artifacts and ignored files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print the devtree version and stop option processing."""
    if not value:
        return
    typer.echo(f"devtree version {__version__}")
    raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Print the version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log scan decisions to stderr."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Omit summary lines."),
    ] = False,
) -> None:
    """devtree - Directory trees that hide what your tools generate.

    Combines .gitignore files, ecosystem-aware artifact detection and
    hidden-file filters into one view of a source tree.
    """
    configure_logging(verbose)

    # Shared with subcommands through ctx.obj
    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, quiet=quiet)


app.command(name="tree")(tree.tree)
app.command(name="check")(check.check)
app.add_typer(scan.app, name="scan")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
