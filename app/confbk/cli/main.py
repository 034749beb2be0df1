"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from confbk import __version__
from confbk.cli.commands import backup, config
from confbk.utils.formatting import err_console, print_error

# Create main Typer app
app = typer.Typer(
    name="confbk",
    help="Easily back up important configuration files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"confbk version {__version__}")
        raise typer.Exit()


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route confbk log records to stderr through Rich.

    WARNING by default, DEBUG with --verbose, ERROR with --quiet.
    """
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    logger = logging.getLogger("confbk")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=err_console, show_time=False, show_path=False, markup=False)
    )
    logger.setLevel(level)
    logger.propagate = False


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
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Display more verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Do not display any output.",
        ),
    ] = False,
) -> None:
    """confbk - Easily back up important configuration files.

    Collect files, directories and manifest-listed paths into a backup
    directory, optionally compressed into a .tar.xz archive.
    """
    if verbose and quiet:
        print_error("--verbose and --quiet cannot be used together.")
        raise typer.Exit(code=2)

    configure_logging(verbose=verbose, quiet=quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(backup.app, name="backup")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
