"""Configuration commands.

Provides commands to inspect and create the confbk configuration file.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from confbk.core.config import BackupConfig, ConfigError, load_config, save_config
from confbk.core.paths import get_config_path, get_default_output_dir
from confbk.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or create the confbk configuration file.",
    no_args_is_help=True,
)


@app.command()
def show(
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Config file to read."),
    ] = None,
) -> None:
    """Show the effective backup defaults."""
    config_path = path or get_config_path()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    source = str(config_path) if config_path.exists() else "built-in defaults"

    table = Table(
        title="Backup Defaults",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="text", no_wrap=True)
    table.add_column("Value", overflow="fold")

    output_dir = config.output_dir or get_default_output_dir()
    table.add_row("output_dir", escape(str(output_dir)))
    table.add_row("manifest", escape(str(config.manifest)) if config.manifest else "[muted]-[/]")
    table.add_row("exclude", escape(", ".join(config.exclude)) or "[muted]-[/]")
    table.add_row("compress", "yes" if config.compress else "no")

    console.print(table)
    console.print(f"[dim]Source: {escape(source)}[/dim]", soft_wrap=True)


@app.command()
def init(
    path: Annotated[
        Path | None,
        typer.Option("--path", "-p", help="Where to write the config file."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    config_path = path or get_config_path()

    if config_path.exists() and not force:
        print_error(f"Config file already exists: {escape(str(config_path))}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(BackupConfig(), config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {escape(str(saved))}")
