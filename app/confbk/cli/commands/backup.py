"""Backup command implementation.

Resolves the requested files, directories and manifest entries into a
backup set, drops excluded paths, and copies the rest into the output
directory, optionally compressing it afterwards.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from confbk.cli.reporter import Reporter
from confbk.core.archive import Archiver
from confbk.core.backup_set import resolve_backup_set
from confbk.core.config import BackupConfig, ConfigError, load_config
from confbk.core.executor import BackupExecutor
from confbk.core.paths import ensure_dir, get_default_output_dir
from confbk.models.spec import InputSpec
from confbk.utils.formatting import print_error, print_warning

app = typer.Typer(
    help="Back up configuration files.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def backup(
    ctx: typer.Context,
    entries: Annotated[
        list[Path] | None,
        typer.Option(
            "--list",
            "-l",
            help="A config file or directory to back up. Can be repeated.",
        ),
    ] = None,
    manifest: Annotated[
        Path | None,
        typer.Option(
            "--file",
            "-f",
            help="A file that lists paths to back up, one per line.",
        ),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-e",
            help="Skip any path containing this text. Can be repeated.",
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option(
            "--out",
            "-o",
            help="Directory to put the configs in.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-d",
            help="List files that would be backed up.",
        ),
    ] = False,
    tar: Annotated[
        bool,
        typer.Option(
            "--tar",
            "-t",
            help="Compress the backup directory into a .tar.xz file.",
        ),
    ] = False,
) -> None:
    """Back up files, directories and manifest-listed paths."""
    if ctx.invoked_subcommand is not None:
        return

    obj = ctx.obj or {}
    reporter = Reporter(
        verbose=obj.get("verbose", False),
        quiet=obj.get("quiet", False),
        dry_run=dry_run,
    )

    try:
        config = load_config()
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    spec = build_input_spec(config, entries or [], manifest, exclude or [])
    if spec.is_empty:
        print_error("Nothing to back up. Provide --list and/or --file.")
        raise typer.Exit(code=1)

    result = resolve_backup_set(spec)
    if not result.success:
        reporter.error(str(result.error))
        raise typer.Exit(code=1)

    paths = result.paths
    reporter.backup_set(paths, excluded=result.excluded)

    output_dir = out or config.output_dir or get_default_output_dir()

    if dry_run:
        if reporter.verbose:
            reporter.copy_results(BackupExecutor(output_dir, dry_run=True).copy(paths))
        return

    if not paths:
        if not reporter.quiet:
            print_warning("Backup set is empty. Nothing to copy.")
        return

    # Only a directory created by this run may be removed after archiving
    created_output = not output_dir.exists()
    try:
        ensure_dir(output_dir, "output")
    except RuntimeError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    results = BackupExecutor(output_dir).copy(paths)
    reporter.copy_results(results)
    if any(not r.success for r in results):
        raise typer.Exit(code=1)

    if not (tar or config.compress):
        reporter.output_dir(output_dir)
        return

    archive_result = Archiver().compress(output_dir, remove_source=created_output)
    reporter.archive_result(archive_result)
    if not archive_result.success:
        raise typer.Exit(code=1)


def build_input_spec(
    config: BackupConfig,
    entries: list[Path],
    manifest: Path | None,
    exclude: list[str],
) -> InputSpec:
    """Combine command-line options with configured defaults.

    The configured manifest is used only when --file is not given.
    Configured exclusion patterns are appended to the command-line ones.
    Empty patterns are dropped because they would exclude every path.

    Args:
        config: Loaded user configuration.
        entries: Paths given with --list.
        manifest: Path given with --file.
        exclude: Patterns given with --exclude.

    Returns:
        Immutable InputSpec for the resolution pipeline.
    """
    patterns: list[str] = []
    for pattern in [*exclude, *config.exclude]:
        if not pattern:
            print_warning("Ignoring empty --exclude pattern.")
            continue
        patterns.append(pattern)

    return InputSpec(
        entries=tuple(entries),
        manifest=manifest if manifest is not None else config.manifest,
        exclude=tuple(patterns),
    )
