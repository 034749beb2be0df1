"""Backup progress reporting.

The Reporter is the only place where --verbose, --quiet and --dry-run
influence output. Resolution, filtering and copying never print.
"""

from collections.abc import Sequence
from pathlib import Path

from rich.markup import escape
from rich.table import Table

from confbk.core.archive import ArchiveResult
from confbk.core.executor import CopyResult
from confbk.utils.formatting import (
    console,
    create_path_table,
    print_error,
    print_info,
    print_success,
    print_warning,
)


class Reporter:
    """Presents the backup set and operation results.

    Errors are always shown on stderr. Quiet mode suppresses everything
    else except the dry-run listing, which is the requested output.

    Attributes:
        verbose: Show per-path detail.
        quiet: Suppress non-essential output.
        dry_run: The run lists the backup set instead of copying it.
    """

    def __init__(
        self,
        *,
        verbose: bool = False,
        quiet: bool = False,
        dry_run: bool = False,
    ) -> None:
        if verbose and quiet:
            msg = "verbose and quiet are mutually exclusive"
            raise ValueError(msg)
        self.verbose = verbose
        self.quiet = quiet
        self.dry_run = dry_run

    def backup_set(self, paths: Sequence[Path], excluded: int = 0) -> None:
        """Report the resolved backup set.

        In dry-run mode every entry is printed, one per line. Otherwise a
        table is shown only in verbose mode.

        Args:
            paths: Final backup set.
            excluded: Number of paths removed by exclusion patterns.
        """
        if self.dry_run:
            for path in paths:
                console.print(
                    str(path), style="path", markup=False, highlight=False, soft_wrap=True
                )
            if self.verbose:
                self._print_counts(len(paths), excluded)
            return

        if not self.verbose:
            return

        table = create_path_table("Backup Set")
        for index, path in enumerate(paths, start=1):
            table.add_row(str(index), escape(str(path)))
        console.print(table)
        self._print_counts(len(paths), excluded)

    def copy_results(self, results: Sequence[CopyResult]) -> None:
        """Report the outcome of copying the backup set.

        Args:
            results: One CopyResult per backup set entry.
        """
        failed = [r for r in results if not r.success]
        for result in failed:
            error = escape(result.error or "Unknown error")
            print_error(f"Failed to copy {escape(str(result.source))}: {error}")

        if self.quiet:
            return

        if self.verbose:
            console.print(_create_copy_table(results))

        copied = len(results) - len(failed)
        if any(r.dry_run for r in results):
            print_info(f"Dry-run: {len(results)} path(s) would be copied.")
        elif failed:
            print_warning(f"{copied} copied, {len(failed)} failed")
        else:
            print_success(f"Backed up {copied} path(s).")

    def output_dir(self, directory: Path) -> None:
        """Report where the backup was written."""
        if not self.quiet:
            print_info(f"Backup written to {escape(str(directory))}")

    def archive_result(self, result: ArchiveResult) -> None:
        """Report the outcome of compressing the backup directory.

        Args:
            result: Result returned by the Archiver.
        """
        if not result.success:
            error = escape(result.error or "")
            print_error(f"Failed to create archive {escape(str(result.archive))}: {error}")
            return
        if self.quiet:
            return
        console.print(f"[archive]Archive created:[/] {escape(str(result.archive))}", soft_wrap=True)

    def error(self, message: str) -> None:
        """Report a fatal error. Always shown."""
        print_error(escape(message))

    def _print_counts(self, kept: int, excluded: int) -> None:
        """Print a one-line summary of the backup set size."""
        summary = f"\n[info]{kept}[/info] path(s) selected"
        if excluded:
            summary += f", [excluded]{excluded}[/excluded] excluded"
        console.print(summary)


def _create_copy_table(results: Sequence[CopyResult]) -> Table:
    """Create a Rich table listing each copy and its status."""
    title = "Copy Results (dry-run)" if any(r.dry_run for r in results) else "Copy Results"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Source", style="path", overflow="fold")
    table.add_column("Destination", style="muted", overflow="fold")

    for r in results:
        if r.dry_run:
            status = "[info]dry-run[/]"
        elif r.success:
            status = "[success]OK[/]"
        else:
            status = "[error]FAIL[/]"
        table.add_row(status, escape(str(r.source)), escape(str(r.destination)))

    return table
