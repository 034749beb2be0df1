"""Backup archiving via the system tar binary.

Packs a populated backup directory into a single .tar.xz file next to
it and, by default, removes the uncompressed directory afterwards.
"""

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from confbk.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".tar.xz"


@dataclass(frozen=True, slots=True)
class ArchiveResult:
    """Result of compressing a backup directory.

    Attributes:
        archive: Path of the archive file (written or intended).
        success: Whether the archive was created.
        error: Error message if archiving failed, None otherwise.
        source_removed: Whether the uncompressed directory was deleted.
    """

    archive: Path
    success: bool
    error: str | None = None
    source_removed: bool = False


def archive_path_for(directory: Path) -> Path:
    """Get the archive path for a backup directory.

    Args:
        directory: Backup directory to compress.

    Returns:
        Sibling path with the .tar.xz suffix (e.g., backup -> backup.tar.xz).
    """
    return directory.with_name(directory.name + ARCHIVE_SUFFIX)


class Archiver:
    """Compresses a backup directory with ``tar -cJf``.

    Attributes:
        _run: Command runner, replaceable for testing.
    """

    def __init__(self, run: Callable[..., CommandResult] = run_command) -> None:
        self._run = run

    def is_available(self) -> bool:
        """Check if the tar binary is on PATH."""
        return command_exists("tar")

    def compress(self, directory: Path, *, remove_source: bool = True) -> ArchiveResult:
        """Compress a directory into a .tar.xz archive beside it.

        Args:
            directory: Populated backup directory.
            remove_source: Delete the directory after a successful archive.

        Returns:
            ArchiveResult describing the outcome.
        """
        directory = directory.absolute()
        archive = archive_path_for(directory)

        if not directory.is_dir():
            return ArchiveResult(
                archive=archive,
                success=False,
                error=f"Backup directory does not exist: {directory}",
            )

        if not self.is_available():
            return ArchiveResult(
                archive=archive,
                success=False,
                error="tar is not installed or not on PATH",
            )

        # "./" keeps a leading "-" in the name from being read as an option
        member = f"./{directory.name}"
        args = ["tar", "-cJf", str(archive), "-C", str(directory.parent), member]
        try:
            result = self._run(args)
        except (OSError, subprocess.SubprocessError) as e:
            return ArchiveResult(archive=archive, success=False, error=str(e))

        if not result.success:
            return ArchiveResult(
                archive=archive,
                success=False,
                error=result.stderr.strip() or f"tar exited with code {result.returncode}",
            )

        logger.info("Created archive %s", archive)

        if not remove_source:
            return ArchiveResult(archive=archive, success=True)

        try:
            shutil.rmtree(directory)
        except OSError as e:
            logger.warning("Could not remove %s after archiving: %s", directory, e)
            return ArchiveResult(archive=archive, success=True)

        return ArchiveResult(archive=archive, success=True, source_removed=True)
