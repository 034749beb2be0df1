"""Backup copy executor.

Copies each path of a backup set into the output directory, preserving
the source's path relative to the user's home directory (or its full
path for files outside home). Failures are isolated per path.
"""

import logging
import os
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CopyResult:
    """Result of copying a single path into the backup directory.

    Attributes:
        source: Path that was copied.
        destination: Target path inside the backup directory.
        success: Whether the copy completed successfully.
        error: Error message if the copy failed, None otherwise.
        dry_run: Whether this was a dry-run (nothing copied).
    """

    source: Path
    destination: Path
    success: bool
    error: str | None = None
    dry_run: bool = False


class BackupExecutor:
    """Copies backup set entries into an output directory.

    Attributes:
        _output_dir: Root of the backup tree.
        _dry_run: If True, compute destinations without copying.
    """

    def __init__(self, output_dir: Path, *, dry_run: bool = False) -> None:
        """Initialize the BackupExecutor.

        Args:
            output_dir: Directory the backup tree is written to.
            dry_run: If True, report what would be copied without copying.
        """
        self._output_dir = output_dir
        self._dry_run = dry_run

    @property
    def output_dir(self) -> Path:
        """Root of the backup tree."""
        return self._output_dir

    def destination_for(self, source: Path) -> Path:
        """Compute where a source path is stored inside the backup.

        The source is made absolute and normalized first, so ".." segments
        cannot climb out of the output directory. Paths under the home
        directory keep their home-relative layout; any other path keeps its
        full layout without the root anchor.

        Args:
            source: Path to back up.

        Returns:
            Destination path inside the output directory.
        """
        absolute = _normalize(source)
        try:
            relative = absolute.relative_to(_normalize(Path.home()))
        except ValueError:
            relative = Path(*absolute.parts[1:])
        return self._output_dir / relative

    def copy(self, paths: Iterable[Path]) -> list[CopyResult]:
        """Copy every path into the backup directory.

        Args:
            paths: Backup set in copy order.

        Returns:
            List of CopyResult, one per input path.
        """
        return [self._copy_single(path) for path in paths]

    def _copy_single(self, source: Path) -> CopyResult:
        """Copy a single file (or manifest-listed directory).

        Args:
            source: Path to copy.

        Returns:
            CopyResult indicating success or failure.
        """
        dest = self.destination_for(source)

        if not _normalize(dest).is_relative_to(_normalize(self._output_dir)):
            error = f"Destination {dest} is outside the backup directory"
            logger.warning("Refusing to copy %s: %s", source, error)
            return CopyResult(source=source, destination=dest, success=False, error=error)

        if self._dry_run:
            logger.info("Dry-run: would copy %s to %s", source, dest)
            return CopyResult(source=source, destination=dest, success=True, dry_run=True)

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, dest, dirs_exist_ok=True)
            else:
                shutil.copy2(source, dest)
        except OSError as e:
            logger.warning("Copy failed for %s: %s", source, e)
            return CopyResult(source=source, destination=dest, success=False, error=str(e))

        logger.debug("Copied %s to %s", source, dest)
        return CopyResult(source=source, destination=dest, success=True)


def _normalize(path: Path) -> Path:
    """Return path made absolute with "." and ".." segments collapsed."""
    return Path(os.path.normpath(path.absolute()))
