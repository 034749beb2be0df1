"""Backup input resolution.

Turns the explicit entries and the optional manifest file of an
InputSpec into an ordered list of existing paths. Directories named
as explicit entries are expanded recursively; manifest lines are taken
as-is. The first invalid input aborts the whole resolution.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from confbk.models.spec import InputSpec

logger = logging.getLogger(__name__)


class ResolutionError(Exception):
    """Base exception for backup set resolution errors."""


class PathNotFoundError(ResolutionError):
    """Raised when an entry, the manifest, or a manifest line does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Path not found: {path}")


class ResolverIOError(ResolutionError):
    """Raised when the manifest or a directory cannot be read."""


class PathResolver:
    """Resolves explicit entries and manifest lines into concrete paths.

    No deduplication is performed. A file reachable through both a
    directory entry and a manifest line appears twice in the output.
    """

    def resolve(self, spec: InputSpec) -> list[Path]:
        """Resolve an InputSpec into an ordered list of paths.

        Explicit-entry paths come first, in entry order. Manifest paths
        follow in file order.

        Args:
            spec: The backup request to resolve.

        Returns:
            List of paths confirmed to exist at resolution time.

        Raises:
            PathNotFoundError: If any input path does not exist.
            ResolverIOError: If the manifest or a directory cannot be read.
        """
        paths: list[Path] = []

        for entry in spec.entries:
            paths.extend(self.resolve_entry(entry))

        if spec.manifest is not None:
            paths.extend(self.read_manifest(spec.manifest))

        logger.debug("Resolved %d path(s)", len(paths))
        return paths

    def resolve_entry(self, entry: Path) -> list[Path]:
        """Resolve a single explicit entry.

        Args:
            entry: A file or directory path.

        Returns:
            The file itself, or every regular file beneath the directory.

        Raises:
            PathNotFoundError: If the entry is neither a file nor a directory.
            ResolverIOError: If a directory cannot be enumerated.
        """
        if entry.is_file():
            logger.debug("Entry is a file: %s", entry)
            return [entry]
        if entry.is_dir():
            files = list(self._walk_directory(entry))
            logger.debug("Expanded directory %s into %d file(s)", entry, len(files))
            return files
        raise PathNotFoundError(entry)

    def read_manifest(self, manifest: Path) -> list[Path]:
        """Read a manifest file and validate every listed path.

        Each non-empty line names one path. Lines are not expanded, so a
        line naming a directory is returned as that directory.

        Args:
            manifest: Path to the newline-delimited manifest file.

        Returns:
            Listed paths in file order.

        Raises:
            PathNotFoundError: If the manifest or any listed path does not exist.
            ResolverIOError: If the manifest cannot be read or decoded.
        """
        if not manifest.is_file():
            raise PathNotFoundError(manifest)

        paths: list[Path] = []
        try:
            with open(manifest, encoding="utf-8") as f:
                for line in f:
                    raw = line.rstrip("\r\n")
                    if not raw:
                        continue
                    path = Path(raw)
                    if not path.exists():
                        raise PathNotFoundError(path)
                    paths.append(path)
        except (OSError, UnicodeDecodeError) as e:
            raise ResolverIOError(f"Failed to read manifest {manifest}: {e}") from e

        logger.debug("Read %d path(s) from manifest %s", len(paths), manifest)
        return paths

    def _walk_directory(self, root: Path) -> Iterator[Path]:
        """Yield every regular file beneath root in os.walk order."""

        def _raise(error: OSError) -> None:
            raise ResolverIOError(f"Failed to read directory {error.filename}: {error}") from error

        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
            current = Path(dirpath)
            for filename in filenames:
                candidate = current / filename
                if candidate.is_file():
                    yield candidate
