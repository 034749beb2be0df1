"""Input and result models for backup set resolution.

This module defines the immutable request built by the CLI layer and the
structured result returned by the resolution pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from confbk.core.resolver import ResolutionError


@dataclass(frozen=True, slots=True)
class InputSpec:
    """The user's raw backup request.

    This is an immutable data structure constructed once per run from
    command-line options and configuration defaults.

    Attributes:
        entries: Explicit entries, each a file or a directory, in the order given.
        manifest: Optional newline-delimited file listing one path per line.
        exclude: Substrings; any resolved path containing one is dropped.
    """

    entries: tuple[Path, ...] = ()
    manifest: Path | None = None
    exclude: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Check if the request names nothing to back up."""
        return not self.entries and self.manifest is None


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of resolving an InputSpec into a backup set.

    Resolution is all-or-nothing: a failed result never carries paths.

    Attributes:
        paths: Final ordered backup set (empty on failure).
        error: The first error encountered, None on success.
        excluded: Number of resolved paths removed by exclusion patterns.
    """

    paths: tuple[Path, ...] = field(default_factory=tuple)
    error: ResolutionError | None = None
    excluded: int = 0

    def __post_init__(self) -> None:
        """Validate that failed results carry no paths."""
        if self.error is not None and self.paths:
            msg = "A failed resolution cannot carry paths"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        """Check if resolution completed without error."""
        return self.error is None

    def unwrap(self) -> tuple[Path, ...]:
        """Return the backup set, raising the stored error on failure.

        Raises:
            ResolutionError: If resolution failed.
        """
        if self.error is not None:
            raise self.error
        return self.paths
