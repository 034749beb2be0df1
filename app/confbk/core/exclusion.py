"""Substring-based exclusion of resolved paths."""

from collections.abc import Iterable, Sequence
from pathlib import Path


def is_excluded(path: Path, patterns: Sequence[str]) -> bool:
    """Check if a path's string form contains any exclusion pattern.

    Matching is plain substring containment against str(path), so the
    pattern "cfg" matches both "a/cfg/file" and "a/bcfgd".

    Args:
        path: Path to test.
        patterns: Exclusion substrings.

    Returns:
        True if at least one pattern occurs in the path.
    """
    text = str(path)
    return any(pattern in text for pattern in patterns)


def filter_excluded(paths: Iterable[Path], patterns: Sequence[str]) -> list[Path]:
    """Return the paths that match none of the exclusion patterns.

    Surviving paths keep their relative order. With no patterns the
    input is returned unchanged (as a new list).

    Args:
        paths: Resolved paths in backup order.
        patterns: Exclusion substrings.

    Returns:
        New list of non-excluded paths.
    """
    if not patterns:
        return list(paths)
    return [p for p in paths if not is_excluded(p, patterns)]
