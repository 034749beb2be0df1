"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path) -> Iterator[Path]:
    """Point XDG config and state directories into a temporary location.

    Keeps tests from reading or writing the real ~/.config/confbk.
    """
    xdg = tmp_path / "xdg"
    env = {
        "XDG_CONFIG_HOME": str(xdg / "config"),
        "XDG_STATE_HOME": str(xdg / "state"),
    }
    with patch.dict(os.environ, env):
        yield xdg


@pytest.fixture
def config_tree(tmp_path: Path) -> Path:
    """Create a small tree of config files.

    Layout::

        cfg/
          a.txt
          dir/
            b.txt
            c.txt
          empty/
    """
    root = tmp_path / "cfg"
    (root / "dir").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_text("a")
    (root / "dir" / "b.txt").write_text("b")
    (root / "dir" / "c.txt").write_text("c")
    return root


@pytest.fixture
def write_manifest(tmp_path: Path):
    """Return a helper that writes a manifest file listing the given lines."""

    def _write(lines: list[str], name: str = "manifest.txt") -> Path:
        manifest = tmp_path / name
        manifest.write_text("".join(f"{line}\n" for line in lines))
        return manifest

    return _write
