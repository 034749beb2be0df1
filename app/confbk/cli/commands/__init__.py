"""CLI commands for confbk.

This package contains all subcommand implementations.
"""

from confbk.cli.commands import backup, config

__all__ = ["backup", "config"]
