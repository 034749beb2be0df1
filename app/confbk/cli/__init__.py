"""CLI package for confbk.

This package contains the Typer application and all subcommands.
"""

from confbk.cli.main import app

__all__ = ["app"]
