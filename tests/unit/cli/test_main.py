"""Unit tests for the main CLI application."""

import logging

from confbk import __version__
from confbk.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"confbk version {__version__}" in result.stdout

    def test_short_version(self) -> None:
        """-V is an alias for --version."""
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_lists_commands(self) -> None:
        """--help lists the available commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "backup" in result.stdout
        assert "config" in result.stdout

    def test_backup_help(self) -> None:
        """backup --help documents its options."""
        result = runner.invoke(app, ["backup", "--help"])

        assert result.exit_code == 0
        for option in ("--list", "--file", "--exclude", "--out", "--dry-run", "--tar"):
            assert option in result.stdout


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_default_level(self) -> None:
        """Warnings and above are shown by default."""
        configure_logging()

        assert logging.getLogger("confbk").level == logging.WARNING

    def test_verbose_level(self) -> None:
        """--verbose enables debug logging."""
        configure_logging(verbose=True)

        assert logging.getLogger("confbk").level == logging.DEBUG

    def test_quiet_level(self) -> None:
        """--quiet shows errors only."""
        configure_logging(quiet=True)

        assert logging.getLogger("confbk").level == logging.ERROR

    def test_single_handler(self) -> None:
        """Repeated configuration does not stack handlers."""
        configure_logging()
        configure_logging()

        logger = logging.getLogger("confbk")
        assert len(logger.handlers) == 1
        assert logger.propagate is False
