"""Utility modules for confbk.

This module exports commonly used utility functions.
"""

from confbk.utils.formatting import (
    console,
    create_path_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from confbk.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_path_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
