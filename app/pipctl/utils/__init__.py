"""Utility modules for pipctl.

This module exports commonly used utility functions.
"""

from pipctl.utils.formatting import (
    console,
    create_comparison_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from pipctl.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_comparison_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
