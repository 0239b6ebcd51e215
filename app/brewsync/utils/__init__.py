"""Utility modules for brewsync.

This module exports commonly used utility functions.
"""

from brewsync.utils.formatting import (
    console,
    create_package_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from brewsync.utils.shell import CommandResult, command_exists, iter_command, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_package_table",
    "err_console",
    "iter_command",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
