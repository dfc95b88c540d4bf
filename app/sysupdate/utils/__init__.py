"""Utility modules for sysupdate.

This module exports commonly used utility functions.
"""

from sysupdate.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)
from sysupdate.utils.shell import CommandResult, command_exists, run_command, run_shell

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
    "run_shell",
    "setup_logging",
]
