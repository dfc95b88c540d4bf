"""CLI commands for sysupdate.

This package contains all subcommand implementations.
"""

from sysupdate.cli.commands import apps, apt, check, config, update

__all__ = ["apps", "apt", "check", "config", "update"]
