"""CLI package for sysupdate.

This package contains the Typer application and all subcommands.
"""

from sysupdate.cli.main import app

__all__ = ["app"]
