"""Shared types and helpers for CLI commands.

Commands read the global flags from the Typer context and turn them into
an explicit Settings object; nothing below the CLI reads global state.
"""

import typer

from sysupdate.core.descriptors import load_descriptors, select_descriptors
from sysupdate.core.errors import DescriptorError, SettingsError
from sysupdate.core.settings import Settings, load_settings
from sysupdate.models.descriptor import ApplicationDescriptor
from sysupdate.utils.formatting import print_error, print_info, setup_logging

# Exit code used when the user interrupts a run
EXIT_CANCELLED = 130


def get_settings(ctx: typer.Context) -> Settings:
    """Load stored settings and apply the global command-line flags.

    Args:
        ctx: Typer context carrying the global options.

    Returns:
        Settings for this run.

    Raises:
        typer.Exit: If the settings file is invalid.
    """
    obj = ctx.obj or {}
    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        print_info("Run 'sysupdate config init --force' to recreate the settings file.")
        raise typer.Exit(code=1) from e

    # Flags only switch modes on; absent flags keep the stored value
    settings = settings.with_overrides(
        quiet=obj.get("quiet") or None,
        verbose=obj.get("verbose") or None,
    )
    if settings.verbose and not obj.get("verbose"):
        setup_logging(verbose=True)
    return settings


def get_descriptors(names: list[str] | None) -> list[ApplicationDescriptor]:
    """Load descriptors and select the requested applications.

    Args:
        names: Application names from the command line, None for all.

    Returns:
        Selected descriptors.

    Raises:
        typer.Exit: If a name is unknown or nothing is configured.
    """
    try:
        descriptors = select_descriptors(load_descriptors(), names)
    except DescriptorError as e:
        print_error(str(e))
        print_info("Run 'sysupdate apps' to list configured applications.")
        raise typer.Exit(code=1) from e

    if not descriptors:
        print_error("No applications configured.")
        raise typer.Exit(code=1)
    return descriptors
