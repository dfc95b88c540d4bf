"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from sysupdate import __version__
from sysupdate.cli.commands import apps, apt, check, config, update
from sysupdate.utils.formatting import setup_logging

app = typer.Typer(
    name="sysupdate",
    help="Keep manually installed applications up to date.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"sysupdate version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output and debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Never prompt; only auto-confirmed updates run.",
        ),
    ] = False,
) -> None:
    """sysupdate - Update checks for applications outside the package manager.

    Compares installed versions with the latest releases on GitHub, npm,
    APT or vendor download pages, and runs the configured update on request.
    """
    setup_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.command(name="apps")(apps.list_apps)
app.command(name="check")(check.check_apps)
app.command(name="update")(update.update_apps)
app.add_typer(apt.app, name="apt")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
