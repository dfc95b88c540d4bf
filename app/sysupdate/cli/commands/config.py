"""Config commands.

Shows and initializes the settings file.
"""

from typing import Annotated

import tomli_w
import typer

from sysupdate.cli.types import get_settings
from sysupdate.core.errors import SettingsError
from sysupdate.core.paths import get_settings_path, get_user_apps_dir
from sysupdate.core.settings import Settings, save_settings
from sysupdate.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize the settings file.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective settings as TOML."""
    settings = get_settings(ctx)
    path = get_settings_path()

    source = str(path) if path.exists() else "defaults (no settings file)"
    console.print(f"[muted]# {source}[/]")
    console.print(tomli_w.dumps(settings.model_dump(mode="json")), markup=False, highlight=False)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing settings file.",
        ),
    ] = False,
) -> None:
    """Write a settings file with default values.

    Also creates the directory for user application descriptors.
    """
    path = get_settings_path()
    if path.exists() and not force:
        print_error(f"Settings file already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(Settings(), path)
        get_user_apps_dir().mkdir(parents=True, exist_ok=True)
    except (SettingsError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")
    print_info(f"Add application descriptors to {get_user_apps_dir()}")
