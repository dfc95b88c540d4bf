"""Apps command implementation.

Lists the configured application descriptors.
"""

from rich.table import Table

from sysupdate.cli.types import get_descriptors
from sysupdate.utils.formatting import console
from sysupdate.utils.shell import command_exists


def list_apps() -> None:
    """List configured applications and where their versions come from.

    Bundled descriptors can be overridden or extended by TOML files in
    ~/.config/sysupdate/apps/.
    """
    descriptors = get_descriptors(None)

    table = Table(
        title="Configured Applications",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Name", no_wrap=True)
    table.add_column("Display Name")
    table.add_column("Source", style="info")
    table.add_column("Update", style="muted")

    for descriptor in descriptors:
        installed = command_exists(descriptor.application.command)
        icon = "[success]●[/]" if installed else "[muted]○[/]"
        table.add_row(
            icon,
            f"[app.name]{descriptor.name}[/]",
            descriptor.display_name,
            descriptor.source_label,
            descriptor.update.method,
        )

    console.print(table)
