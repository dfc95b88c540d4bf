"""APT commands.

Runs a full apt-get upgrade and explains packages that were kept back.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from sysupdate.apt.kept_back import KeptBackAnalyzer, remediate
from sysupdate.apt.output import parse_upgrade_summary
from sysupdate.cli.display import create_kept_back_table, print_apt_output
from sysupdate.cli.types import EXIT_CANCELLED, get_settings
from sysupdate.core.session import StaticPrompter, TyperPrompter, UserPrompter
from sysupdate.core.settings import Settings
from sysupdate.models.kept_back import KeptBackReport
from sysupdate.operators.apt import AptOperator
from sysupdate.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Upgrade APT packages and analyze kept-back packages.",
    no_args_is_help=True,
)


def _show_report(report: KeptBackReport, settings: Settings) -> None:
    if report.is_empty:
        if not settings.quiet:
            print_success("No packages were kept back.")
        return

    print_warning(f"{len(report)} package(s) kept back: {', '.join(report.names)}")
    console.print(create_kept_back_table(report))


@app.command()
def upgrade(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Retry kept-back packages without asking.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Simulate with apt-get --dry-run.",
        ),
    ] = False,
) -> None:
    """Refresh package lists, upgrade packages and explain kept-back ones.

    Packages held back by apt-get upgrade can be retried with a targeted
    apt-get install. The retry is always a separate confirmed step and is
    never offered in quiet mode.

    Examples:
        sysupdate apt upgrade            # Upgrade with prompts
        sysupdate apt upgrade --dry-run  # Simulate only
    """
    settings = get_settings(ctx)
    operator = AptOperator(dry_run=dry_run)

    if not operator.is_available():
        print_error("APT package manager is not available on this system.")
        raise typer.Exit(code=1)

    try:
        print_info("Refreshing package lists...")
        result = operator.update_lists()
        if settings.verbose or not result.success:
            print_apt_output(result.output)
        if not result.success:
            print_error(f"apt-get update failed with code {result.returncode}")
            raise typer.Exit(code=1)

        print_info("Upgrading packages...")
        result = operator.upgrade()
        print_apt_output(result.output)
        if not result.success:
            print_error(f"apt-get upgrade failed with code {result.returncode}")
            raise typer.Exit(code=1)

        summary = parse_upgrade_summary(result.output)
        if summary is not None and summary.nothing_changed and summary.not_upgraded == 0:
            print_success("All packages are up to date.")
            return

        report = KeptBackAnalyzer(operator.policy).analyze(result.output)
        _show_report(report, settings)

        prompter: UserPrompter = StaticPrompter(True) if yes else TyperPrompter()
        remediation = remediate(report, operator, prompter, settings)
    except (KeyboardInterrupt, typer.Abort) as e:
        print_warning("Cancelled by user.")
        raise typer.Exit(code=EXIT_CANCELLED) from e

    if not remediation.attempted:
        return

    print_apt_output(remediation.output)
    if remediation.success:
        print_success("Kept-back packages installed.")
    else:
        print_error("Installing kept-back packages failed.")
        raise typer.Exit(code=1)


@app.command()
def analyze(
    output_file: Annotated[
        Path,
        typer.Argument(
            help="File containing apt-get upgrade output.",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
) -> None:
    """Explain kept-back packages in saved apt-get upgrade output.

    Examples:
        apt-get upgrade -s > upgrade.log && sysupdate apt analyze upgrade.log
    """
    try:
        output = output_file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        print_error(f"Failed to read {output_file}: {e}")
        raise typer.Exit(code=1) from e

    operator = AptOperator()
    report = KeptBackAnalyzer(operator.policy).analyze(output)

    if report.is_empty:
        print_success("No packages were kept back.")
        return

    names = escape(", ".join(report.names))
    console.print(f"[warning]{len(report)} package(s) kept back:[/] {names}")
    console.print(create_kept_back_table(report))
