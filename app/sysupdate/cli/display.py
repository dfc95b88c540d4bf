"""Shared Rich display functions for checks, sessions and APT runs.

Provides reusable table builders and printers used by the check, update
and apt commands.
"""

from rich.markup import escape
from rich.table import Table

from sysupdate.apt.output import LineCategory, iter_classified
from sysupdate.core.errors import MissingDependencyError
from sysupdate.models.decision import CheckResult, SessionOutcome, SessionState
from sysupdate.models.descriptor import ApplicationDescriptor
from sysupdate.models.kept_back import KeptBackReport
from sysupdate.models.version import VersionStatus
from sysupdate.utils.formatting import console, print_info

_STATUS_TEXT: dict[VersionStatus, str] = {
    VersionStatus.EQUAL: "[status.equal]up to date[/]",
    VersionStatus.LOCAL_AHEAD: "[status.ahead]ahead[/]",
    VersionStatus.UPDATE_AVAILABLE: "[status.update]update[/]",
}

_STATE_TEXT: dict[SessionState, str] = {
    SessionState.SKIPPED: "[status.skipped]skipped[/]",
    SessionState.DECLINED: "[muted]declined[/]",
    SessionState.SUCCEEDED: "[success]OK[/]",
    SessionState.FAILED: "[error]FAIL[/]",
}

_LINE_STYLES: dict[LineCategory, str | None] = {
    LineCategory.READING: "muted",
    LineCategory.UPGRADE_LIST: "info",
    LineCategory.KEPT_BACK: "warning",
    LineCategory.NEW_PACKAGES: "info",
    LineCategory.REMOVALS: "warning",
    LineCategory.SUMMARY: "bold_header",
    LineCategory.DOWNLOAD: "muted",
    LineCategory.DISK: "muted",
    LineCategory.UNPACK: "text",
    LineCategory.SETUP: "success",
    LineCategory.TRIGGERS: "muted",
    LineCategory.ERROR: "error",
    LineCategory.WARNING: "warning",
    LineCategory.BLANK: None,
    LineCategory.OTHER: None,
}


def create_check_table(results: list[CheckResult]) -> Table:
    """Create a table of version check results.

    Args:
        results: Check results in display order.

    Returns:
        Rich Table with Application, Installed, Latest and Status columns.
    """
    table = Table(
        title="Version Check",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Application", no_wrap=True)
    table.add_column("Installed", style="app.version")
    table.add_column("Latest", style="app.version")
    table.add_column("Status")

    for result in results:
        if result.decision is not None:
            decision = result.decision
            table.add_row(
                f"[app.name]{escape(result.name)}[/]",
                escape(str(decision.current)),
                escape(str(decision.latest)),
                _STATUS_TEXT[decision.status],
            )
        else:
            table.add_row(
                f"[app.name]{escape(result.name)}[/]",
                "-",
                "-",
                f"[error]{result.failure_reason}[/]",
            )
    return table


def create_outcomes_table(outcomes: list[SessionOutcome]) -> Table:
    """Create a table of update session outcomes.

    Args:
        outcomes: Session outcomes in execution order.

    Returns:
        Rich Table with Status, Application, Version and Message columns.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=9, justify="center")
    table.add_column("Application", no_wrap=True)
    table.add_column("Version")
    table.add_column("Message")

    for outcome in outcomes:
        decision = outcome.decision
        table.add_row(
            _STATE_TEXT.get(outcome.state, outcome.state.value),
            outcome.name,
            f"[muted]{escape(str(decision.current))} -> {escape(str(decision.latest))}[/]",
            f"[muted]{escape(outcome.error or '')}[/]",
        )
    return table


def create_kept_back_table(report: KeptBackReport) -> Table:
    """Create a table of kept-back packages.

    Args:
        report: Kept-back report.

    Returns:
        Rich Table with Package, Installed and Candidate columns.
    """
    table = Table(
        title="Kept Back Packages",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Installed", style="muted")
    table.add_column("Candidate", style="info")

    for entry in report.entries:
        if entry.has_details:
            table.add_row(entry.name, entry.installed or "(none)", entry.candidate or "(none)")
        else:
            table.add_row(entry.name, "[muted]unknown[/]", "[muted]unknown[/]")
    return table


def print_apt_output(output: str) -> None:
    """Print apt-get output with one style per line category.

    Args:
        output: Raw apt-get output.
    """
    for category, line in iter_classified(output):
        style = _LINE_STYLES[category]
        if style is None:
            console.print(escape(line), highlight=False)
        else:
            console.print(f"[{style}]{escape(line)}[/]", highlight=False)


def print_check_summary(results: list[CheckResult]) -> None:
    """Print counts of available updates and failed checks.

    Args:
        results: Check results.
    """
    updates = sum(1 for r in results if r.decision is not None and r.decision.update_available)
    failed = sum(1 for r in results if r.failed)

    parts: list[str] = []
    if updates:
        parts.append(f"[status.update]{updates} update(s) available[/]")
    if failed:
        parts.append(f"[error]{failed} check(s) failed[/]")
    if parts:
        console.print(f"\nSummary: {', '.join(parts)}")
    else:
        console.print("\n[success]Everything is up to date.[/]")


def print_install_hints(
    results: list[CheckResult],
    descriptors: list[ApplicationDescriptor],
) -> None:
    """Print installation hints for missing applications and dependencies.

    Args:
        results: Check results.
        descriptors: Descriptors the results were computed from.
    """
    by_name = {d.name: d for d in descriptors}
    for result in results:
        descriptor = by_name.get(result.name)
        if descriptor is None:
            continue
        if result.not_installed and descriptor.application.install_help:
            print_info(
                f"{descriptor.display_name} is not installed. "
                f"Install from: {descriptor.application.install_help}"
            )
        elif isinstance(result.error, MissingDependencyError):
            message = f"{descriptor.display_name} requires {result.error.dependency}."
            if result.error.install_help:
                message += f" {result.error.install_help}"
            print_info(message)
