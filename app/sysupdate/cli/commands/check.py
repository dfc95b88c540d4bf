"""Check command implementation.

Compares installed and latest versions without changing anything.
"""

import json
from typing import Annotated, Any

import typer

from sysupdate.cli.display import create_check_table, print_check_summary, print_install_hints
from sysupdate.cli.types import EXIT_CANCELLED, get_descriptors, get_settings
from sysupdate.core.engine import UpdateDecisionEngine
from sysupdate.core.errors import OperationCancelledError
from sysupdate.models.decision import CheckResult
from sysupdate.resolvers import get_resolvers
from sysupdate.utils.formatting import console, print_warning


def _result_to_dict(result: CheckResult) -> dict[str, Any]:
    """Convert a check result to a JSON-serializable dictionary."""
    if result.decision is not None:
        return {
            "name": result.name,
            "status": result.decision.status.value,
            "current": str(result.decision.current),
            "latest": str(result.decision.latest),
            "error": None,
        }
    return {
        "name": result.name,
        "status": "error",
        "current": None,
        "latest": None,
        "error": result.failure_reason,
    }


def check_apps(
    ctx: typer.Context,
    names: Annotated[
        list[str] | None,
        typer.Argument(help="Applications to check (default: all)."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Print results as JSON.",
        ),
    ] = False,
) -> None:
    """Check configured applications for available updates.

    Version lookups run in parallel; a failing application never stops
    the others. Exits with code 1 if a check failed for an installed
    application.

    Examples:
        sysupdate check                  # Check all applications
        sysupdate check kitty tmux       # Check selected applications
        sysupdate check --json           # Machine-readable output
    """
    settings = get_settings(ctx)
    descriptors = get_descriptors(names)
    engine = UpdateDecisionEngine(get_resolvers(settings), settings)

    try:
        results = engine.check_all(descriptors)
    except OperationCancelledError as e:
        print_warning("Cancelled by user.")
        raise typer.Exit(code=EXIT_CANCELLED) from e

    if as_json:
        typer.echo(json.dumps([_result_to_dict(r) for r in results], indent=2))
    else:
        console.print(create_check_table(results))
        print_check_summary(results)
        if not settings.quiet:
            print_install_hints(results, descriptors)

    if any(r.failed and not r.needs_install for r in results):
        raise typer.Exit(code=1)
