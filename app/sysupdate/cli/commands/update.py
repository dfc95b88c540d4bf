"""Update command implementation.

Checks configured applications and offers to update the outdated ones.
"""

from typing import Annotated

import typer
from rich.markup import escape

from sysupdate.cli.display import (
    create_check_table,
    create_outcomes_table,
    print_install_hints,
)
from sysupdate.cli.types import EXIT_CANCELLED, get_descriptors, get_settings
from sysupdate.core.actions import build_action
from sysupdate.core.engine import UpdateDecisionEngine
from sysupdate.core.errors import DescriptorValidationError, OperationCancelledError
from sysupdate.core.session import StaticPrompter, TyperPrompter, UpdatePromptSession, UserPrompter
from sysupdate.core.settings import Settings
from sysupdate.models.decision import CheckResult, SessionOutcome, SessionState
from sysupdate.models.descriptor import ApplicationDescriptor
from sysupdate.resolvers import get_resolvers
from sysupdate.utils.formatting import console, print_error, print_success, print_warning


def _run_sessions(
    results: list[CheckResult],
    descriptors: list[ApplicationDescriptor],
    session: UpdatePromptSession,
    settings: Settings,
) -> tuple[list[SessionOutcome], int]:
    """Run update sessions one application at a time.

    Returns:
        Tuple of (outcomes, number of applications whose action could not be built).
    """
    by_name = {d.name: d for d in descriptors}
    outcomes: list[SessionOutcome] = []
    broken = 0

    for result in results:
        if result.decision is None:
            continue
        descriptor = by_name[result.name]
        try:
            action = build_action(descriptor)
        except (KeyError, DescriptorValidationError) as e:
            print_error(str(e))
            broken += 1
            continue

        outcome = session.run(descriptor, result.decision, action)
        outcomes.append(outcome)

        if outcome.succeeded:
            print_success(f"{descriptor.display_name} updated to {result.decision.latest}")
        elif outcome.failed:
            print_error(f"{descriptor.display_name} update failed: {outcome.error}")
        elif outcome.state == SessionState.DECLINED and not settings.quiet:
            console.print(f"[muted]Skipping {descriptor.display_name} update[/]")

        if outcome.output and (settings.verbose or outcome.failed):
            console.print(f"[muted]{escape(outcome.output)}[/]", highlight=False)

    return outcomes, broken


def update_apps(
    ctx: typer.Context,
    names: Annotated[
        list[str] | None,
        typer.Argument(help="Applications to update (default: all)."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Answer yes to every update prompt.",
        ),
    ] = False,
) -> None:
    """Check applications and update the outdated ones.

    Version checks run in parallel; updates run one at a time. Each
    available update is confirmed individually unless --yes is given.
    In quiet mode nothing is prompted and only descriptors with
    auto_confirm = true are updated.

    Examples:
        sysupdate update                 # Check all, prompt per update
        sysupdate update kitty           # Only kitty
        sysupdate update --yes           # Update everything outdated
        sysupdate -q update              # Unattended, auto_confirm only
    """
    settings = get_settings(ctx)
    descriptors = get_descriptors(names)
    engine = UpdateDecisionEngine(get_resolvers(settings), settings)

    try:
        results = engine.check_all(descriptors)
    except OperationCancelledError as e:
        print_warning("Cancelled by user.")
        raise typer.Exit(code=EXIT_CANCELLED) from e

    console.print(create_check_table(results))
    if not settings.quiet:
        print_install_hints(results, descriptors)

    if not any(r.decision is not None and r.decision.update_available for r in results):
        print_success("Everything is up to date.")
        if any(r.failed and not r.needs_install for r in results):
            raise typer.Exit(code=1)
        return

    prompter: UserPrompter = StaticPrompter(True) if yes else TyperPrompter()
    session = UpdatePromptSession(prompter, settings)

    try:
        outcomes, broken = _run_sessions(results, descriptors, session, settings)
    except (KeyboardInterrupt, typer.Abort) as e:
        print_warning("Cancelled by user.")
        raise typer.Exit(code=EXIT_CANCELLED) from e

    reported = [o for o in outcomes if o.state is not SessionState.SKIPPED]
    if reported:
        console.print(create_outcomes_table(reported))

    check_failed = any(r.failed and not r.needs_install for r in results)
    if check_failed or broken or any(o.failed for o in outcomes):
        raise typer.Exit(code=1)
