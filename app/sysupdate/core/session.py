"""Confirm and execute flow for a single update decision.

The session turns a Decision into one of the terminal states
Skipped, Declined, Succeeded or Failed. User interaction goes through the
UserPrompter protocol so tests can inject canned answers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

import typer

from sysupdate.core.errors import UpdateActionFailedError
from sysupdate.models.decision import SessionOutcome, SessionState

if TYPE_CHECKING:
    from sysupdate.core.actions import UpdateAction
    from sysupdate.core.settings import Settings
    from sysupdate.models.decision import Decision
    from sysupdate.models.descriptor import ApplicationDescriptor

logger = logging.getLogger(__name__)


class UserPrompter(Protocol):
    """Capability to ask the user a yes/no question."""

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question and return the answer."""
        ...


class TyperPrompter:
    """Prompter reading answers from the terminal via typer."""

    def confirm(self, question: str, default: bool = False) -> bool:
        """Ask a yes/no question on the terminal.

        Args:
            question: Question text without the [y/N] suffix.
            default: Answer used for empty input.

        Returns:
            True if the user answered yes.
        """
        return typer.confirm(question, default=default)


class StaticPrompter:
    """Prompter that always gives the same answer (for --yes)."""

    def __init__(self, answer: bool) -> None:
        self._answer = answer

    def confirm(self, question: str, default: bool = False) -> bool:
        """Return the fixed answer without asking."""
        logger.debug("Auto-answering %r with %s", question, self._answer)
        return self._answer


class UpdatePromptSession:
    """Runs the confirm/skip/execute flow for update decisions.

    Only UPDATE_AVAILABLE decisions ever prompt. In quiet mode no prompt is
    shown and the descriptor's update.auto_confirm decides. A confirmed
    action runs exactly once; failures are reported, never retried.

    Example:
        >>> session = UpdatePromptSession(TyperPrompter(), settings)
        >>> outcome = session.run(descriptor, decision, build_action(descriptor))
        >>> outcome.state
        <SessionState.SUCCEEDED: 'succeeded'>
    """

    def __init__(self, prompter: UserPrompter, settings: Settings) -> None:
        """Initialize the session.

        Args:
            prompter: Prompter used in interactive mode.
            settings: Run settings (quiet mode).
        """
        self._prompter = prompter
        self._settings = settings

    def confirm(self, descriptor: ApplicationDescriptor, decision: Decision) -> SessionState:
        """Resolve the evaluated decision to Skipped, Declined or Confirmed.

        Args:
            descriptor: Application descriptor.
            decision: Decision computed for the application.

        Returns:
            The next session state.
        """
        if not decision.update_available:
            return SessionState.SKIPPED

        if self._settings.quiet:
            if descriptor.update.auto_confirm:
                logger.info("Auto-confirming update of %s", descriptor.name)
                return SessionState.CONFIRMED
            return SessionState.DECLINED

        question = (
            f"Update {descriptor.display_name} from {decision.current} to {decision.latest}?"
        )
        if self._prompter.confirm(question, default=False):
            return SessionState.CONFIRMED
        return SessionState.DECLINED

    def run(
        self,
        descriptor: ApplicationDescriptor,
        decision: Decision,
        action: UpdateAction,
    ) -> SessionOutcome:
        """Run the full flow for one decision.

        Args:
            descriptor: Application descriptor.
            decision: Decision computed for the application.
            action: Update action executed on confirmation.

        Returns:
            SessionOutcome in a terminal state.
        """
        state = self.confirm(descriptor, decision)
        if state is not SessionState.CONFIRMED:
            logger.debug("%s: %s", descriptor.name, state.value)
            return SessionOutcome(name=descriptor.name, state=state, decision=decision)

        logger.info("Updating %s: %s", descriptor.name, action.description)
        try:
            output = action.run()
        except UpdateActionFailedError as e:
            logger.warning("Update of %s failed: %s", descriptor.name, e)
            return SessionOutcome(
                name=descriptor.name,
                state=SessionState.FAILED,
                decision=decision,
                output=e.output,
                error=str(e),
            )

        return SessionOutcome(
            name=descriptor.name,
            state=SessionState.SUCCEEDED,
            decision=decision,
            output=output,
        )
