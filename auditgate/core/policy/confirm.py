"""
Confirmation gate — the single place a human can veto privileged work.

Non-interactive runs never prompt: the default answer is returned
immediately. Interactive runs ask through a ``Responder`` until they
get a yes or a no. A closed input channel counts as "no", so a broken
terminal can never approve a sensitive action.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from typing import Protocol

import click

from auditgate.core.models.config import RunConfiguration

logger = logging.getLogger(__name__)

_AFFIRMATIVE = frozenset({"y", "yes"})
_NEGATIVE = frozenset({"n", "no", ""})
_RETRY_MESSAGE = "Please answer yes or no."


class Answer(enum.Enum):
    YES = "yes"
    NO = "no"


class Responder(Protocol):
    """Something that can put a yes/no question to a human."""

    def ask(self, prompt: str) -> str | None:
        """Return the raw reply, or None if the channel is closed."""

    def notify(self, message: str) -> None:
        """Show a validation message before re-prompting."""


class ConsoleResponder:
    """Asks on the controlling terminal via click."""

    def ask(self, prompt: str) -> str | None:
        try:
            return click.prompt(
                prompt,
                default="",
                show_default=False,
                prompt_suffix=" ",
            )
        except (click.Abort, EOFError):
            return None

    def notify(self, message: str) -> None:
        click.echo(message)


class ScriptedResponder:
    """Replays canned replies; None once the script runs out.

    Records every prompt and notification it receives.
    """

    def __init__(self, replies: Iterable[str | None] = ()):
        self._replies = list(replies)
        self.prompts: list[str] = []
        self.notices: list[str] = []

    def ask(self, prompt: str) -> str | None:
        self.prompts.append(prompt)
        if not self._replies:
            return None
        return self._replies.pop(0)

    def notify(self, message: str) -> None:
        self.notices.append(message)


def confirm(
    question: str,
    default: Answer,
    config: RunConfiguration,
    responder: Responder | None = None,
) -> bool:
    """Ask ``question``; return True only on an explicit yes.

    Args:
        question: Text shown to the operator.
        default: Answer used without asking when not interactive.
        config: Run configuration (only ``interactive`` is read).
        responder: Input channel. Defaults to the console.

    Returns:
        True to proceed with the guarded action.
    """
    if not config.interactive:
        return default is Answer.YES

    channel = responder if responder is not None else ConsoleResponder()
    # Empty input always means no, whatever the default
    prompt = f"{question} [y/N]:"

    while True:
        reply = channel.ask(prompt)
        if reply is None:
            logger.warning("No answer available; treating as 'no'.")
            return False

        normalized = reply.strip().lower()
        if normalized in _AFFIRMATIVE:
            return True
        if normalized in _NEGATIVE:
            return False
        channel.notify(_RETRY_MESSAGE)
