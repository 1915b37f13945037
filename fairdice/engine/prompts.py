"""
One capability for every operator decision: pick one of N labeled choices.
Numeric ranges use labels "0".."N"; die selection uses die texts.

A session is any object with:
    async choose(message: str, labels: list[str]) -> int
        may raise HelpRequested, InvalidChoice or MatchCancelled
    emit(event: GameEvent) -> None
"""

import logging
from typing import Any, Callable

from fairdice import config
from fairdice.engine.errors import (
    HelpRequested,
    InvalidChoice,
    MatchCancelled,
    PromptAttemptsExceeded,
)
from fairdice.engine.events import invalid_choice

logger = logging.getLogger(__name__)

EXIT_ANSWERS = ("x",)
HELP_ANSWERS = ("?",)


def parse_answer(text: str) -> int:
    """
    Turn raw operator input into a choice index.
    "x" cancels the match, "?" asks for help, anything else must be an integer.
    """
    answer = (text or "").strip()
    if answer.lower() in EXIT_ANSWERS:
        raise MatchCancelled("Operator left the match")
    if answer in HELP_ANSWERS:
        raise HelpRequested()
    try:
        return int(answer)
    except ValueError:
        raise InvalidChoice(f"Not a choice: {answer!r}") from None


def numeric_labels(range_max: int) -> list[str]:
    return [str(i) for i in range(range_max + 1)]


async def request_choice(
    session: Any,
    message: str,
    labels: list[str],
    on_help: Callable[[], None] | None = None,
    max_attempts: int | None = None,
) -> int:
    """
    Ask the session for one of `labels` until a valid index comes back.

    Help and invalid answers re-issue the same request; each one uses up an
    attempt so the wait stays bounded. Cancellation propagates untouched.

    Returns:
        Index into labels

    Raises:
        MatchCancelled: the operator left
        PromptAttemptsExceeded: no valid answer within max_attempts
    """
    attempts = max_attempts if max_attempts is not None else config.MAX_PROMPT_ATTEMPTS
    for _ in range(attempts):
        try:
            choice = await session.choose(message, list(labels))
        except HelpRequested:
            if on_help is not None:
                on_help()
            continue
        except InvalidChoice as e:
            logger.debug(f"Invalid answer to {message!r}: {e}")
            session.emit(invalid_choice(message, str(e), len(labels)))
            continue

        if 0 <= choice < len(labels):
            return choice
        logger.debug(f"Out-of-range answer to {message!r}: {choice}")
        session.emit(invalid_choice(message, choice, len(labels)))

    raise PromptAttemptsExceeded(f"No valid answer to {message!r} after {attempts} attempts")
