"""
Interactive console session for a match.
Reads choices from stdin and prints engine events as text.
"""

import asyncio
import logging
import sys
import threading

from fairdice.engine import events as ev
from fairdice.engine.events import GameEvent
from fairdice.engine.prompts import parse_answer
from fairdice.engine.state import USER

logger = logging.getLogger(__name__)


def format_event(event: GameEvent) -> str | None:
    """Text for one event, or None for events the console does not show."""
    p = event.payload
    if event.type == ev.DIGEST_PUBLISHED:
        return f"\n{p['label']}\nHMAC={p['digest']}"
    if event.type == ev.VALUES_REVEALED:
        return (
            f"My number: {p['secret_value']} (KEY={p['key']})\n"
            f"Result: {p['secret_value']} + {p['counterpart_value']} = "
            f"{p['combined_result']} (mod {p['modulus']})"
        )
    if event.type == ev.FIRST_MOVER_DETERMINED:
        return "You go first." if p["user_first"] else "I go first."
    if event.type == ev.PHASE_CHANGED:
        titles = {
            "selecting_dice": "=== Select Dice ===",
            "rolling": "=== Rolling Dice ===",
        }
        title = titles.get(p["new_phase"])
        return f"\n{title}" if title else None
    if event.type == ev.DIE_ASSIGNED:
        who = "You chose" if p["party"] == USER else "I take"
        return f"{who} [{p['die']}]."
    if event.type == ev.DIE_ROLLED:
        who = "You rolled" if p["party"] == USER else "I rolled"
        return f"{who}: {p['face']}"
    if event.type == ev.INVALID_CHOICE:
        return "Invalid choice. Try again."
    if event.type == ev.PROBABILITIES_SHOWN:
        return f"\n{p['table']}"
    if event.type == ev.MATCH_FINISHED:
        if p["tie"]:
            verdict = "Tie!"
        elif p["winner"] == USER:
            verdict = "You win!"
        else:
            verdict = "I win!"
        return f"\n{verdict} ({p['user_face']} vs {p['computer_face']})"
    if event.type == ev.MATCH_ABORTED:
        return f"\nMatch aborted: {p['reason']}"
    return None


class ConsoleSession:
    """
    Operator session on stdin/stdout.

    Use as `async with ConsoleSession() as session:`; closing is idempotent
    and happens on every exit path.
    """

    def __init__(self, stream=None, read_line=input):
        self.stream = stream if stream is not None else sys.stdout
        self.read_line = read_line
        self.closed = False

    async def __aenter__(self) -> "ConsoleSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.stream.flush()
        logger.debug("Console session closed")

    def write(self, text: str) -> None:
        print(text, file=self.stream)

    def emit(self, event: GameEvent) -> None:
        logger.debug(f"event {event.type}: {event.payload}")
        text = format_event(event)
        if text is not None:
            self.write(text)

    async def choose(self, message: str, labels: list[str]) -> int:
        if self.closed:
            raise RuntimeError("Console session is closed")
        options = "\n  ".join(f"{i} - {label}" for i, label in enumerate(labels))
        self.write(f"\n{message}\n  {options}\n  X - exit\n  ? - help")
        try:
            line = await self._read("Your choice: ")
        except EOFError:
            line = "x"
        return parse_answer(line)

    async def _read(self, prompt: str) -> str:
        """
        Read one line on a daemon thread.
        The thread is never joined, so cancelling the wait (Ctrl+C) ends the
        match at once even while input() is still blocked.
        """
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def deliver(setter, value) -> None:
            if not future.done():
                setter(value)

        def worker() -> None:
            try:
                line = self.read_line(prompt)
            except Exception as e:
                outcome = (future.set_exception, e)
            else:
                outcome = (future.set_result, line)
            try:
                loop.call_soon_threadsafe(deliver, *outcome)
            except RuntimeError:
                # loop already closed: the match ended while waiting for input
                logger.debug("Discarding console input read after the match ended")

        threading.Thread(target=worker, name="console-input", daemon=True).start()
        return await future
