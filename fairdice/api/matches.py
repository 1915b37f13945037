"""
In-memory match sessions for the HTTP API.
Each match runs as an asyncio task that suspends at every prompt until an
answer is submitted over HTTP. Finished matches are dropped once their final
state has been read; idle ones are cancelled after MATCH_IDLE_TIMEOUT.
Nothing outlives the process.
"""

import asyncio
import logging
import time
import uuid
from typing import Any

from fairdice import config
from fairdice.engine.errors import MatchCancelled
from fairdice.engine.events import GameEvent
from fairdice.engine.game import GameOrchestrator
from fairdice.engine.prompts import parse_answer
from fairdice.engine.state import DicePool, MatchResult

logger = logging.getLogger(__name__)


class NoPendingPrompt(Exception):
    """An answer arrived while the match was not waiting for one."""


class RemoteSession:
    """
    Session whose operator answers over HTTP.

    choose() publishes a prompt and waits on a future; submit() resolves it.
    `settled` is set whenever the match is waiting for input or has stopped,
    which is when a request handler can report a consistent snapshot.
    """

    def __init__(self):
        self.events: list[GameEvent] = []
        self.prompt: dict[str, Any] | None = None
        self.closed = False
        self._answer: asyncio.Future | None = None
        self.settled = asyncio.Event()

    async def __aenter__(self) -> "RemoteSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._answer is not None and not self._answer.done():
            self._answer.set_exception(MatchCancelled("Session closed"))
        self.prompt = None
        self.settled.set()

    def emit(self, event: GameEvent) -> None:
        logger.debug(f"event {event.type}: {event.payload}")
        self.events.append(event)

    async def choose(self, message: str, labels: list[str]) -> int:
        if self.closed:
            raise MatchCancelled("Session closed")
        self._answer = asyncio.get_running_loop().create_future()
        self.prompt = {"message": message, "labels": list(labels)}
        self.settled.set()
        try:
            answer = await self._answer
        finally:
            self.prompt = None
            self._answer = None
        return parse_answer(answer)

    def submit(self, answer: str) -> None:
        if self._answer is None or self._answer.done():
            raise NoPendingPrompt("The match is not waiting for an answer")
        self.settled.clear()
        self._answer.set_result(answer)


class MatchHandle:
    """One running or finished match."""

    def __init__(self, pool: DicePool):
        self.match_id = str(uuid.uuid4())
        self.session = RemoteSession()
        self.orchestrator = GameOrchestrator(pool, self.session)
        self.result: MatchResult | None = None
        self.error: str | None = None
        self.task: asyncio.Task | None = None
        self.last_active = time.monotonic()

    def start(self) -> None:
        self.task = asyncio.create_task(self._run())

    async def _run(self) -> None:
        try:
            async with self.session:
                self.result = await self.orchestrator.play()
        except Exception as e:
            logger.exception(f"Match {self.match_id} failed")
            self.error = str(e)
        finally:
            self.session.settled.set()

    async def wait_settled(self) -> None:
        await self.session.settled.wait()

    async def submit(self, answer: str) -> None:
        self.touch()
        self.session.submit(answer)
        await self.wait_settled()
        self.touch()

    async def cancel(self) -> None:
        self.session.close()
        if self.task is not None:
            await asyncio.gather(self.task, return_exceptions=True)

    @property
    def done(self) -> bool:
        return self.task is not None and self.task.done()

    def snapshot(self) -> dict[str, Any]:
        return {
            "match_id": self.match_id,
            "state": self.orchestrator.state.to_dict(),
            "prompt": self.session.prompt,
            "events": [e.to_dict() for e in self.session.events],
            "result": self.result.to_dict() if self.result else None,
            "error": self.error,
            "done": self.done,
        }

    def touch(self) -> None:
        self.last_active = time.monotonic()

    @property
    def idle_seconds(self) -> float:
        return time.monotonic() - self.last_active


class TooManyMatches(Exception):
    """The registry already holds MAX_LIVE_MATCHES matches."""


# match_id -> MatchHandle
matches: dict[str, MatchHandle] = {}


async def reap_idle() -> int:
    """Cancel and drop matches idle for MATCH_IDLE_TIMEOUT seconds. Returns how many were dropped."""
    dropped = 0
    for match_id, handle in list(matches.items()):
        if handle.idle_seconds < config.MATCH_IDLE_TIMEOUT:
            continue
        await handle.cancel()
        matches.pop(match_id, None)
        dropped += 1
        logger.info(f"Dropped idle match {match_id}")
    return dropped


async def reap_forever() -> None:
    """Background sweep for the server lifetime."""
    interval = max(1.0, min(config.MATCH_IDLE_TIMEOUT, 60.0))
    while True:
        await asyncio.sleep(interval)
        await reap_idle()


async def start_match(pool: DicePool) -> MatchHandle:
    """
    Register and start a match; returns once it waits for the first answer.

    Raises:
        TooManyMatches: the registry is full even after dropping idle matches
    """
    await reap_idle()
    if len(matches) >= config.MAX_LIVE_MATCHES:
        raise TooManyMatches(f"Too many live matches (limit {config.MAX_LIVE_MATCHES})")
    handle = MatchHandle(pool)
    matches[handle.match_id] = handle
    handle.start()
    await handle.wait_settled()
    logger.info(f"Started match {handle.match_id}")
    return handle


def read_snapshot(handle: MatchHandle) -> dict[str, Any]:
    """Snapshot for a client; a stopped match is forgotten once its final state has been read."""
    snapshot = handle.snapshot()
    if handle.done:
        matches.pop(handle.match_id, None)
        logger.info(f"Released finished match {handle.match_id}")
    return snapshot


async def close_all() -> None:
    """Cancel and release every live match (server shutdown)."""
    for handle in list(matches.values()):
        await handle.cancel()
    matches.clear()
