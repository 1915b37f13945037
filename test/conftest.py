"""
Shared fixtures: a scripted operator session and a classic non-transitive dice set.
"""

import pytest

from fairdice.engine.prompts import parse_answer
from fairdice.engine.state import DicePool, Die


class ScriptedSession:
    """Answers prompts from a fixed list and records everything it sees, in order."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.events = []
        self.prompts = []
        # ("event", type) / ("prompt", message) in arrival order
        self.log = []

    def emit(self, event):
        self.events.append(event)
        self.log.append(("event", event.type))

    async def choose(self, message, labels):
        self.prompts.append((message, list(labels)))
        self.log.append(("prompt", message))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        answer = self.answers.pop(0)
        return parse_answer(str(answer))

    def event_types(self):
        return [e.type for e in self.events]

    def events_of(self, event_type):
        return [e for e in self.events if e.type == event_type]


@pytest.fixture
def scripted_session():
    return ScriptedSession


@pytest.fixture
def classic_dice():
    return [
        Die((2, 2, 4, 4, 9, 9)),
        Die((6, 8, 1, 1, 8, 6)),
        Die((7, 5, 3, 7, 5, 3)),
    ]


@pytest.fixture
def classic_pool(classic_dice):
    return DicePool(dice=list(classic_dice))
