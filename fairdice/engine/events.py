"""
Match events for display collaborators and logging.
Events describe what the engine published, in the order it published it.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Phase events
PHASE_CHANGED = "phase_changed"
FIRST_MOVER_DETERMINED = "first_mover_determined"

# Exchange events
DIGEST_PUBLISHED = "digest_published"
VALUES_REVEALED = "values_revealed"

# Prompt events
INVALID_CHOICE = "invalid_choice"
PROBABILITIES_SHOWN = "probabilities_shown"

# Dice events
DIE_ASSIGNED = "die_assigned"
DIE_ROLLED = "die_rolled"

# End of match
MATCH_FINISHED = "match_finished"
MATCH_ABORTED = "match_aborted"


# ===== Event Factory Functions =====

def phase_changed(old_phase: str, new_phase: str) -> GameEvent:
    return GameEvent(PHASE_CHANGED, {
        "old_phase": old_phase,
        "new_phase": new_phase,
    })


def first_mover_determined(user_first: bool) -> GameEvent:
    return GameEvent(FIRST_MOVER_DETERMINED, {"user_first": user_first})


def digest_published(label: str, digest: str, range_max: int) -> GameEvent:
    """Emitted before the counterpart is asked for a value. Carries nothing secret."""
    return GameEvent(DIGEST_PUBLISHED, {
        "label": label,
        "digest": digest,
        "range_max": range_max,
    })


def values_revealed(
    label: str,
    digest: str,
    key: str,
    secret_value: int,
    counterpart_value: int,
    combined_result: int,
    range_max: int,
) -> GameEvent:
    """Emitted only after the counterpart answered. Enough for anyone to re-check the digest."""
    return GameEvent(VALUES_REVEALED, {
        "label": label,
        "digest": digest,
        "key": key,
        "secret_value": secret_value,
        "counterpart_value": counterpart_value,
        "combined_result": combined_result,
        "modulus": range_max + 1,
    })


def invalid_choice(message: str, answer: Any, choice_count: int) -> GameEvent:
    return GameEvent(INVALID_CHOICE, {
        "message": message,
        "answer": answer,
        "choice_count": choice_count,
    })


def probabilities_shown(dice: list[str], matrix: list[list[str]], table: str) -> GameEvent:
    return GameEvent(PROBABILITIES_SHOWN, {
        "dice": dice,
        "matrix": matrix,
        "table": table,
    })


def die_assigned(party: str, die: str) -> GameEvent:
    return GameEvent(DIE_ASSIGNED, {"party": party, "die": die})


def die_rolled(party: str, face_index: int, face: int) -> GameEvent:
    return GameEvent(DIE_ROLLED, {
        "party": party,
        "face_index": face_index,
        "face": face,
    })


def match_finished(winner: str | None, user_face: int, computer_face: int) -> GameEvent:
    return GameEvent(MATCH_FINISHED, {
        "winner": winner,
        "tie": winner is None,
        "user_face": user_face,
        "computer_face": computer_face,
    })


def match_aborted(phase: str, reason: str) -> GameEvent:
    return GameEvent(MATCH_ABORTED, {"phase": phase, "reason": reason})
