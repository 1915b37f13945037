"""
Match state representation.
Dice are immutable; the pool and match state are mutated only by the orchestrator.
Nothing here is persisted: to_dict exists for display collaborators.
"""

from dataclasses import dataclass
from typing import Any

from fairdice.engine import DICE_SIDES

# Phases, in the only order a match may pass through them
PHASE_DETERMINING_FIRST_MOVER = "determining_first_mover"
PHASE_SELECTING_DICE = "selecting_dice"
PHASE_ROLLING = "rolling"
PHASE_FINISHED = "finished"

PHASE_ORDER = [
    PHASE_DETERMINING_FIRST_MOVER,
    PHASE_SELECTING_DICE,
    PHASE_ROLLING,
    PHASE_FINISHED,
]

# Parties
USER = "user"
COMPUTER = "computer"


@dataclass(frozen=True)
class Die:
    """A six-sided die with arbitrary integer faces. Equal when the face sequences are equal."""
    faces: tuple[int, ...]

    def __post_init__(self):
        if len(self.faces) != DICE_SIDES:
            raise ValueError(f"A die must have {DICE_SIDES} faces, got {len(self.faces)}")
        for f in self.faces:
            if not isinstance(f, int) or isinstance(f, bool):
                raise ValueError(f"Die faces must be integers, got {f!r}")
        object.__setattr__(self, "faces", tuple(self.faces))

    def face(self, index: int) -> int:
        """Face value for a rolled index in [0, 5]."""
        return self.faces[index]

    def __str__(self) -> str:
        return ",".join(str(f) for f in self.faces)


@dataclass
class DicePool:
    """
    All dice of a match plus the ones still available.
    `dice` keeps the original order (used for the probability matrix);
    `available` shrinks as dice are assigned.
    """
    dice: list[Die]
    # None means every die is still available
    available: list[Die] | None = None

    def __post_init__(self):
        if self.available is None:
            self.available = list(self.dice)

    def labels(self) -> list[str]:
        return [str(d) for d in self.available]

    def take(self, index: int) -> Die:
        """Remove and return the available die at index. Removal and hand-out are one step."""
        if not 0 <= index < len(self.available):
            raise IndexError(f"No available die at index {index}")
        return self.available.pop(index)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dice": [str(d) for d in self.dice],
            "available": [str(d) for d in self.available],
        }


@dataclass
class MatchResult:
    """Rolled faces and the winning party (None on a tie)."""
    computer_face: int
    user_face: int
    winner: str | None

    @property
    def is_tie(self) -> bool:
        return self.winner is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "computer_face": self.computer_face,
            "user_face": self.user_face,
            "winner": self.winner,
        }


@dataclass
class GameState:
    """State of a single match. Created at match start, discarded at match end."""
    pool: DicePool
    phase: str = PHASE_DETERMINING_FIRST_MOVER
    user_first: bool | None = None
    computer_die: Die | None = None
    user_die: Die | None = None
    computer_face: int | None = None
    user_face: int | None = None
    winner: str | None = None
    # True when the match stopped before reaching PHASE_FINISHED
    aborted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "pool": self.pool.to_dict(),
            "user_first": self.user_first,
            "computer_die": str(self.computer_die) if self.computer_die else None,
            "user_die": str(self.user_die) if self.user_die else None,
            "computer_face": self.computer_face,
            "user_face": self.user_face,
            "winner": self.winner,
            "aborted": self.aborted,
        }
