"""
Dice definitions from text.
Each die is written as six comma-separated integers, e.g. "2,2,4,4,9,9".
"""

from fairdice.engine import DICE_SIDES, MIN_DICE
from fairdice.engine.errors import InsufficientDice, MalformedDie
from fairdice.engine.state import DicePool, Die

USAGE_EXAMPLE = "2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"


def parse_die(text: str, position: int) -> Die:
    """Parse one die; position is 1-based and only used in error messages."""
    faces = []
    for raw in text.split(","):
        try:
            faces.append(int(raw.strip()))
        except ValueError:
            raise MalformedDie(f'Invalid integer in die {position}: "{raw}"') from None
    if len(faces) != DICE_SIDES:
        raise MalformedDie(f"Die {position} must have {DICE_SIDES} faces, got {len(faces)}")
    return Die(tuple(faces))


def parse_dice(args: list[str]) -> list[Die]:
    """
    Parse every die definition.

    Raises:
        InsufficientDice: fewer than MIN_DICE definitions
        MalformedDie: a definition is not six integers
    """
    if len(args) < MIN_DICE:
        raise InsufficientDice(
            f"At least {MIN_DICE} dice required. Example: python main.py {USAGE_EXAMPLE}"
        )
    return [parse_die(arg, i + 1) for i, arg in enumerate(args)]


def build_pool(args: list[str]) -> DicePool:
    return DicePool(dice=parse_dice(args))
