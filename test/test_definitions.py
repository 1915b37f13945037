"""
Dice definitions parsed from command-line style text.
"""

import pytest

from fairdice.engine.definitions import build_pool, parse_dice, parse_die
from fairdice.engine.errors import InsufficientDice, MalformedDie
from fairdice.engine.state import DicePool, Die


def test_parse_die():
    die = parse_die("2,2,4,4,9,9", 1)
    assert die == Die((2, 2, 4, 4, 9, 9))
    assert str(die) == "2,2,4,4,9,9"
    assert die.face(4) == 9


def test_parse_die_allows_spaces_and_negatives():
    assert parse_die("1, -2, 3, 4, 5, 6", 1).faces == (1, -2, 3, 4, 5, 6)


def test_wrong_face_count():
    with pytest.raises(MalformedDie, match="Die 1 must have 6 faces, got 3"):
        parse_die("1,2,3", 1)


def test_non_integer_face():
    with pytest.raises(MalformedDie, match='Invalid integer in die 2: "a"'):
        parse_dice(["1,2,3,4,5,6", "1,a,3,4,5,6", "1,2,3,4,5,6"])


def test_too_few_dice():
    with pytest.raises(InsufficientDice, match="At least 3 dice required"):
        parse_dice(["1,2,3,4,5,6", "1,2,3,4,5,6"])


def test_build_pool_keeps_order_and_availability():
    pool = build_pool(["2,2,4,4,9,9", "6,8,1,1,8,6", "7,5,3,7,5,3", "1,1,1,1,1,1"])
    assert pool.labels() == ["2,2,4,4,9,9", "6,8,1,1,8,6", "7,5,3,7,5,3", "1,1,1,1,1,1"]
    assert pool.available == pool.dice
    assert pool.available is not pool.dice


def test_take_removes_die(classic_pool, classic_dice):
    die = classic_pool.take(1)
    assert die == classic_dice[1]
    assert classic_pool.available == [classic_dice[0], classic_dice[2]]
    assert classic_pool.dice == classic_dice
    with pytest.raises(IndexError):
        classic_pool.take(2)


def test_die_is_immutable():
    die = Die((1, 2, 3, 4, 5, 6))
    with pytest.raises(AttributeError):
        die.faces = (6, 5, 4, 3, 2, 1)


@pytest.mark.parametrize("bad_face", [2.7, "3", True, None])
def test_die_rejects_non_integer_faces(bad_face):
    with pytest.raises(ValueError, match="Die faces must be integers"):
        Die((bad_face, 1, 2, 3, 4, 5))


def test_die_accepts_list_of_faces():
    die = Die([1, 2, 3, 4, 5, 6])
    assert die.faces == (1, 2, 3, 4, 5, 6)


def test_explicitly_empty_pool_stays_empty(classic_dice):
    pool = DicePool(dice=list(classic_dice), available=[])
    assert pool.available == []
    assert pool.labels() == []
    with pytest.raises(IndexError):
        pool.take(0)


def test_pool_defaults_to_every_die(classic_dice):
    pool = DicePool(dice=list(classic_dice))
    assert pool.available == classic_dice
