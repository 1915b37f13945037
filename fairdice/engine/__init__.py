"""
Fair Dice Duel Engine
Core engine without console, web framework, or persistence.
"""

DICE_SIDES = 6
MIN_DICE = 3

# Inclusive maxima for the two kinds of exchange
FIRST_MOVE_RANGE_MAX = 1
ROLL_RANGE_MAX = DICE_SIDES - 1

# 256-bit commitment keys
KEY_SIZE_BYTES = 32

# Reference value shown for a die against itself in the probability matrix
SELF_MATCH_PROBABILITY = "0.3333"
