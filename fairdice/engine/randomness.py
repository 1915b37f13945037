"""
Unbiased secure random integers.
Rejection sampling over whole random bytes; never a bare modulo reduction.
"""

import secrets

from fairdice.engine.errors import InvalidRange


def _random_bytes(count: int) -> bytes:
    return secrets.token_bytes(count)


def generate_uniform(range_inclusive_max: int) -> int:
    """
    Draw an integer uniformly from [0, range_inclusive_max].

    A draw at or above the largest multiple of the range that fits in the
    byte space is discarded and redrawn, so every result is equally likely
    whether or not the range divides the byte space evenly.

    Raises:
        InvalidRange: range_inclusive_max is negative
    """
    if range_inclusive_max < 0:
        raise InvalidRange(f"Range maximum must be non-negative, got {range_inclusive_max}")

    size = range_inclusive_max + 1
    byte_count = max(1, (range_inclusive_max.bit_length() + 7) // 8)
    space = 256 ** byte_count
    limit = (space // size) * size

    while True:
        draw = int.from_bytes(_random_bytes(byte_count), "big")
        if draw < limit:
            return draw % size
