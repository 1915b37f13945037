"""
Fair value exchange: commit -> request counterpart value -> combine -> reveal.

The secret value is drawn and bound to a published digest before the
counterpart is asked for anything, and the key is disclosed only after the
counterpart answered. With a uniform secret, (secret + counterpart) mod n is
uniform whatever the counterpart picks.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from fairdice.engine import randomness
from fairdice.engine.commitment import create_commitment, reveal_and_verify
from fairdice.engine.errors import InvalidChoice, InvalidRange
from fairdice.engine.events import GameEvent, digest_published, values_revealed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundResult:
    """Outcome of one exchange."""
    secret_value: int
    counterpart_value: int
    combined_result: int
    range_max: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "secret_value": self.secret_value,
            "counterpart_value": self.counterpart_value,
            "combined_result": self.combined_result,
            "range_max": self.range_max,
        }


async def run_exchange(
    range_max: int,
    label: str,
    request_counterpart_value: Callable[[int], Awaitable[int]],
    emit: Callable[[GameEvent], None],
) -> RoundResult:
    """
    Run one full exchange over [0, range_max].

    Args:
        range_max: Inclusive maximum of both values and of the result
        label: Shown next to the digest (e.g. "First move", "My roll")
        request_counterpart_value: Async capability returning the counterpart's value
        emit: Publishes events to the display collaborator

    Raises:
        InvalidRange: range_max is negative
        InvalidChoice: the counterpart value is outside [0, range_max]
        Anything raised by request_counterpart_value (nothing is revealed then)
    """
    if range_max < 0:
        raise InvalidRange(f"Range maximum must be non-negative, got {range_max}")

    secret_value = randomness.generate_uniform(range_max)
    commitment = create_commitment(secret_value, range_max)
    emit(digest_published(label, commitment.digest, range_max))
    logger.debug(f"{label}: committed {commitment.digest}")

    counterpart_value = await request_counterpart_value(range_max)
    if not 0 <= counterpart_value <= range_max:
        raise InvalidChoice(f"Counterpart value {counterpart_value} is outside [0, {range_max}]")

    combined_result = (secret_value + counterpart_value) % (range_max + 1)

    key, revealed_value = reveal_and_verify(commitment)
    emit(values_revealed(
        label,
        commitment.digest,
        key,
        revealed_value,
        counterpart_value,
        combined_result,
        range_max,
    ))
    logger.debug(f"{label}: {revealed_value} + {counterpart_value} = {combined_result} (mod {range_max + 1})")

    return RoundResult(
        secret_value=secret_value,
        counterpart_value=counterpart_value,
        combined_result=combined_result,
        range_max=range_max,
    )
