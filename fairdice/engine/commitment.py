"""
Commit-reveal scheme for a single secret integer.
The digest is an HMAC-SHA3-256 of the decimal value under a fresh 256-bit key.
Only the digest may be shown before the counterpart has answered.
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from typing import Any

from fairdice.engine import KEY_SIZE_BYTES
from fairdice.engine.errors import CommitmentMismatch, InvalidRange


def compute_digest(key: bytes, value: int) -> str:
    return hmac.new(key, str(value).encode("ascii"), hashlib.sha3_256).hexdigest().upper()


def verify_commitment(digest: str, key: bytes, value: int) -> bool:
    """Recompute the digest from a revealed key and value and compare with the published one."""
    return hmac.compare_digest(compute_digest(key, value), digest.upper())


@dataclass(frozen=True)
class Commitment:
    """A secret value bound to its digest. Publish `digest`; keep the rest until reveal."""
    key: bytes
    secret_value: int
    range_max: int
    digest: str

    @property
    def key_hex(self) -> str:
        return self.key.hex().upper()

    def public_dict(self) -> dict[str, Any]:
        """The part that is safe to disclose before the reveal."""
        return {"digest": self.digest, "range_max": self.range_max}

    def __repr__(self) -> str:
        return f"Commitment(digest={self.digest!r}, range_max={self.range_max})"


def create_commitment(secret_value: int, range_max: int) -> Commitment:
    """
    Bind secret_value to a digest under a fresh random key.

    Raises:
        InvalidRange: range_max is negative or secret_value lies outside [0, range_max]
    """
    if range_max < 0:
        raise InvalidRange(f"Range maximum must be non-negative, got {range_max}")
    if not 0 <= secret_value <= range_max:
        raise InvalidRange(f"Secret value {secret_value} is outside [0, {range_max}]")

    key = secrets.token_bytes(KEY_SIZE_BYTES)
    return Commitment(
        key=key,
        secret_value=secret_value,
        range_max=range_max,
        digest=compute_digest(key, secret_value),
    )


def reveal_and_verify(commitment: Commitment) -> tuple[str, int]:
    """
    Disclose the key (hex) and the secret value.

    The digest is recomputed first; a mismatch means the value changed after
    it was committed.

    Raises:
        CommitmentMismatch: the key and value no longer reproduce the digest
    """
    if not verify_commitment(commitment.digest, commitment.key, commitment.secret_value):
        raise CommitmentMismatch(
            f"Commitment {commitment.digest} does not match the revealed value"
        )
    return commitment.key_hex, commitment.secret_value
