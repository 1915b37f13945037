"""
Fair value exchange: modular combination, publication order, and aborts.
"""

import asyncio

import pytest

from fairdice.engine import randomness
from fairdice.engine.commitment import verify_commitment
from fairdice.engine.errors import InvalidChoice, InvalidRange, MatchCancelled
from fairdice.engine.events import DIGEST_PUBLISHED, VALUES_REVEALED
from fairdice.engine.exchange import RoundResult, run_exchange


def fixed_secret(monkeypatch, value):
    monkeypatch.setattr(randomness, "generate_uniform", lambda range_max: value)


def answering(value):
    async def request(range_max):
        return value
    return request


def test_combined_result_is_sum_modulo_range(monkeypatch):
    fixed_secret(monkeypatch, 3)
    results = [
        asyncio.run(run_exchange(5, "Roll", answering(v), lambda e: None)).combined_result
        for v in range(6)
    ]
    assert results == [3, 4, 5, 0, 1, 2]


def test_round_result_fields(monkeypatch):
    fixed_secret(monkeypatch, 1)
    result = asyncio.run(run_exchange(1, "First move", answering(1), lambda e: None))
    assert result == RoundResult(secret_value=1, counterpart_value=1, combined_result=0, range_max=1)


def test_digest_published_before_request_and_revealed_after():
    emitted = []

    async def request(range_max):
        # At request time only the digest may be out
        assert [e.type for e in emitted] == [DIGEST_PUBLISHED]
        assert "key" not in emitted[0].payload
        assert "secret_value" not in emitted[0].payload
        return 2

    result = asyncio.run(run_exchange(5, "My roll", request, emitted.append))

    assert [e.type for e in emitted] == [DIGEST_PUBLISHED, VALUES_REVEALED]
    revealed = emitted[1].payload
    assert revealed["secret_value"] == result.secret_value
    assert revealed["combined_result"] == result.combined_result
    assert revealed["modulus"] == 6


def test_revealed_values_verify_against_published_digest():
    emitted = []
    asyncio.run(run_exchange(5, "Your roll", answering(4), emitted.append))

    published = emitted[0].payload["digest"]
    revealed = emitted[1].payload
    assert revealed["digest"] == published
    assert verify_commitment(published, bytes.fromhex(revealed["key"]), revealed["secret_value"])


def test_cancelled_request_reveals_nothing():
    emitted = []

    async def request(range_max):
        raise MatchCancelled("left")

    with pytest.raises(MatchCancelled):
        asyncio.run(run_exchange(5, "Roll", request, emitted.append))
    assert [e.type for e in emitted] == [DIGEST_PUBLISHED]


def test_out_of_range_counterpart_value_is_rejected():
    emitted = []
    with pytest.raises(InvalidChoice):
        asyncio.run(run_exchange(5, "Roll", answering(6), emitted.append))
    assert VALUES_REVEALED not in [e.type for e in emitted]


def test_negative_range_fails_before_anything_is_published():
    emitted = []
    with pytest.raises(InvalidRange):
        asyncio.run(run_exchange(-1, "Roll", answering(0), emitted.append))
    assert emitted == []


def test_result_covers_whole_range_for_fixed_counterpart():
    # A counterpart that always answers 0 still sees every outcome
    seen = {
        asyncio.run(run_exchange(5, "Roll", answering(0), lambda e: None)).combined_result
        for _ in range(300)
    }
    assert seen == set(range(6))
