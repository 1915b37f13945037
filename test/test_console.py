"""
Console session and command-line entry point.
"""

import asyncio
import io
import threading
import time

import pytest

import main
from fairdice.console import ConsoleSession, format_event
from fairdice.engine.errors import HelpRequested, MatchCancelled
from fairdice.engine.events import digest_published, match_finished, values_revealed
from fairdice.engine.game import GameOrchestrator


def scripted_input(answers):
    pending = list(answers)

    def read_line(prompt):
        if not pending:
            raise EOFError
        return pending.pop(0)

    return read_line


def test_choose_prints_menu_and_parses_answer():
    out = io.StringIO()
    session = ConsoleSession(stream=out, read_line=scripted_input(["1"]))

    choice = asyncio.run(session.choose("Pick your die:", ["1,2,3,4,5,6", "6,5,4,3,2,1"]))

    assert choice == 1
    text = out.getvalue()
    assert "Pick your die:" in text
    assert "0 - 1,2,3,4,5,6" in text
    assert "1 - 6,5,4,3,2,1" in text
    assert "X - exit" in text
    assert "? - help" in text


def test_choose_signals_help():
    session = ConsoleSession(stream=io.StringIO(), read_line=scripted_input(["?"]))
    with pytest.raises(HelpRequested):
        asyncio.run(session.choose("Pick:", ["0", "1"]))


def test_end_of_input_cancels():
    session = ConsoleSession(stream=io.StringIO(), read_line=scripted_input([]))
    with pytest.raises(MatchCancelled):
        asyncio.run(session.choose("Pick:", ["0", "1"]))


def test_closed_session_refuses_prompts():
    async def run():
        async with ConsoleSession(stream=io.StringIO(), read_line=scripted_input(["0"])) as session:
            pass
        assert session.closed
        await session.choose("Pick:", ["0"])

    with pytest.raises(RuntimeError):
        asyncio.run(run())


def test_event_texts():
    assert format_event(digest_published("First move", "AB" * 32, 1)) == f"\nFirst move\nHMAC={'AB' * 32}"
    revealed = format_event(values_revealed("Roll", "D", "KEYHEX", 3, 4, 1, 5))
    assert "My number: 3 (KEY=KEYHEX)" in revealed
    assert "Result: 3 + 4 = 1 (mod 6)" in revealed
    assert format_event(match_finished(None, 4, 4)).strip() == "Tie! (4 vs 4)"
    assert format_event(match_finished("user", 9, 4)).strip() == "You win! (9 vs 4)"


def test_full_console_match(classic_pool):
    out = io.StringIO()

    async def run():
        async with ConsoleSession(stream=out, read_line=scripted_input(["?", "0", "0", "0", "0"])) as session:
            return await GameOrchestrator(classic_pool, session).play()

    result = asyncio.run(run())

    text = out.getvalue()
    assert result is not None
    assert text.count("HMAC=") == 3
    assert text.count("Result:") == 3
    assert "Probability of the win for the user" in text
    assert "=== Rolling Dice ===" in text


def test_cli_rejects_bad_dice(capsys):
    assert asyncio.run(main.run_match(["1,2,3,4,5,6", "1,2,3"])) == 1
    assert "At least 3 dice required" in capsys.readouterr().err


def test_cli_rejects_malformed_die(capsys):
    assert main.main(["1,2,3,4,5,6", "1,2,3", "1,2,3,4,5,6"]) == 1
    assert "Die 2 must have 6 faces, got 3" in capsys.readouterr().err


def test_cancelled_prompt_returns_without_waiting_for_input():
    release = threading.Event()

    def blocked_read(prompt):
        release.wait(10)
        return "0"

    async def run():
        async with ConsoleSession(stream=io.StringIO(), read_line=blocked_read) as session:
            task = asyncio.create_task(session.choose("Pick:", ["0", "1"]))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
        return session

    started = time.monotonic()
    session = asyncio.run(run())
    elapsed = time.monotonic() - started
    release.set()

    assert elapsed < 2
    assert session.closed
    readers = [t for t in threading.enumerate() if t.name == "console-input"]
    assert all(t.daemon for t in readers)


def test_read_error_reaches_prompt():
    def broken_read(prompt):
        raise OSError("stdin gone")

    session = ConsoleSession(stream=io.StringIO(), read_line=broken_read)
    with pytest.raises(OSError, match="stdin gone"):
        asyncio.run(session.choose("Pick:", ["0", "1"]))
