"""
Match orchestrator.
Runs the phases in order (first mover, dice selection, rolling, winner),
using fair value exchanges for every random decision the operator could dispute.
"""

import logging
from typing import Any

from fairdice.engine import FIRST_MOVE_RANGE_MAX, ROLL_RANGE_MAX
from fairdice.engine import randomness
from fairdice.engine.errors import FairDiceError, MatchCancelled
from fairdice.engine.events import (
    die_assigned,
    die_rolled,
    first_mover_determined,
    match_aborted,
    match_finished,
    phase_changed,
    probabilities_shown,
)
from fairdice.engine.exchange import RoundResult, run_exchange
from fairdice.engine.probability import render_matrix, render_table
from fairdice.engine.prompts import numeric_labels, request_choice
from fairdice.engine.state import (
    COMPUTER,
    PHASE_DETERMINING_FIRST_MOVER,
    PHASE_FINISHED,
    PHASE_ORDER,
    PHASE_ROLLING,
    PHASE_SELECTING_DICE,
    USER,
    DicePool,
    Die,
    GameState,
    MatchResult,
)

logger = logging.getLogger(__name__)


def determine_winner(computer_face: int, user_face: int) -> str | None:
    """Higher face wins; equal faces are a tie (None), never re-rolled."""
    if user_face > computer_face:
        return USER
    if computer_face > user_face:
        return COMPUTER
    return None


class GameOrchestrator:
    """
    Sequences one match against the operator behind `session`.

    The session is owned by the caller (acquired with `async with` and
    released there); the orchestrator only uses its choose/emit capability.
    """

    def __init__(self, pool: DicePool, session: Any):
        self.session = session
        self.state = GameState(pool=pool)

    # ===== Phase bookkeeping =====

    def _advance_phase(self, new_phase: str) -> None:
        """Move to the next phase. Skipping or revisiting a phase is a rule violation."""
        old_phase = self.state.phase
        expected_index = PHASE_ORDER.index(old_phase) + 1
        if expected_index >= len(PHASE_ORDER) or PHASE_ORDER[expected_index] != new_phase:
            raise ValueError(f"Cannot move from phase '{old_phase}' to '{new_phase}'")
        self.state.phase = new_phase
        self.session.emit(phase_changed(old_phase, new_phase))

    def _require_phase(self, phase: str) -> None:
        if self.state.phase != phase:
            raise ValueError(f"Action requires phase '{phase}', match is in '{self.state.phase}'")

    # ===== Operator helpers =====

    def show_probabilities(self) -> None:
        """Publish the win-probability matrix over every die of the match."""
        dice = self.state.pool.dice
        self.session.emit(probabilities_shown(
            [str(d) for d in dice],
            render_matrix(dice),
            render_table(dice),
        ))

    async def _request_number(self, range_max: int) -> int:
        return await request_choice(
            self.session,
            f"Pick a number (0-{range_max}):",
            numeric_labels(range_max),
            on_help=self.show_probabilities,
        )

    async def _exchange(self, range_max: int, label: str) -> RoundResult:
        return await run_exchange(range_max, label, self._request_number, self.session.emit)

    # ===== Phases =====

    async def determine_first_mover(self) -> bool:
        """One exchange over {0, 1}; 0 means the user moves first."""
        self._require_phase(PHASE_DETERMINING_FIRST_MOVER)
        result = await self._exchange(FIRST_MOVE_RANGE_MAX, "First move")
        user_first = result.combined_result == 0
        self.state.user_first = user_first
        self.session.emit(first_mover_determined(user_first))
        logger.info(f"First mover: {USER if user_first else COMPUTER}")
        return user_first

    async def _assign_user_die(self) -> Die:
        pool = self.state.pool
        index = await request_choice(
            self.session,
            "Pick your die:",
            pool.labels(),
            on_help=self.show_probabilities,
        )
        die = pool.take(index)
        self.state.user_die = die
        self.session.emit(die_assigned(USER, str(die)))
        return die

    def _assign_computer_die(self) -> Die:
        pool = self.state.pool
        die = pool.take(randomness.generate_uniform(len(pool.available) - 1))
        self.state.computer_die = die
        self.session.emit(die_assigned(COMPUTER, str(die)))
        return die

    async def select_dice(self, user_first: bool) -> tuple[Die, Die]:
        """
        Assign one die to each side, first mover picks first.
        Returns (computer_die, user_die).
        """
        self._advance_phase(PHASE_SELECTING_DICE)
        if user_first:
            user_die = await self._assign_user_die()
            computer_die = self._assign_computer_die()
        else:
            computer_die = self._assign_computer_die()
            user_die = await self._assign_user_die()
        logger.info(f"Dice assigned: computer [{computer_die}], user [{user_die}]")
        return computer_die, user_die

    async def _roll(self, party: str, die: Die, label: str) -> int:
        result = await self._exchange(ROLL_RANGE_MAX, label)
        face = die.face(result.combined_result)
        self.session.emit(die_rolled(party, result.combined_result, face))
        return face

    async def roll_dice(self) -> tuple[int, int]:
        """Two independent exchanges over [0, 5]; returns (computer_face, user_face)."""
        self._advance_phase(PHASE_ROLLING)
        computer_face = await self._roll(COMPUTER, self.state.computer_die, "My roll")
        user_face = await self._roll(USER, self.state.user_die, "Your roll")
        self.state.computer_face = computer_face
        self.state.user_face = user_face
        return computer_face, user_face

    def finish(self, computer_face: int, user_face: int) -> MatchResult:
        self._advance_phase(PHASE_FINISHED)
        winner = determine_winner(computer_face, user_face)
        self.state.winner = winner
        self.session.emit(match_finished(winner, user_face, computer_face))
        logger.info(f"Match finished: {winner or 'tie'} ({user_face} vs {computer_face})")
        return MatchResult(computer_face=computer_face, user_face=user_face, winner=winner)

    async def play(self) -> MatchResult | None:
        """
        Run the whole match.

        Returns:
            MatchResult, or None when the match was cancelled or aborted by a
            protocol failure (reported through a match_aborted event).
        """
        try:
            user_first = await self.determine_first_mover()
            await self.select_dice(user_first)
            computer_face, user_face = await self.roll_dice()
            return self.finish(computer_face, user_face)
        except MatchCancelled as e:
            logger.warning(f"Match cancelled in phase {self.state.phase}")
            self._abort(str(e) or "cancelled")
        except FairDiceError as e:
            logger.error(f"Match aborted in phase {self.state.phase}: {e}")
            self._abort(str(e))
        return None

    def _abort(self, reason: str) -> None:
        self.state.aborted = True
        self.session.emit(match_aborted(self.state.phase, reason))
