"""
FastAPI backend for Fair Dice Duel.
Runs matches as in-memory sessions; every operator prompt is answered over HTTP.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from fairdice import config
from fairdice.engine.definitions import build_pool, parse_dice
from fairdice.engine.errors import FairDiceError
from fairdice.engine.probability import render_matrix, render_table
from fairdice.engine.state import Die

from .matches import (
    MatchHandle,
    NoPendingPrompt,
    TooManyMatches,
    close_all,
    matches,
    read_snapshot,
    reap_forever,
    start_match,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    reaper = asyncio.create_task(reap_forever())
    try:
        yield
    finally:
        reaper.cancel()
        await asyncio.gather(reaper, return_exceptions=True)
        await close_all()
        logger.info("Stop Server")


app = FastAPI(
    title="Fair Dice Duel API",
    description="Provably fair non-transitive dice duels",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== Pydantic Models =====

class DiceRequest(BaseModel):
    dice: list[str]  # each "a,b,c,d,e,f"


class AnswerRequest(BaseModel):
    answer: str  # choice index, "?" for help, "x" to leave


# ===== Helper Functions =====

def get_match(match_id: str) -> MatchHandle:
    """Get a match; raise 404 if not found."""
    handle = matches.get(match_id)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"Match {match_id} not found")
    return handle


def _probabilities(dice: list[Die]) -> dict:
    return {
        "dice": [str(d) for d in dice],
        "matrix": render_matrix(dice),
        "table": render_table(dice),
    }


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Fair Dice Duel API", "version": "1.0.0"}


@app.post("/probabilities")
def probabilities(request: DiceRequest):
    """Win-probability matrix for any dice set, without starting a match."""
    try:
        dice = parse_dice(request.dice)
    except FairDiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _probabilities(dice)


@app.post("/matches")
async def create_match(request: DiceRequest):
    """Start a match; returns once it waits for the first answer."""
    try:
        pool = build_pool(request.dice)
    except FairDiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        handle = await start_match(pool)
    except TooManyMatches as e:
        raise HTTPException(status_code=503, detail=str(e))
    return read_snapshot(handle)


@app.get("/matches/{match_id}")
def get_match_state(match_id: str):
    """Current state; a stopped match is released after this read."""
    return read_snapshot(get_match(match_id))


@app.post("/matches/{match_id}/answer")
async def answer_prompt(match_id: str, request: AnswerRequest):
    """Answer the pending prompt; returns once the match waits again or stops."""
    handle = get_match(match_id)
    try:
        await handle.submit(request.answer)
    except NoPendingPrompt as e:
        raise HTTPException(status_code=409, detail=str(e))
    return read_snapshot(handle)


@app.get("/matches/{match_id}/probabilities")
def match_probabilities(match_id: str):
    handle = get_match(match_id)
    return _probabilities(handle.orchestrator.state.pool.dice)


@app.delete("/matches/{match_id}")
async def delete_match(match_id: str):
    """Leave the match (if still running) and forget it."""
    handle = get_match(match_id)
    await handle.cancel()
    matches.pop(match_id, None)
    return {"match_id": match_id, "deleted": True}
