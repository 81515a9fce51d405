"""
FastAPI host for Chinchiro.
Keeps sessions in memory, rolls the authoritative dice, and forwards every player
action to the engine reducer. Nothing is persisted across restarts.
"""

import random
import threading
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from chinchiro.config import DEFAULT_TOP_UP_AMOUNT
from chinchiro.engine.state import GameState
from chinchiro.engine.actions import (
    Action,
    set_bet,
    add_bet,
    borrow,
    repay,
    confirm_bets,
    roll,
    finish_turn,
    next_round,
)
from chinchiro.engine.reducer import apply_action
from chinchiro.engine.definitions import SessionConfig
from chinchiro.engine.dice import generate_roll
from chinchiro.engine.queries import (
    validate_action,
    get_available_actions,
    get_round_summary,
)
from chinchiro.engine.utils import initialize_game_state

app = FastAPI(
    title="Chinchiro API",
    description="Backend API for Chinchiro - a banker-vs-challengers dice game",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers and full traceback so the frontend can read the error."""
    import traceback
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    traceback.print_exception(type(exc), exc, exc.__traceback__)
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "traceback": tb},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# In-memory sessions; lost when the process stops
games: dict[str, GameState] = {}

# Per-game random source for the authoritative rolls
game_rngs: dict[str, random.Random] = {}

# One lock per game so concurrent requests cannot interleave read-apply-save
game_locks: dict[str, threading.RLock] = {}
_game_locks_guard = threading.Lock()


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    starting_balance: int | str | None = None
    player_count: int | None = None
    player_names: list[str] | None = None
    off_table_probability: float | None = None
    """Seed for this session's dice. Omitted = unpredictable rolls."""
    seed: int | None = None


class AmountRequest(BaseModel):
    player_id: str
    # Raw input; text that does not parse is treated as 0
    amount: int | float | str | None = None


class PlayerRequest(BaseModel):
    player_id: str


# ===== Helper Functions =====

def get_game(game_id: str) -> GameState:
    """Get game state from memory; raise 404 if not found."""
    state = games.get(game_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return state


def save_game(game_id: str, state: GameState) -> None:
    games[game_id] = state


def get_rng(game_id: str) -> random.Random:
    rng = game_rngs.get(game_id)
    if rng is None:
        rng = random.Random()
        game_rngs[game_id] = rng
    return rng


def game_lock(game_id: str) -> threading.RLock:
    """Lock serializing mutations of one game. Unknown ids get a throwaway lock."""
    with _game_locks_guard:
        if game_id not in games:
            return threading.RLock()
        lock = game_locks.get(game_id)
        if lock is None:
            lock = threading.RLock()
            game_locks[game_id] = lock
        return lock


def state_for_response(state: GameState) -> dict[str, Any]:
    """State dict including the per-player round summary for the UI."""
    out = state.to_dict()
    out["summary"] = get_round_summary(state)
    return out


def _apply(game_id: str, action: Action) -> dict[str, Any]:
    """Validate and apply an action to a stored game; 400 with the rule message if invalid."""
    with game_lock(game_id):
        state = get_game(game_id)
        validation = validate_action(state, action)
        if not validation.valid:
            raise HTTPException(status_code=400, detail=validation.error)
        new_state, events = apply_action(state, action)
        save_game(game_id, new_state)
    return {
        "state": state_for_response(new_state),
        "events": [e.to_dict() for e in events],
    }


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Chinchiro API", "version": "1.0.0"}


@app.post("/games")
def create_game(request: CreateGameRequest):
    """Create a new in-memory session. Returns game_id and the opening state."""
    raw = {
        "starting_balance": request.starting_balance,
        "player_count": request.player_count,
        "player_names": request.player_names,
        "off_table_probability": request.off_table_probability,
    }
    try:
        config = SessionConfig.from_dict(raw)
        state = initialize_game_state(config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    game_id = str(uuid.uuid4())
    save_game(game_id, state)
    game_rngs[game_id] = random.Random(request.seed)
    return {
        "game_id": game_id,
        "config": config.to_dict(),
        "state": state_for_response(state),
    }


@app.get("/games/{game_id}")
def get_game_state(game_id: str):
    """Get current game state."""
    state = get_game(game_id)
    return {"game_id": game_id, "state": state_for_response(state)}


@app.get("/games/{game_id}/available-actions")
def get_game_available_actions(game_id: str):
    """Get available actions for the current phase."""
    state = get_game(game_id)
    return get_available_actions(state)


@app.get("/games/{game_id}/summary")
def get_game_summary(game_id: str):
    """Hand label, bet, net result and balance per player."""
    state = get_game(game_id)
    return get_round_summary(state)


@app.delete("/games/{game_id}")
def delete_game(game_id: str):
    """Drop a session from memory."""
    with game_lock(game_id):
        get_game(game_id)
        del games[game_id]
        game_rngs.pop(game_id, None)
    with _game_locks_guard:
        game_locks.pop(game_id, None)
    return {"message": f"Game {game_id} deleted"}


@app.post("/games/{game_id}/bet")
def do_set_bet(game_id: str, request: AmountRequest):
    """Set a challenger's bet (clamped to their balance)."""
    return _apply(game_id, set_bet(request.player_id, request.amount))


@app.post("/games/{game_id}/add-bet")
def do_add_bet(game_id: str, request: AmountRequest):
    """Add to a challenger's bet (total clamped to their balance)."""
    return _apply(game_id, add_bet(request.player_id, request.amount))


@app.post("/games/{game_id}/borrow")
def do_borrow(game_id: str, request: AmountRequest):
    """Top up a player's balance with house credit."""
    amount = request.amount if request.amount is not None else DEFAULT_TOP_UP_AMOUNT
    return _apply(game_id, borrow(request.player_id, amount))


@app.post("/games/{game_id}/repay")
def do_repay(game_id: str, request: AmountRequest):
    """Repay a player's debt, bounded by debt and balance."""
    amount = request.amount if request.amount is not None else DEFAULT_TOP_UP_AMOUNT
    return _apply(game_id, repay(request.player_id, amount))


@app.post("/games/{game_id}/confirm-bets")
def do_confirm_bets(game_id: str):
    """Close betting and start the acting phase."""
    return _apply(game_id, confirm_bets())


@app.post("/games/{game_id}/roll")
def do_roll(game_id: str, request: PlayerRequest):
    """
    Roll for the active player. The server draws the dice and the Off-Table override,
    but only after the roll is known to be legal, so rejected rolls never consume the
    session's dice sequence.
    """
    with game_lock(game_id):
        state = get_game(game_id)
        validation = validate_action(state, roll(request.player_id, [1, 1, 1]))
        if not validation.valid:
            raise HTTPException(status_code=400, detail=validation.error)
        throw = generate_roll(get_rng(game_id), state.off_table_probability)
        return _apply(game_id, roll(request.player_id, throw["dice"], throw["off_table"]))


@app.post("/games/{game_id}/finish-turn")
def do_finish_turn(game_id: str, request: PlayerRequest):
    """End the active player's turn. The banker finishing settles the round."""
    return _apply(game_id, finish_turn(request.player_id))


@app.post("/games/{game_id}/next-round")
def do_next_round(game_id: str):
    """Rotate the banker and reopen betting."""
    return _apply(game_id, next_round())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
