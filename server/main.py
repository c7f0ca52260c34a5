"""FastAPI server exposing a local Codenames Duet API for human-vs-AI play."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from framework.errors import ConfigurationError
from framework.events import to_jsonl
from server.config import Settings, configure_logging
from server.schemas import ClueRequestBody, CreateGameRequest, ResetGameRequest, RevealRequestBody
from server.session import DuetSession, SessionStore

app = FastAPI(title="Codenames Duet Local API", version="0.1.0")
store = SessionStore()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _session(game_id: str) -> DuetSession:
    try:
        return store.get(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown game_id: {game_id}") from exc


def _configuration_error(exc: ConfigurationError) -> HTTPException:
    return HTTPException(status_code=503, detail=exc.to_dict())


@app.get("/api/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""
    return {"status": "ok"}


@app.post("/api/game/new")
def new_game(request: CreateGameRequest) -> dict[str, Any]:
    """Create a new in-memory game session. The AI opens, so call /advance next."""
    try:
        session = store.create_game(
            seed=request.seed,
            theme=request.theme,
            difficulty=request.difficulty,
            timer_tokens=request.timer_tokens,
            agent=request.agent,
            guess_pacing_sec=request.guess_pacing_sec,
        )
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return session.view()


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> dict[str, Any]:
    return _session(game_id).view()


@app.post("/api/game/{game_id}/reset")
def reset_game(game_id: str, request: ResetGameRequest) -> dict[str, Any]:
    """Start over with a new board, optionally switching theme or difficulty."""
    session = _session(game_id)
    try:
        return session.reset(theme=request.theme, difficulty=request.difficulty)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.post("/api/game/{game_id}/clue")
def submit_clue(game_id: str, request: ClueRequestBody) -> dict[str, Any]:
    return _session(game_id).submit_clue(request.word, request.count)


@app.post("/api/game/{game_id}/reveal")
def reveal(game_id: str, request: RevealRequestBody) -> dict[str, Any]:
    return _session(game_id).reveal(request.index)


@app.post("/api/game/{game_id}/end-turn")
def end_turn(game_id: str) -> dict[str, Any]:
    return _session(game_id).end_turn()


@app.post("/api/game/{game_id}/ai/clue")
async def ai_clue(game_id: str) -> dict[str, Any]:
    """Ask the AI partner for a clue."""
    session = _session(game_id)
    try:
        return await session.request_ai_clue()
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc


@app.post("/api/game/{game_id}/ai/guess")
async def ai_guess(game_id: str) -> dict[str, Any]:
    """Ask the AI partner to guess against the active clue (or in Sudden Death)."""
    session = _session(game_id)
    try:
        return await session.request_ai_guesses()
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc


@app.post("/api/game/{game_id}/advance")
async def advance(game_id: str) -> dict[str, Any]:
    """Run AI actions until the human is up or the game ends."""
    session = _session(game_id)
    try:
        return await session.advance()
    except ConfigurationError as exc:
        raise _configuration_error(exc) from exc


@app.get("/api/game/{game_id}/events", response_model=None)
def get_events(game_id: str, format: str = Query(default="array")) -> Any:
    """Return full event history as array (default) or JSONL text."""
    session = _session(game_id)
    if format == "jsonl":
        return PlainTextResponse(content=to_jsonl(session.events), media_type="application/jsonl")
    return session.event_dicts()


if __name__ == "__main__":
    import uvicorn

    configure_logging(Settings.from_env().log_level)
    uvicorn.run("server.main:app", host="0.0.0.0", port=8000, reload=True)
