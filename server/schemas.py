"""Pydantic request schemas for the game API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class CreateGameRequest(BaseModel):
    """Request body for creating a new game session."""

    seed: int | None = None
    theme: str | None = None
    difficulty: str | None = None
    timer_tokens: int | None = Field(default=None, ge=1)
    agent: str | dict[str, Any] | None = None
    guess_pacing_sec: float | None = Field(default=None, ge=0)


class ResetGameRequest(BaseModel):
    theme: str | None = None
    difficulty: str | None = None


class ClueRequestBody(BaseModel):
    """Human clue: one word and a count."""

    word: str = Field(min_length=1)
    count: int = Field(ge=0)


class RevealRequestBody(BaseModel):
    index: int = Field(ge=0)
