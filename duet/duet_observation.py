"""Observation model: one side's view of the table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from framework.observation import Observation

from .duet_state import CardType, Clue, PlayerSide, RevealedState, TurnOwner


@dataclass(frozen=True)
class DuetObservation(Observation):
    """What one side may see: the grid, public reveals and its own key-card half."""

    side: PlayerSide
    role: str | None
    grid_words: tuple[str, ...]
    revealed_states: tuple[RevealedState, ...]
    own_key: tuple[CardType, ...]
    timer_tokens: int
    current_turn: TurnOwner
    active_clue: Clue | None
    guesses_left: int | None
    own_greens_left: int
    partner_greens_left: int
    total_greens_found: int
    sudden_death: bool
    sudden_death_guesser: PlayerSide | None
    game_over: bool
    game_message: str
    turn_index: int
    last_move: dict[str, Any] | None = None
