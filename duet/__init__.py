"""Codenames Duet package exports."""

from .duet_adapter import (
    SUDDEN_DEATH_CLUE,
    ClueRequest,
    ClueResponse,
    GuessRequest,
    GuessResponse,
    build_clue_request,
    build_guess_request,
    sanitize_guesses,
    validate_clue,
)
from .duet_agents import DuetAgent, LLMDuetAgent, RandomDuetAgent, ScriptedDuetAgent
from .duet_engine import EngineResult
from .duet_game import DuetGame
from .duet_moves import EndTurn, GiveClue, Guess, MoveType
from .duet_observation import DuetObservation
from .duet_setup import initialize_game_state
from .duet_state import (
    CardType,
    Clue,
    DuetState,
    Ending,
    KeyCardEntry,
    Outcome,
    PlayerSide,
    RevealedState,
    TurnOwner,
)
from .duet_words import Difficulty, Theme

__all__ = [
    "SUDDEN_DEATH_CLUE",
    "CardType",
    "Clue",
    "ClueRequest",
    "ClueResponse",
    "Difficulty",
    "DuetAgent",
    "DuetGame",
    "DuetObservation",
    "DuetState",
    "EndTurn",
    "Ending",
    "EngineResult",
    "GiveClue",
    "Guess",
    "GuessRequest",
    "GuessResponse",
    "KeyCardEntry",
    "LLMDuetAgent",
    "MoveType",
    "Outcome",
    "PlayerSide",
    "RandomDuetAgent",
    "RevealedState",
    "ScriptedDuetAgent",
    "Theme",
    "TurnOwner",
    "build_clue_request",
    "build_guess_request",
    "initialize_game_state",
    "sanitize_guesses",
    "validate_clue",
]
