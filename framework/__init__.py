"""Framework exports for games, agents, events and results."""

from .errors import AgentExecutionError, ConfigurationError, GameError, IllegalMoveError
from .events import EventType, GameEvent
from .game import Game, LegalMovesSpec, PlayerId
from .move import Move
from .observation import Observation
from .player import Agent
from .result import MatchOutcome, MatchResult
from .state import State

__all__ = [
    "Agent",
    "AgentExecutionError",
    "ConfigurationError",
    "EventType",
    "Game",
    "GameError",
    "GameEvent",
    "IllegalMoveError",
    "LegalMovesSpec",
    "MatchOutcome",
    "MatchResult",
    "Move",
    "Observation",
    "PlayerId",
    "State",
]
