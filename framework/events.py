"""Event schema for the in-memory game log."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from time import time
from typing import Any, Iterable

from .serialize import json_dumps, to_serializable


class EventType(str, Enum):
    """Event types emitted by the driving loop."""

    GAME_START = "game_start"
    CLUE = "clue"
    REVEAL = "reveal"
    TURN_END = "turn_end"
    REJECTED = "rejected"
    AGENT_ERROR = "agent_error"
    CONFIGURATION_ERROR = "configuration_error"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class GameEvent:
    """Single replay event recorded while a game is played."""

    event_type: EventType
    game_id: str
    turn: int
    timestamp_ms: int
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable event data."""
        return {
            "event_type": self.event_type.value,
            "game_id": self.game_id,
            "turn": self.turn,
            "timestamp_ms": self.timestamp_ms,
            "payload": to_serializable(self.payload),
        }

    @classmethod
    def create(cls, event_type: EventType, game_id: str, turn: int, payload: dict[str, Any]) -> "GameEvent":
        """Construct an event with the current wall-clock timestamp."""
        return cls(
            event_type=event_type,
            game_id=game_id,
            turn=turn,
            timestamp_ms=int(time() * 1000),
            payload=payload,
        )


def to_jsonl(events: Iterable[GameEvent]) -> str:
    """Render events as JSON lines."""
    return "\n".join(json_dumps(event.to_dict()) for event in events)
