"""Game result models for cooperative play."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .serialize import to_serializable


class MatchOutcome(str, Enum):
    """Shared outcome of a cooperative game."""

    WIN = "win"
    LOSS = "loss"


@dataclass(frozen=True)
class MatchResult:
    """Structured outcome for a completed game."""

    game_id: str
    game_name: str
    seed: int | None
    outcome: MatchOutcome
    termination_reason: str
    turns: int = 0
    stats: dict[str, Any] = field(default_factory=dict)
    details: str | None = None
    final_state_digest: str | None = None
    event_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable result object."""
        return {
            "game_id": self.game_id,
            "game_name": self.game_name,
            "seed": self.seed,
            "outcome": self.outcome.value,
            "termination_reason": self.termination_reason,
            "turns": self.turns,
            "stats": to_serializable(self.stats),
            "details": self.details,
            "final_state_digest": self.final_state_digest,
            "event_count": self.event_count,
        }
