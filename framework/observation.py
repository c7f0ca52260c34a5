"""Observation objects delivered to players and agents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .serialize import to_serializable


@dataclass(frozen=True)
class Observation:
    """Base observation: what one player is allowed to see of a state."""

    player_id: str

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return to_serializable(self)
