"""Structured exceptions used across the game framework."""

from __future__ import annotations

from typing import Any


class GameError(Exception):
    """Base class for framework-level exceptions."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {"type": self.__class__.__name__, "message": str(self)}


class ConfigurationError(GameError, ValueError):
    """Raised when an agent or game is configured incorrectly (e.g. a missing API key)."""


class IllegalMoveError(GameError, ValueError):
    """Raised when a move is rejected by the rules engine."""

    def __init__(self, player_id: str, move: Any, reason: str | None = None):
        self.player_id = player_id
        self.move = move
        self.reason = reason
        message = f"Illegal move by {player_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload.update({"player_id": self.player_id, "move": getattr(self.move, "to_dict", lambda: self.move)()})
        if self.reason is not None:
            payload["reason"] = self.reason
        return payload


class AgentExecutionError(GameError):
    """Raised when an agent fails to produce a usable clue or guess."""

    def __init__(self, agent_id: str, message: str):
        self.agent_id = agent_id
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["agent_id"] = self.agent_id
        return payload
