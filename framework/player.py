"""Agent base class shared by AI players."""

from __future__ import annotations

from typing import Any, Mapping


class Agent:
    """Base interface for autonomous or scripted players.

    Concrete games extend this with the requests their agents must answer;
    the base only carries identity and per-game lifecycle hooks.
    """

    def __init__(self, agent_id: str):
        self.agent_id = agent_id

    def reset(self, game_id: str, seed: int | None, config: dict[str, Any] | None) -> None:
        """Reset internal state before a new game."""

    def on_game_end(self, result: Any) -> None:
        """Optional callback invoked when the game ends."""

    def debug_context(self) -> Mapping[str, Any] | None:
        """Optional diagnostics payload for logging around errors."""
        return None
