"""Move definitions for Codenames Duet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from framework.move import Move


class MoveType(str, Enum):
    """Supported move discriminators."""

    GIVE_CLUE = "GiveClue"
    GUESS = "Guess"
    END_TURN = "EndTurn"


@dataclass(frozen=True)
class GiveClue(Move):
    """Clue giver's move: one word and how many cards it points at."""

    clue: str
    count: int
    move_type = MoveType.GIVE_CLUE.value

    def __post_init__(self) -> None:
        clue = str(self.clue).strip()
        if not clue:
            raise ValueError("Clue must be non-empty.")
        count = int(self.count)
        if count < 0:
            raise ValueError("Clue count must be >= 0.")
        object.__setattr__(self, "clue", clue)
        object.__setattr__(self, "count", count)


@dataclass(frozen=True)
class Guess(Move):
    """Reveal the card at a grid index."""

    index: int
    move_type = MoveType.GUESS.value

    def __post_init__(self) -> None:
        index = int(self.index)
        if index < 0:
            raise ValueError("Guess index must be >= 0.")
        object.__setattr__(self, "index", index)


@dataclass(frozen=True)
class EndTurn(Move):
    """Guesser stops guessing voluntarily; spends a timer token."""

    move_type = MoveType.END_TURN.value


def move_from_dict(data: Mapping[str, Any]) -> Move:
    """Parse a Duet move from a JSON payload."""
    move_type = data.get("type") or data.get("move_type")
    if move_type == MoveType.GIVE_CLUE.value:
        if "clue" not in data and "word" in data:
            translated = dict(data)
            translated["clue"] = translated["word"]
            return GiveClue.from_dict(translated)
        return GiveClue.from_dict(data)
    if move_type == MoveType.GUESS.value:
        if "index" not in data and "word_index" in data:
            translated = dict(data)
            translated["index"] = translated["word_index"]
            return Guess.from_dict(translated)
        return Guess.from_dict(data)
    if move_type == MoveType.END_TURN.value:
        return EndTurn()
    raise ValueError(f"Unknown Duet move type: {move_type!r}")
