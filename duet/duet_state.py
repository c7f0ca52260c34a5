"""State, enums and key-card records for Codenames Duet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from framework.state import State

from .duet_words import Theme

TOTAL_WORDS_IN_GRID = 25
TOTAL_UNIQUE_GREEN_AGENTS = 15
INITIAL_TIMER_TOKENS = 9


class CardType(str, Enum):
    """Identity of a card from one player's side of the key card."""

    GREEN = "GREEN"
    ASSASSIN = "ASSASSIN"
    BYSTANDER = "BYSTANDER"


class PlayerSide(str, Enum):
    """The two seats at the table."""

    HUMAN = "human"
    AI = "ai"

    @property
    def partner(self) -> "PlayerSide":
        return PlayerSide.AI if self is PlayerSide.HUMAN else PlayerSide.HUMAN

    @property
    def label(self) -> str:
        return "You" if self is PlayerSide.HUMAN else "AI"


class TurnOwner(str, Enum):
    """Whose clue the current turn belongs to."""

    HUMAN_CLUE = "human_clue"
    AI_CLUE = "ai_clue"

    @property
    def clue_giver(self) -> PlayerSide:
        return PlayerSide.HUMAN if self is TurnOwner.HUMAN_CLUE else PlayerSide.AI

    @property
    def guesser(self) -> PlayerSide:
        return self.clue_giver.partner

    @property
    def other(self) -> "TurnOwner":
        return TurnOwner.AI_CLUE if self is TurnOwner.HUMAN_CLUE else TurnOwner.HUMAN_CLUE

    @classmethod
    def for_clue_giver(cls, side: PlayerSide) -> "TurnOwner":
        return cls.HUMAN_CLUE if side is PlayerSide.HUMAN else cls.AI_CLUE


class RevealedState(str, Enum):
    """Display state of a grid position. Once non-hidden it never reverts."""

    HIDDEN = "hidden"
    GREEN = "green"
    BYSTANDER_HUMAN_TURN = "bystander_human_turn"
    BYSTANDER_AI_TURN = "bystander_ai_turn"
    ASSASSIN = "assassin"

    @classmethod
    def bystander_for(cls, guesser: PlayerSide) -> "RevealedState":
        return cls.BYSTANDER_HUMAN_TURN if guesser is PlayerSide.HUMAN else cls.BYSTANDER_AI_TURN


class Outcome(str, Enum):
    """Shared result of the cooperative game."""

    WIN = "win"
    LOSS = "loss"


class Ending(str, Enum):
    """Why the game ended."""

    ALL_AGENTS_CONTACTED = "all_agents_contacted"
    ASSASSIN = "assassin"
    OUT_OF_TIME = "out_of_time"
    SUDDEN_DEATH_MISS = "sudden_death_miss"
    SUDDEN_DEATH_DEADLOCK = "sudden_death_deadlock"


@dataclass(frozen=True)
class KeyCardEntry:
    """Card identity for one grid position, as seen from each side."""

    human: CardType
    ai: CardType

    def for_player(self, side: PlayerSide) -> CardType:
        """Return the card type from `side`'s half of the key card."""
        return self.human if side is PlayerSide.HUMAN else self.ai


@dataclass(frozen=True)
class Clue:
    """A one-word clue and the number of cards it points at."""

    word: str
    count: int


@dataclass(frozen=True)
class DuetState(State):
    """Immutable authoritative state of one Duet game."""

    seed: int | None
    theme: Theme
    grid_words: tuple[str, ...]
    key_card: tuple[KeyCardEntry, ...]
    revealed_states: tuple[RevealedState, ...]
    timer_tokens: int
    initial_timer_tokens: int
    current_turn: TurnOwner = TurnOwner.AI_CLUE
    active_clue: Clue | None = None
    guesses_made_for_clue: int = 0
    human_guessing_concluded: bool = False
    ai_in_flight: bool = False
    game_over: bool = False
    outcome: Outcome | None = None
    ending: Ending | None = None
    game_message: str = ""
    sudden_death: bool = False
    sudden_death_guesser: PlayerSide | None = None
    turn_index: int = 0
    last_move: dict[str, Any] | None = None

    def total_greens_found(self) -> int:
        """Count grid positions revealed as green."""
        return sum(1 for revealed in self.revealed_states if revealed is RevealedState.GREEN)

    def assassin_revealed(self) -> bool:
        return RevealedState.ASSASSIN in self.revealed_states

    def is_hidden(self, index: int) -> bool:
        return self.revealed_states[index] is RevealedState.HIDDEN

    def hidden_indices(self) -> tuple[int, ...]:
        return tuple(
            index for index, revealed in enumerate(self.revealed_states) if revealed is RevealedState.HIDDEN
        )

    def index_of(self, word: str) -> int | None:
        """Return the grid index of `word` (case-insensitive), or None."""
        target = word.strip().lower()
        for index, grid_word in enumerate(self.grid_words):
            if grid_word.lower() == target:
                return index
        return None
