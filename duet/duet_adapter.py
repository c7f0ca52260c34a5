"""Request/response contract between the driving loop and an AI clue/guess source.

Payloads use the camelCase field names of the JSON the model is asked to
produce. Responses are untrusted: `sanitize_guesses` and `validate_clue`
re-check them against the live state before anything reaches the engine.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .duet_engine import clue_conflict
from .duet_perspective import hidden_words_of_type, remaining_greens_for, revealed_words
from .duet_state import TOTAL_WORDS_IN_GRID, CardType, Clue, DuetState, PlayerSide
from .duet_words import Theme

SUDDEN_DEATH_CLUE = "FIND_GREEN_AGENT_SUDDEN_DEATH"


class _AdapterModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ClueRequest(_AdapterModel):
    """What the AI clue giver sees."""

    grid: list[str] = Field(min_length=TOTAL_WORDS_IN_GRID, max_length=TOTAL_WORDS_IN_GRID)
    green_words: list[str] = Field(alias="greenWords")
    assassin_words: list[str] = Field(alias="assassinWords")
    timer_tokens: int = Field(alias="timerTokens", ge=0)
    theme: Theme = Theme.STANDARD

    @field_validator("grid")
    @classmethod
    def _distinct_grid(cls, value: list[str]) -> list[str]:
        if len({word.lower() for word in value}) != len(value):
            raise ValueError("grid words must be distinct")
        return value


class ClueResponse(_AdapterModel):
    clue_word: str = Field(alias="clueWord", min_length=1)
    clue_number: int = Field(alias="clueNumber", ge=0)
    reasoning: str | None = None

    @field_validator("clue_word")
    @classmethod
    def _single_word(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("clueWord must be non-empty")
        if len(value.split()) > 1:
            raise ValueError("clueWord must be a single word")
        return value


class GuessRequest(_AdapterModel):
    """What the AI guesser sees, for a partner's clue or a Sudden Death pick."""

    clue_word: str = Field(alias="clueWord")
    clue_number: int = Field(alias="clueNumber", ge=0)
    grid_words: list[str] = Field(
        alias="gridWords", min_length=TOTAL_WORDS_IN_GRID, max_length=TOTAL_WORDS_IN_GRID
    )
    ai_green_words: list[str] = Field(alias="aiGreenWords")
    ai_assassin_words: list[str] = Field(alias="aiAssassinWords")
    revealed_words: list[str] = Field(alias="revealedWords")
    theme: Theme = Theme.STANDARD

    @property
    def is_sudden_death(self) -> bool:
        return self.clue_word == SUDDEN_DEATH_CLUE


class GuessResponse(_AdapterModel):
    guessed_words: list[str] = Field(alias="guessedWords", default_factory=list)
    reasoning: str | None = None

    @field_validator("guessed_words", mode="before")
    @classmethod
    def _coerce_words(cls, value: object) -> object:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


def build_clue_request(state: DuetState, side: PlayerSide = PlayerSide.AI) -> ClueRequest:
    """Clue inputs from `side`'s own key-card half, hidden cards only."""
    return ClueRequest(
        grid=list(state.grid_words),
        green_words=hidden_words_of_type(state, side, CardType.GREEN),
        assassin_words=hidden_words_of_type(state, side, CardType.ASSASSIN),
        timer_tokens=state.timer_tokens,
        theme=state.theme,
    )


def build_guess_request(state: DuetState, side: PlayerSide = PlayerSide.AI) -> GuessRequest:
    """Guess inputs for `side`; the sentinel clue marks a Sudden Death pick."""
    if state.sudden_death or state.active_clue is None:
        clue = Clue(word=SUDDEN_DEATH_CLUE, count=1)
    else:
        clue = state.active_clue
    return GuessRequest(
        clue_word=clue.word,
        clue_number=clue.count,
        grid_words=list(state.grid_words),
        ai_green_words=hidden_words_of_type(state, side, CardType.GREEN),
        ai_assassin_words=hidden_words_of_type(state, side, CardType.ASSASSIN),
        revealed_words=revealed_words(state),
        theme=state.theme,
    )


def sanitize_guesses(response: GuessResponse, state: DuetState) -> list[str]:
    """Keep hidden grid words only, in order, once each; one word in Sudden Death.

    Returned words use the grid's own spelling.
    """
    cleaned: list[str] = []
    seen: set[int] = set()
    for raw in response.guessed_words:
        if not isinstance(raw, str):
            continue
        index = state.index_of(raw)
        if index is None or index in seen or not state.is_hidden(index):
            continue
        seen.add(index)
        cleaned.append(state.grid_words[index])
    if state.sudden_death:
        return cleaned[:1]
    return cleaned


def validate_clue(response: ClueResponse, state: DuetState, side: PlayerSide = PlayerSide.AI) -> Clue:
    """Turn a clue response into a `Clue`, raising ValueError when it may not be played.

    The count is capped at the giver's hidden greens.
    """
    conflict = clue_conflict(response.clue_word, state.grid_words, check_components=True)
    if conflict is not None:
        raise ValueError(conflict)
    remaining = remaining_greens_for(state, side)
    return Clue(word=response.clue_word, count=min(response.clue_number, remaining))
