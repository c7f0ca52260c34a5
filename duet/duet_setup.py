"""Word grid and dual key-card generation."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from .duet_state import (
    INITIAL_TIMER_TOKENS,
    TOTAL_WORDS_IN_GRID,
    CardType,
    DuetState,
    KeyCardEntry,
    RevealedState,
    TurnOwner,
)
from .duet_words import Theme, words_for_theme

T = TypeVar("T")

# (human, ai, count). Sums to 25 positions and 15 unique green agents.
KEY_CARD_DISTRIBUTION: tuple[tuple[CardType, CardType, int], ...] = (
    (CardType.GREEN, CardType.GREEN, 3),
    (CardType.GREEN, CardType.BYSTANDER, 5),
    (CardType.BYSTANDER, CardType.GREEN, 5),
    (CardType.ASSASSIN, CardType.ASSASSIN, 1),
    (CardType.ASSASSIN, CardType.GREEN, 1),
    (CardType.GREEN, CardType.ASSASSIN, 1),
    (CardType.ASSASSIN, CardType.BYSTANDER, 1),
    (CardType.BYSTANDER, CardType.ASSASSIN, 1),
    (CardType.BYSTANDER, CardType.BYSTANDER, 7),
)


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a Fisher-Yates shuffled copy of `items`."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def select_random_words(
    count: int,
    theme: Theme,
    rng: random.Random | None = None,
    *,
    word_list: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """Draw `count` distinct words for `theme` without replacement."""
    rng = rng or random.Random()
    source = word_list if word_list is not None else words_for_theme(theme)
    # Dedupe case-insensitively, keeping first spelling.
    seen: set[str] = set()
    candidates: list[str] = []
    for word in source:
        cleaned = str(word).strip()
        if cleaned and cleaned.lower() not in seen:
            seen.add(cleaned.lower())
            candidates.append(cleaned)
    if len(candidates) < count:
        raise ValueError(
            f"Word list for theme '{theme.value}' has {len(candidates)} distinct words; {count} required."
        )
    return tuple(rng.sample(candidates, count))


def generate_key_card_setup(rng: random.Random | None = None) -> tuple[KeyCardEntry, ...]:
    """Build the fixed key-card multiset and return a uniform random permutation of it."""
    rng = rng or random.Random()
    entries = [
        KeyCardEntry(human=human, ai=ai)
        for human, ai, count in KEY_CARD_DISTRIBUTION
        for _ in range(count)
    ]
    return tuple(shuffled(entries, rng))


def initialize_game_state(
    tokens: int = INITIAL_TIMER_TOKENS,
    theme: Theme = Theme.STANDARD,
    *,
    seed: int | None = None,
    word_list: Sequence[str] | None = None,
) -> DuetState:
    """Create a fresh game: AI opens with a clue, every card hidden."""
    if tokens < 1:
        raise ValueError("timer tokens must be >= 1.")
    rng = random.Random(seed)
    grid_words = select_random_words(TOTAL_WORDS_IN_GRID, theme, rng, word_list=word_list)
    key_card = generate_key_card_setup(rng)
    return DuetState(
        seed=seed,
        theme=theme,
        grid_words=grid_words,
        key_card=key_card,
        revealed_states=tuple(RevealedState.HIDDEN for _ in range(TOTAL_WORDS_IN_GRID)),
        timer_tokens=tokens,
        initial_timer_tokens=tokens,
        current_turn=TurnOwner.AI_CLUE,
        game_message="AI's turn to give a clue.",
    )
