"""Shared builders for Duet rule tests.

`build_state` lays the key card out in distribution order, so cell roles are fixed:

    0-2    green / green
    3-7    human green / AI bystander
    8-12   human bystander / AI green
    13     assassin / assassin
    14     human assassin / AI green
    15     human green / AI assassin
    16     human assassin / AI bystander
    17     human bystander / AI assassin
    18-24  bystander / bystander
"""

from __future__ import annotations

from typing import Any

import pytest

from duet.duet_setup import KEY_CARD_DISTRIBUTION
from duet.duet_state import DuetState, KeyCardEntry, RevealedState
from duet.duet_words import Theme

WORDS = (
    "apple", "bridge", "castle", "dragon", "eagle",
    "forest", "garden", "hammer", "island", "jungle",
    "knight", "lemon", "mirror", "needle", "ocean",
    "piano", "queen", "rocket", "shadow", "tiger",
    "umbrella", "violin", "whale", "yacht", "zebra",
)

HUMAN_GREENS = (0, 1, 2, 3, 4, 5, 6, 7, 15)
AI_GREENS = (0, 1, 2, 8, 9, 10, 11, 12, 14)


def build_state(revealed: dict[int, RevealedState] | None = None, **overrides: Any) -> DuetState:
    key_card = tuple(
        KeyCardEntry(human=human, ai=ai)
        for human, ai, count in KEY_CARD_DISTRIBUTION
        for _ in range(count)
    )
    states = [RevealedState.HIDDEN] * len(WORDS)
    for index, value in (revealed or {}).items():
        states[index] = value
    state = DuetState(
        seed=7,
        theme=Theme.STANDARD,
        grid_words=WORDS,
        key_card=key_card,
        revealed_states=tuple(states),
        timer_tokens=9,
        initial_timer_tokens=9,
    )
    return state.evolve(**overrides)


@pytest.fixture
def make_state():
    return build_state
