"""Tests for word selection, key-card generation and initial state."""

from __future__ import annotations

import random
from collections import Counter

import pytest

from duet.duet_game import DuetGame
from duet.duet_setup import (
    KEY_CARD_DISTRIBUTION,
    generate_key_card_setup,
    initialize_game_state,
    select_random_words,
    shuffled,
)
from duet.duet_state import CardType, PlayerSide, RevealedState, TurnOwner
from duet.duet_words import THEME_WORDS, Difficulty, Theme, parse_difficulty, parse_theme


def test_key_card_has_fifteen_unique_greens_and_three_assassins_per_side() -> None:
    for seed in range(20):
        key_card = generate_key_card_setup(random.Random(seed))
        assert len(key_card) == 25
        human_green = sum(1 for entry in key_card if entry.human is CardType.GREEN)
        ai_green = sum(1 for entry in key_card if entry.ai is CardType.GREEN)
        both_green = sum(1 for entry in key_card if entry.human is CardType.GREEN and entry.ai is CardType.GREEN)
        assert human_green + ai_green - both_green == 15
        assert human_green == 9
        assert ai_green == 9
        assert sum(1 for entry in key_card if entry.for_player(PlayerSide.HUMAN) is CardType.ASSASSIN) == 3
        assert sum(1 for entry in key_card if entry.for_player(PlayerSide.AI) is CardType.ASSASSIN) == 3


def test_key_card_is_a_permutation_of_the_fixed_distribution() -> None:
    expected = Counter({(human, ai): count for human, ai, count in KEY_CARD_DISTRIBUTION})
    key_card = generate_key_card_setup(random.Random(3))
    assert Counter((entry.human, entry.ai) for entry in key_card) == expected


def test_shuffled_does_not_mutate_input_and_keeps_items() -> None:
    items = list(range(10))
    result = shuffled(items, random.Random(1))
    assert items == list(range(10))
    assert sorted(result) == items


def test_seeded_initialization_is_reproducible() -> None:
    first = initialize_game_state(9, Theme.STANDARD, seed=42)
    second = initialize_game_state(9, Theme.STANDARD, seed=42)
    other = initialize_game_state(9, Theme.STANDARD, seed=43)

    assert first.grid_words == second.grid_words
    assert first.key_card == second.key_card
    assert (first.grid_words, first.key_card) != (other.grid_words, other.key_card)


def test_initial_state_has_ai_opening_and_everything_hidden() -> None:
    state = initialize_game_state(9, Theme.MARVEL, seed=5)

    assert state.current_turn is TurnOwner.AI_CLUE
    assert all(revealed is RevealedState.HIDDEN for revealed in state.revealed_states)
    assert state.timer_tokens == 9
    assert state.initial_timer_tokens == 9
    assert not state.game_over
    assert not state.sudden_death
    assert state.active_clue is None
    assert len({word.lower() for word in state.grid_words}) == 25
    assert set(state.grid_words) <= set(THEME_WORDS[Theme.MARVEL])


def test_initialize_rejects_non_positive_tokens() -> None:
    with pytest.raises(ValueError):
        initialize_game_state(0)


def test_select_random_words_dedupes_case_insensitively_and_checks_supply() -> None:
    words = select_random_words(3, Theme.STANDARD, random.Random(0), word_list=["Cat", "cat", "dog", "emu"])
    assert sorted(word.lower() for word in words) == ["cat", "dog", "emu"]

    with pytest.raises(ValueError, match="distinct words"):
        select_random_words(4, Theme.STANDARD, random.Random(0), word_list=["Cat", "cat", "dog", "emu"])


def test_every_theme_can_fill_a_grid() -> None:
    for theme in Theme:
        assert len({word.lower() for word in THEME_WORDS[theme]}) >= 25


def test_theme_and_difficulty_parsing() -> None:
    assert parse_theme(None) is Theme.STANDARD
    assert parse_theme("Star Wars") is Theme.STAR_WARS
    assert parse_theme("harry-potter") is Theme.HARRY_POTTER
    assert parse_difficulty("HARD") is Difficulty.HARD
    with pytest.raises(ValueError, match="Supported themes"):
        parse_theme("pokemon")
    with pytest.raises(ValueError):
        parse_difficulty("nightmare")


def test_difficulty_sets_tokens_unless_overridden() -> None:
    game = DuetGame()
    assert game.new_game(1, {"difficulty": "easy"}).timer_tokens == 11
    assert game.new_game(1, {"difficulty": "hard"}).timer_tokens == 7
    assert game.new_game(1, {}).timer_tokens == 9
    assert game.new_game(1, {"difficulty": "hard", "timer_tokens": 4}).timer_tokens == 4
