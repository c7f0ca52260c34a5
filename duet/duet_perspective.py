"""Projection of the shared key card onto one player's view."""

from __future__ import annotations

from collections.abc import Sequence

from .duet_state import CardType, DuetState, KeyCardEntry, PlayerSide, RevealedState


def get_perspective(key_card: Sequence[KeyCardEntry], player: PlayerSide) -> tuple[CardType, ...]:
    """Return every position's card type as `player` sees it."""
    return tuple(entry.for_player(player) for entry in key_card)


def count_remaining_greens(perspective: Sequence[CardType], revealed_states: Sequence[RevealedState]) -> int:
    """Count positions that are green in `perspective` and still hidden."""
    return sum(
        1
        for card_type, revealed in zip(perspective, revealed_states, strict=True)
        if card_type is CardType.GREEN and revealed is RevealedState.HIDDEN
    )


def remaining_greens_for(state: DuetState, side: PlayerSide) -> int:
    """Hidden greens on `side`'s own half of the key card."""
    return count_remaining_greens(get_perspective(state.key_card, side), state.revealed_states)


def remaining_targets_for(state: DuetState, guesser: PlayerSide) -> int:
    """Hidden greens a guesser can still find, i.e. those on the partner's half."""
    return remaining_greens_for(state, guesser.partner)


def hidden_words_of_type(state: DuetState, side: PlayerSide, card_type: CardType) -> list[str]:
    """Words still hidden that are `card_type` from `side`'s perspective."""
    perspective = get_perspective(state.key_card, side)
    return [
        word
        for word, seen_as, revealed in zip(state.grid_words, perspective, state.revealed_states, strict=True)
        if seen_as is card_type and revealed is RevealedState.HIDDEN
    ]


def revealed_words(state: DuetState) -> list[str]:
    return [
        word
        for word, revealed in zip(state.grid_words, state.revealed_states, strict=True)
        if revealed is not RevealedState.HIDDEN
    ]
