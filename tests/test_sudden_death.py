"""Sudden Death entry, reveal resolution and guesser arbitration."""

from __future__ import annotations

from duet.duet_engine import end_turn, next_sudden_death_guesser, pass_turn, reveal_card, submit_clue
from duet.duet_state import Clue, Ending, Outcome, PlayerSide, RevealedState, TurnOwner

ALL_HUMAN_GREENS_FOUND = {index: RevealedState.GREEN for index in (0, 1, 2, 3, 4, 5, 6, 7, 15)}
ALL_AI_GREENS_FOUND = {index: RevealedState.GREEN for index in (0, 1, 2, 8, 9, 10, 11, 12, 14)}


def _sudden_death(make_state, guesser: PlayerSide, revealed=None):
    return make_state(
        revealed=revealed,
        timer_tokens=0,
        sudden_death=True,
        sudden_death_guesser=guesser,
    )


def test_last_token_enters_sudden_death(make_state) -> None:
    state = make_state(current_turn=TurnOwner.AI_CLUE, active_clue=Clue("fruit", 2), timer_tokens=1)
    result = end_turn(state, use_token=True, actor=PlayerSide.HUMAN)

    assert result.state.sudden_death
    assert result.state.timer_tokens == 0
    assert not result.state.game_over
    assert result.state.active_clue is None
    # The AI's clue turn ended, so the human reveals first.
    assert result.state.sudden_death_guesser is PlayerSide.HUMAN


def test_bystander_on_last_token_enters_sudden_death(make_state) -> None:
    state = make_state(current_turn=TurnOwner.HUMAN_CLUE, active_clue=Clue("wings", 2), timer_tokens=1)
    result = reveal_card(state, 20, PlayerSide.AI)

    assert result.state.sudden_death
    assert result.state.timer_tokens == 0
    assert result.state.revealed_states[20] is RevealedState.BYSTANDER_AI_TURN
    # The human's clue turn ended, so the AI reveals first.
    assert result.state.sudden_death_guesser is PlayerSide.AI


def test_entry_falls_back_to_same_side_when_partner_has_no_targets(make_state) -> None:
    # Every AI green is found, so the human has nothing left to find.
    state = make_state(
        revealed=ALL_AI_GREENS_FOUND,
        current_turn=TurnOwner.AI_CLUE,
        active_clue=Clue("fruit", 2),
        timer_tokens=1,
    )
    result = end_turn(state, use_token=True, actor=PlayerSide.HUMAN)

    assert result.state.sudden_death
    assert result.state.sudden_death_guesser is PlayerSide.AI


def test_arbitration_prefers_partner_then_same_side_then_deadlock(make_state) -> None:
    state = make_state()
    assert next_sudden_death_guesser(state, PlayerSide.HUMAN) is PlayerSide.AI
    assert next_sudden_death_guesser(state, PlayerSide.AI) is PlayerSide.HUMAN
    assert next_sudden_death_guesser(state, None) is PlayerSide.HUMAN

    human_done = make_state(revealed=ALL_HUMAN_GREENS_FOUND)
    assert next_sudden_death_guesser(human_done, PlayerSide.HUMAN) is PlayerSide.HUMAN

    ai_greens = {index: RevealedState.GREEN for index in (8, 9, 10, 11, 12, 14)}
    nothing_left = make_state(revealed={**ALL_HUMAN_GREENS_FOUND, **ai_greens})
    assert next_sudden_death_guesser(nothing_left, PlayerSide.AI) is None


def test_own_assassin_loses_even_if_green_for_partner(make_state) -> None:
    # Cell 14: assassin for the human, green for the AI.
    state = _sudden_death(make_state, PlayerSide.HUMAN)
    result = reveal_card(state, 14, PlayerSide.HUMAN)

    assert result.state.game_over
    assert result.state.outcome is Outcome.LOSS
    assert result.state.ending is Ending.ASSASSIN
    assert result.state.revealed_states[14] is RevealedState.ASSASSIN
    assert "own assassin" in result.state.game_message


def test_partner_assassin_loses(make_state) -> None:
    # Cell 17: bystander for the human, assassin for the AI.
    result = reveal_card(_sudden_death(make_state, PlayerSide.HUMAN), 17, PlayerSide.HUMAN)

    assert result.state.ending is Ending.ASSASSIN
    assert result.state.revealed_states[17] is RevealedState.ASSASSIN


def test_partner_bystander_loses(make_state) -> None:
    # Cell 3: green for the human, bystander for the AI.
    result = reveal_card(_sudden_death(make_state, PlayerSide.HUMAN), 3, PlayerSide.HUMAN)

    assert result.state.game_over
    assert result.state.ending is Ending.SUDDEN_DEATH_MISS
    assert result.state.revealed_states[3] is RevealedState.BYSTANDER_HUMAN_TURN


def test_partner_green_hands_off_to_partner(make_state) -> None:
    result = reveal_card(_sudden_death(make_state, PlayerSide.HUMAN), 8, PlayerSide.HUMAN)

    assert not result.state.game_over
    assert result.state.revealed_states[8] is RevealedState.GREEN
    assert result.state.sudden_death_guesser is PlayerSide.AI
    assert result.state.timer_tokens == 0


def test_partner_green_with_partner_done_keeps_same_guesser(make_state) -> None:
    state = _sudden_death(make_state, PlayerSide.HUMAN, revealed=ALL_HUMAN_GREENS_FOUND)
    result = reveal_card(state, 8, PlayerSide.HUMAN)

    assert result.state.sudden_death_guesser is PlayerSide.HUMAN


def test_last_green_wins_over_deadlock(make_state) -> None:
    revealed = {**ALL_HUMAN_GREENS_FOUND, **{index: RevealedState.GREEN for index in (9, 10, 11, 12, 14)}}
    result = reveal_card(_sudden_death(make_state, PlayerSide.HUMAN, revealed=revealed), 8, PlayerSide.HUMAN)

    assert result.state.game_over
    assert result.state.outcome is Outcome.WIN


def test_deadlock_when_remaining_greens_are_unreachable(make_state) -> None:
    # Cell 3's human green was burned as a bystander, so 15 can never be reached.
    revealed = {
        **ALL_HUMAN_GREENS_FOUND,
        3: RevealedState.BYSTANDER_HUMAN_TURN,
        **{index: RevealedState.GREEN for index in (9, 10, 11, 12, 14)},
    }
    result = reveal_card(_sudden_death(make_state, PlayerSide.HUMAN, revealed=revealed), 8, PlayerSide.HUMAN)

    assert result.state.game_over
    assert result.state.outcome is Outcome.LOSS
    assert result.state.ending is Ending.SUDDEN_DEATH_DEADLOCK


def test_out_of_turn_reveal_and_turn_operations_rejected(make_state) -> None:
    state = _sudden_death(make_state, PlayerSide.HUMAN)

    assert not reveal_card(state, 8, PlayerSide.AI).applied
    assert not end_turn(state).applied
    assert not submit_clue(state, PlayerSide.AI, "fort", 1).applied


def test_pass_in_sudden_death_hands_off_or_deadlocks(make_state) -> None:
    handed = pass_turn(_sudden_death(make_state, PlayerSide.AI), PlayerSide.AI)
    assert handed.applied
    assert handed.state.sudden_death_guesser is PlayerSide.HUMAN
    assert not handed.state.game_over

    stuck = pass_turn(_sudden_death(make_state, PlayerSide.AI, revealed=ALL_HUMAN_GREENS_FOUND), PlayerSide.HUMAN)
    assert not stuck.applied

    # The AI passes and the human has no AI greens left to find.
    ai_greens_found = {index: RevealedState.GREEN for index in (0, 1, 2, 8, 9, 10, 11, 12, 14)}
    ended = pass_turn(_sudden_death(make_state, PlayerSide.AI, revealed=ai_greens_found), PlayerSide.AI)
    assert ended.state.game_over
    assert ended.state.ending is Ending.SUDDEN_DEATH_DEADLOCK
