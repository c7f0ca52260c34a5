"""Driving-loop tests: AI clue and guess requests, busy gating, reset and finalization."""

from __future__ import annotations

import asyncio
import threading

import pytest

from duet.duet_adapter import ClueResponse, GuessResponse
from duet.duet_agents import ScriptedDuetAgent
from duet.duet_state import Clue, PlayerSide, RevealedState, TurnOwner
from framework.errors import ConfigurationError
from server.session import DuetSession


def _clue(word: str, count: int):
    return lambda request: ClueResponse(clue_word=word, clue_number=count, reasoning="scripted")


def _guesses(*words: str):
    return lambda request: GuessResponse(guessed_words=list(words), reasoning="scripted")


def _raise(exc: Exception):
    def policy(request):  # noqa: ANN001
        raise exc

    return policy


def _session(make_state, *, clue_policy=None, guess_policy=None, **state_overrides) -> DuetSession:
    agent = ScriptedDuetAgent("scripted-ai", clue_policy=clue_policy, guess_policy=guess_policy)
    session = DuetSession.create(
        seed=7,
        theme="standard",
        difficulty="standard",
        agent=agent,
        agent_config={"provider": "scripted"},
        guess_pacing_sec=0,
    )
    session.state = make_state(**state_overrides)
    return session


def _event_types(session: DuetSession) -> list[str]:
    return [event["event_type"] for event in session.event_dicts()]


def _ai_guessing(make_state, count: int = 2, **kwargs) -> DuetSession:
    return _session(make_state, current_turn=TurnOwner.HUMAN_CLUE, active_clue=Clue("wings", count), **kwargs)


def test_advance_runs_ai_opening_clue_then_waits_for_human(make_state) -> None:
    session = _session(make_state, clue_policy=_clue("fruit", 2))

    view = asyncio.run(session.advance())

    assert view["active_clue"] == {"word": "fruit", "count": 2}
    assert view["current_player"] == "human"
    assert view["ai_in_flight"] is False
    assert _event_types(session) == ["game_start", "clue"]
    assert session.event_dicts()[-1]["payload"]["reasoning"] == "scripted"
    assert session.agent.clue_requests[0].green_words[0] == "apple"


def test_clue_failure_installs_error_clue(make_state) -> None:
    session = _session(make_state, clue_policy=_raise(RuntimeError("provider down")))

    outcome = asyncio.run(session.request_ai_clue())

    assert outcome["applied"]
    assert session.state.active_clue == Clue("error", 0)
    assert not session.state.ai_in_flight
    assert _event_types(session)[-2:] == ["agent_error", "clue"]
    assert session.event_dicts()[-2]["payload"]["error"] == "provider down"


def test_board_word_clue_falls_back_to_error_clue(make_state) -> None:
    session = _session(make_state, clue_policy=_clue("Ocean", 1))

    asyncio.run(session.request_ai_clue())

    assert session.state.active_clue == Clue("error", 0)


def test_configuration_error_propagates_and_clears_busy_flag(make_state) -> None:
    session = _session(make_state, clue_policy=_raise(ConfigurationError("Missing API key")))

    with pytest.raises(ConfigurationError):
        asyncio.run(session.request_ai_clue())

    assert not session.state.ai_in_flight
    assert session.state.active_clue is None
    assert session.configuration_error == "Missing API key"
    assert session.view()["configuration_error"] == "Missing API key"
    assert _event_types(session)[-1] == "configuration_error"


def test_ai_without_greens_passes_clue_turn_for_free(make_state) -> None:
    found = {index: RevealedState.GREEN for index in (0, 1, 2, 8, 9, 10, 11, 12, 14)}
    session = _session(make_state, revealed=found, clue_policy=_clue("fruit", 1))

    asyncio.run(session.request_ai_clue())

    assert session.state.current_turn is TurnOwner.HUMAN_CLUE
    assert session.state.timer_tokens == 9
    assert session.agent.clue_requests == []


def test_ai_guesses_stop_at_first_bystander(make_state) -> None:
    session = _ai_guessing(make_state, guess_policy=_guesses("dragon", "shadow", "eagle"))

    outcome = asyncio.run(session.request_ai_guesses())

    assert outcome["applied"]
    assert outcome["view"]["ai_in_flight"] is False
    state = session.state
    assert state.revealed_states[3] is RevealedState.GREEN
    assert state.revealed_states[18] is RevealedState.BYSTANDER_AI_TURN
    assert state.is_hidden(4)
    assert state.timer_tokens == 8
    assert state.current_turn is TurnOwner.AI_CLUE
    assert _event_types(session).count("reveal") == 2


def test_ai_guesses_stop_at_cap_without_token(make_state) -> None:
    session = _ai_guessing(make_state, count=1, guess_policy=_guesses("dragon", "eagle", "forest"))

    asyncio.run(session.request_ai_guesses())

    assert session.state.is_hidden(5)
    assert session.state.timer_tokens == 9
    assert session.state.current_turn is TurnOwner.AI_CLUE


def test_ai_ends_turn_with_token_when_list_runs_out(make_state) -> None:
    session = _ai_guessing(make_state, count=3, guess_policy=_guesses("dragon", "Dragon", "not-on-board"))

    outcome = asyncio.run(session.request_ai_guesses())

    assert outcome["turn_ended"]
    assert session.state.revealed_states[3] is RevealedState.GREEN
    assert session.state.timer_tokens == 8
    assert session.state.current_turn is TurnOwner.AI_CLUE
    assert _event_types(session)[-2:] == ["reveal", "turn_end"]


def test_empty_guess_list_is_a_pass(make_state) -> None:
    session = _ai_guessing(make_state, guess_policy=_guesses())

    asyncio.run(session.request_ai_guesses())

    assert session.state.timer_tokens == 8
    assert session.state.current_turn is TurnOwner.AI_CLUE
    assert session.event_dicts()[-1]["payload"]["reasoning"] == "scripted"


def test_guess_failure_is_a_pass(make_state) -> None:
    session = _ai_guessing(make_state, guess_policy=_raise(ValueError("bad json")))

    asyncio.run(session.request_ai_guesses())

    assert session.state.timer_tokens == 8
    assert not session.state.ai_in_flight
    assert _event_types(session)[-2:] == ["agent_error", "turn_end"]


def test_sudden_death_guess_is_truncated_to_one_word(make_state) -> None:
    session = _session(
        make_state,
        guess_policy=_guesses("dragon", "eagle"),
        timer_tokens=0,
        sudden_death=True,
        sudden_death_guesser=PlayerSide.AI,
    )

    asyncio.run(session.advance())

    assert session.agent.guess_requests[0].is_sudden_death
    assert session.state.revealed_states[3] is RevealedState.GREEN
    assert session.state.is_hidden(4)
    assert session.state.sudden_death_guesser is PlayerSide.HUMAN
    assert _event_types(session).count("reveal") == 1


def _blocking_guess_policy(release: threading.Event, *words: str):
    def policy(request):  # noqa: ANN001
        release.wait(timeout=5)
        return GuessResponse(guessed_words=list(words))

    return policy


def test_human_actions_and_duplicate_requests_rejected_while_ai_thinks(make_state) -> None:
    release = threading.Event()
    session = _ai_guessing(make_state, guess_policy=_blocking_guess_policy(release, "dragon"))

    async def scenario():
        task = asyncio.create_task(session.request_ai_guesses())
        while not session.state.ai_in_flight:
            await asyncio.sleep(0)
        human = session.reveal(4)
        duplicate = await session.request_ai_guesses()
        release.set()
        return human, duplicate, await task

    human, duplicate, first = asyncio.run(scenario())

    assert not human["applied"]
    assert "Wait for the AI" in human["message"]
    assert not duplicate["applied"]
    assert "already thinking" in duplicate["message"]
    assert first["applied"]
    assert session.state.revealed_states[3] is RevealedState.GREEN
    assert not session.state.ai_in_flight
    assert len(session.agent.guess_requests) == 1


def test_reset_discards_outstanding_ai_reply(make_state) -> None:
    release = threading.Event()
    session = _ai_guessing(make_state, guess_policy=_blocking_guess_policy(release, "dragon"))

    async def scenario():
        task = asyncio.create_task(session.request_ai_guesses())
        while not session.state.ai_in_flight:
            await asyncio.sleep(0)
        session.reset(theme="marvel")
        release.set()
        return await task

    outcome = asyncio.run(scenario())

    assert not outcome["applied"]
    assert "reset" in outcome["message"]
    assert session.state.theme.value == "marvel"
    assert all(revealed is RevealedState.HIDDEN for revealed in session.state.revealed_states)
    assert not session.state.ai_in_flight
    assert _event_types(session) == ["game_start"]


def test_reset_with_difficulty_changes_tokens(make_state) -> None:
    session = _session(make_state)

    view = session.reset(difficulty="hard")

    assert view["timer_tokens"] == 7
    assert view["difficulty"] == "hard"
    assert view["game_over"] is False


def test_view_shows_only_the_human_key_column(make_state) -> None:
    view = _session(make_state).view()

    assert set(view["board"][0]) == {"index", "word", "revealed", "key"}
    assert view["board"][14]["key"] == "ASSASSIN"
    assert view["board"][15]["key"] == "GREEN"
    assert view["human_greens_left"] == 9
    assert view["ai_greens_left"] == 9
    assert view["guesses_left"] == 0


def test_human_clue_and_end_turn(make_state) -> None:
    session = _session(make_state, current_turn=TurnOwner.HUMAN_CLUE)

    rejected = session.end_turn()
    assert not rejected["applied"]

    clue = session.submit_clue("wings", 2)
    assert clue["applied"]
    assert clue["view"]["active_clue"] == {"word": "wings", "count": 2}
    assert _event_types(session)[-2:] == ["rejected", "clue"]


def test_assassin_finalizes_game_once(make_state) -> None:
    session = _session(make_state, current_turn=TurnOwner.AI_CLUE, active_clue=Clue("fruit", 2))

    outcome = session.reveal(15)

    assert outcome["view"]["game_over"]
    assert outcome["view"]["outcome"] == "loss"
    assert session.result is not None
    assert session.result.termination_reason == "assassin"
    assert session.result.event_count == len(session.events)
    assert _event_types(session)[-2:] == ["reveal", "terminal"]

    again = session.reveal(0)
    assert not again["applied"]
    assert _event_types(session).count("terminal") == 1
