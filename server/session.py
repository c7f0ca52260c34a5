"""In-memory game sessions: the driving loop between the human, the engine and the AI partner."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from duet.duet_adapter import build_clue_request, build_guess_request, sanitize_guesses, validate_clue
from duet.duet_agents import DuetAgent
from duet.duet_engine import (
    EngineResult,
    apply_error_clue,
    begin_ai_request,
    end_turn,
    finish_ai_request,
    guesses_left,
    pass_clue_turn,
    pass_turn,
    reveal_card,
    submit_clue,
)
from duet.duet_game import DuetGame
from duet.duet_perspective import get_perspective, remaining_greens_for
from duet.duet_state import DuetState, PlayerSide, TurnOwner
from duet.duet_words import Difficulty, Theme, parse_difficulty, parse_theme
from framework.errors import ConfigurationError
from framework.events import EventType, GameEvent
from framework.result import MatchResult
from framework.serialize import to_serializable
from server.agent_factory import agent_label, create_agent, normalize_agent_config
from server.config import DEFAULT_GUESS_PACING_SEC, Settings

logger = logging.getLogger(__name__)


def time_based_seed() -> int:
    """Generate a positive time-derived seed when the client does not provide one."""
    seed = int(time.time_ns() & 0x7FFFFFFF)
    return seed if seed != 0 else 1


def _agent_prompt_context(agent: Any) -> dict[str, Any] | None:
    if not hasattr(agent, "debug_context") or not callable(agent.debug_context):
        return None
    context = agent.debug_context()
    if context is None:
        return None
    return to_serializable(context)


def _agent_response_payload(prompt_context: dict[str, Any] | None) -> dict[str, Any]:
    """Extract compact model-response diagnostics from agent prompt context."""
    if not isinstance(prompt_context, dict):
        return {}
    raw_responses = prompt_context.get("raw_responses")
    if not isinstance(raw_responses, list) or not raw_responses:
        return {}
    last_response = raw_responses[-1]
    return {
        "model_response": last_response if isinstance(last_response, str) else str(last_response),
        "model_response_history": raw_responses,
    }


def _event_type_for(result: EngineResult, default: EventType) -> EventType:
    if result.revealed_index is not None:
        return EventType.REVEAL
    return default


@dataclass
class DuetSession:
    """Single human-vs-AI game. Owns the only authoritative `DuetState`."""

    game_id: str
    game: DuetGame
    state: DuetState
    agent: DuetAgent
    agent_config: dict[str, Any]
    seed: int
    difficulty: Difficulty
    timer_tokens: int | None = None
    guess_pacing_sec: float = DEFAULT_GUESS_PACING_SEC
    events: list[GameEvent] = field(default_factory=list)
    result: MatchResult | None = None
    configuration_error: str | None = None
    _generation: int = 0

    @classmethod
    def create(
        cls,
        *,
        seed: int | None,
        theme: Theme | str | None,
        difficulty: Difficulty | str | None,
        agent: DuetAgent,
        agent_config: dict[str, Any] | None = None,
        timer_tokens: int | None = None,
        guess_pacing_sec: float = DEFAULT_GUESS_PACING_SEC,
        game_id: str | None = None,
    ) -> "DuetSession":
        game = DuetGame()
        resolved_seed = seed if seed is not None else time_based_seed()
        resolved_difficulty = parse_difficulty(difficulty)
        state = game.new_game(
            resolved_seed,
            {"theme": parse_theme(theme), "difficulty": resolved_difficulty, "timer_tokens": timer_tokens},
        )
        session = cls(
            game_id=game_id or f"duet-{uuid4().hex[:10]}",
            game=game,
            state=state,
            agent=agent,
            agent_config=dict(agent_config or {}),
            seed=resolved_seed,
            difficulty=resolved_difficulty,
            timer_tokens=timer_tokens,
            guess_pacing_sec=guess_pacing_sec,
        )
        session._start()
        return session

    def _start(self) -> None:
        self.agent.reset(self.game_id, self.seed, {"theme": self.state.theme.value})
        self._record(
            EventType.GAME_START,
            {
                "seed": self.seed,
                "theme": self.state.theme.value,
                "difficulty": self.difficulty.value,
                "timer_tokens": self.state.timer_tokens,
                "agent": agent_label(self.agent_config),
            },
        )
        logger.info(
            "Game %s started: theme=%s difficulty=%s tokens=%d",
            self.game_id,
            self.state.theme.value,
            self.difficulty.value,
            self.state.timer_tokens,
        )

    def reset(self, theme: Theme | str | None = None, difficulty: Difficulty | str | None = None) -> dict[str, Any]:
        """Start a fresh game in this session; an outstanding AI reply is discarded."""
        resolved_theme = parse_theme(theme) if theme is not None else self.state.theme
        if difficulty is not None:
            self.difficulty = parse_difficulty(difficulty)
            self.timer_tokens = None
        self.seed = time_based_seed()
        self.state = self.game.new_game(
            self.seed,
            {"theme": resolved_theme, "difficulty": self.difficulty, "timer_tokens": self.timer_tokens},
        )
        self._generation += 1
        self.events = []
        self.result = None
        self.configuration_error = None
        self._start()
        return self.view()

    # Human actions

    def submit_clue(self, word: str, count: int) -> dict[str, Any]:
        return self._commit(submit_clue(self.state, PlayerSide.HUMAN, word, count), PlayerSide.HUMAN, EventType.CLUE)

    def reveal(self, index: int) -> dict[str, Any]:
        return self._commit(reveal_card(self.state, index, PlayerSide.HUMAN), PlayerSide.HUMAN, EventType.REVEAL)

    def end_turn(self) -> dict[str, Any]:
        """Human stops guessing; spends a timer token."""
        state = self.state
        if state.active_clue is None or state.current_turn.guesser is not PlayerSide.HUMAN:
            result = EngineResult(state=state, applied=False, message="You can only end a turn while guessing.")
        else:
            result = end_turn(state, use_token=True, actor=PlayerSide.HUMAN)
        return self._commit(result, PlayerSide.HUMAN, EventType.TURN_END)

    # AI actions

    def ai_should_give_clue(self) -> bool:
        state = self.state
        return (
            not state.game_over
            and not state.sudden_death
            and state.current_turn is TurnOwner.AI_CLUE
            and state.active_clue is None
        )

    def ai_should_guess(self) -> bool:
        state = self.state
        if state.game_over:
            return False
        if state.sudden_death:
            return state.sudden_death_guesser is PlayerSide.AI
        return state.active_clue is not None and state.current_turn.guesser is PlayerSide.AI

    async def request_ai_clue(self) -> dict[str, Any]:
        """Ask the AI for a clue and apply it; failures install the error clue."""
        if not self.ai_should_give_clue():
            return self._commit(
                EngineResult(state=self.state, applied=False, message="It is not the AI's turn to give a clue."),
                PlayerSide.AI,
                EventType.CLUE,
            )
        started = begin_ai_request(self.state)
        if not started.applied:
            return self._commit(started, PlayerSide.AI, EventType.CLUE)
        self.state = started.state
        generation = self._generation

        if remaining_greens_for(self.state, PlayerSide.AI) == 0:
            self.state = finish_ai_request(self.state)
            return self._commit(pass_clue_turn(self.state, PlayerSide.AI), PlayerSide.AI, EventType.TURN_END)

        request = build_clue_request(self.state)
        try:
            response = await asyncio.to_thread(self.agent.give_clue, request)
            clue = validate_clue(response, self.state)
        except ConfigurationError as exc:
            self._configuration_failure(generation, exc)
            raise
        except Exception as exc:
            if generation != self._generation:
                return self._stale_reply()
            self.state = finish_ai_request(self.state)
            self._agent_failure("clue", exc)
            return self._commit(apply_error_clue(self.state), PlayerSide.AI, EventType.CLUE)

        if generation != self._generation:
            return self._stale_reply()
        self.state = finish_ai_request(self.state)
        result = submit_clue(self.state, PlayerSide.AI, clue.word, clue.count)
        if not result.applied:
            self._agent_failure("clue", ValueError(result.message))
            result = apply_error_clue(self.state)
        payload_extra = {"reasoning": response.reasoning} if response.reasoning else {}
        return self._commit(result, PlayerSide.AI, EventType.CLUE, **payload_extra)

    async def request_ai_guesses(self) -> dict[str, Any]:
        """Ask the AI for guesses and reveal them in order, pausing between reveals.

        The batch stops at the first reveal that ends the turn or the game. When
        the list runs out first, the AI stops guessing and a token is spent.
        """
        if not self.ai_should_guess():
            return self._commit(
                EngineResult(state=self.state, applied=False, message="It is not the AI's turn to guess."),
                PlayerSide.AI,
                EventType.REVEAL,
            )
        started = begin_ai_request(self.state)
        if not started.applied:
            return self._commit(started, PlayerSide.AI, EventType.REVEAL)
        self.state = started.state
        generation = self._generation

        request = build_guess_request(self.state)
        try:
            response = await asyncio.to_thread(self.agent.guess, request)
        except ConfigurationError as exc:
            self._configuration_failure(generation, exc)
            raise
        except Exception as exc:
            if generation != self._generation:
                return self._stale_reply()
            self.state = finish_ai_request(self.state)
            self._agent_failure("guess", exc)
            return self._commit(pass_turn(self.state, PlayerSide.AI), PlayerSide.AI, EventType.TURN_END)

        if generation != self._generation:
            return self._stale_reply()
        words = sanitize_guesses(response, self.state)
        logger.info("Game %s: AI guesses %s", self.game_id, words)
        if not words:
            self.state = finish_ai_request(self.state)
            return self._commit(
                pass_turn(self.state, PlayerSide.AI),
                PlayerSide.AI,
                EventType.TURN_END,
                reasoning=response.reasoning,
            )

        outcome: dict[str, Any] | None = None
        turn_over = False
        for position, word in enumerate(words):
            if position > 0 and self.guess_pacing_sec > 0:
                await asyncio.sleep(self.guess_pacing_sec)
                if generation != self._generation:
                    return self._stale_reply()
            index = self.state.index_of(word)
            if index is None or not self.state.is_hidden(index):
                continue
            result = reveal_card(self.state, index, PlayerSide.AI)
            outcome = self._commit(result, PlayerSide.AI, EventType.REVEAL)
            if result.turn_ended or self.state.game_over:
                turn_over = True
                break

        self.state = finish_ai_request(self.state)
        if not turn_over and not self.state.game_over:
            outcome = self._commit(end_turn(self.state, use_token=True, actor=PlayerSide.AI), PlayerSide.AI, EventType.TURN_END)
        if outcome is None:
            return self._action_payload(EngineResult(state=self.state, applied=False, message=self.state.game_message))
        outcome["view"] = self.view()
        return outcome

    async def advance(self) -> dict[str, Any]:
        """Run AI actions until the human has something to do or the game ends."""
        while not self.state.game_over:
            if self.ai_should_give_clue():
                outcome = await self.request_ai_clue()
            elif self.ai_should_guess():
                outcome = await self.request_ai_guesses()
            else:
                break
            if not outcome["applied"]:
                break
        return self.view()

    # Views

    def view(self) -> dict[str, Any]:
        """Human-facing payload: board with the human's key column and public counters."""
        state = self.state
        human_key = get_perspective(state.key_card, PlayerSide.HUMAN)
        board = [
            {
                "index": index,
                "word": word,
                "revealed": revealed.value,
                "key": key.value,
            }
            for index, (word, revealed, key) in enumerate(zip(state.grid_words, state.revealed_states, human_key, strict=True))
        ]
        clue = state.active_clue
        return {
            "game_id": self.game_id,
            "seed": self.seed,
            "theme": state.theme.value,
            "difficulty": self.difficulty.value,
            "agent": agent_label(self.agent_config),
            "board": board,
            "timer_tokens": state.timer_tokens,
            "initial_timer_tokens": state.initial_timer_tokens,
            "current_turn": state.current_turn.value,
            "current_player": self.game.current_player(state),
            "active_clue": {"word": clue.word, "count": clue.count} if clue is not None else None,
            "guesses_made": state.guesses_made_for_clue,
            "guesses_left": guesses_left(state),
            "human_greens_left": remaining_greens_for(state, PlayerSide.HUMAN),
            "ai_greens_left": remaining_greens_for(state, PlayerSide.AI),
            "agents_found": state.total_greens_found(),
            "sudden_death": state.sudden_death,
            "sudden_death_guesser": state.sudden_death_guesser.value if state.sudden_death_guesser else None,
            "ai_in_flight": state.ai_in_flight,
            "human_guessing_concluded": state.human_guessing_concluded,
            "game_over": state.game_over,
            "outcome": state.outcome.value if state.outcome else None,
            "ending": state.ending.value if state.ending else None,
            "message": state.game_message,
            "turn_index": state.turn_index,
            "last_move": state.last_move,
            "configuration_error": self.configuration_error,
            "result": self.result.to_dict() if self.result is not None else None,
        }

    def event_dicts(self) -> list[dict[str, Any]]:
        return [event.to_dict() for event in self.events]

    # Internals

    def _record(self, event_type: EventType, payload: dict[str, Any]) -> None:
        self.events.append(
            GameEvent.create(event_type=event_type, game_id=self.game_id, turn=self.state.turn_index, payload=payload)
        )

    def _commit(self, result: EngineResult, actor: PlayerSide, event_type: EventType, **extra: Any) -> dict[str, Any]:
        if not result.applied:
            self._record(EventType.REJECTED, {"player_id": actor.value, "reason": result.message})
            logger.debug("Game %s: %s action rejected: %s", self.game_id, actor.value, result.message)
            return self._action_payload(result)

        self.state = result.state
        payload: dict[str, Any] = {
            "player_id": actor.value,
            "move": result.state.last_move,
            "message": result.message,
            "timer_tokens": result.state.timer_tokens,
            **{key: value for key, value in extra.items() if value is not None},
        }
        if result.revealed_as is not None:
            payload["revealed_as"] = result.revealed_as.value
        self._record(_event_type_for(result, event_type), payload)
        logger.info("Game %s: %s", self.game_id, result.message)
        self._finalize_if_terminal()
        return self._action_payload(result)

    def _action_payload(self, result: EngineResult) -> dict[str, Any]:
        return {
            "applied": result.applied,
            "message": result.message,
            "revealed_index": result.revealed_index,
            "revealed_as": result.revealed_as.value if result.revealed_as is not None else None,
            "turn_ended": result.turn_ended,
            "view": self.view(),
        }

    def _stale_reply(self) -> dict[str, Any]:
        logger.info("Game %s: discarding AI reply for a game that was reset", self.game_id)
        return self._action_payload(
            EngineResult(state=self.state, applied=False, message="The game was reset while the AI was thinking.")
        )

    def _agent_failure(self, purpose: str, exc: Exception) -> None:
        prompt_context = _agent_prompt_context(self.agent)
        payload: dict[str, Any] = {
            "player_id": PlayerSide.AI.value,
            "purpose": purpose,
            "error": str(exc),
            **_agent_response_payload(prompt_context),
        }
        if prompt_context is not None:
            payload["prompt_context"] = prompt_context
        self._record(EventType.AGENT_ERROR, payload)
        logger.warning("Game %s: AI %s failed: %s", self.game_id, purpose, exc)

    def _configuration_failure(self, generation: int, exc: ConfigurationError) -> None:
        if generation == self._generation:
            self.state = finish_ai_request(self.state)
        self.configuration_error = str(exc)
        self._record(EventType.CONFIGURATION_ERROR, exc.to_dict())
        logger.error("Game %s: AI is not configured: %s", self.game_id, exc)

    def _finalize_if_terminal(self) -> None:
        if not self.state.game_over or self.result is not None:
            return
        raw = self.game.outcome(self.state)
        self.result = MatchResult(
            game_id=self.game_id,
            game_name=raw.game_name,
            seed=self.seed,
            outcome=raw.outcome,
            termination_reason=raw.termination_reason,
            turns=raw.turns,
            stats=raw.stats,
            details=raw.details,
            final_state_digest=raw.final_state_digest,
            event_count=len(self.events) + 1,
        )
        self._record(EventType.TERMINAL, {"result": self.result.to_dict()})
        logger.info("Game %s over: %s (%s)", self.game_id, self.result.outcome.value, self.result.termination_reason)
        self.agent.on_game_end(self.result)


class SessionStore:
    """In-memory session dictionary keyed by game ID."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._sessions: dict[str, DuetSession] = {}
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings.from_env()
        return self._settings

    def create_game(
        self,
        *,
        seed: int | None = None,
        theme: str | None = None,
        difficulty: str | None = None,
        timer_tokens: int | None = None,
        agent: Any = None,
        guess_pacing_sec: float | None = None,
    ) -> DuetSession:
        settings = self.settings
        agent_config = normalize_agent_config(
            agent if agent is not None else {"provider": settings.ai_provider, "model": settings.ai_model}
        )
        session = DuetSession.create(
            seed=seed,
            theme=theme if theme is not None else settings.default_theme,
            difficulty=difficulty if difficulty is not None else settings.default_difficulty,
            agent=create_agent(agent_config),
            agent_config=agent_config,
            timer_tokens=timer_tokens,
            guess_pacing_sec=settings.guess_pacing_sec if guess_pacing_sec is None else guess_pacing_sec,
        )
        return self.add(session)

    def add(self, session: DuetSession) -> DuetSession:
        self._sessions[session.game_id] = session
        return session

    def get(self, game_id: str) -> DuetSession:
        if game_id not in self._sessions:
            raise KeyError(game_id)
        return self._sessions[game_id]
