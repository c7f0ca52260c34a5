"""Codenames Duet exposed through the generic `Game` interface."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from framework.game import Game, LegalMovesSpec
from framework.move import Move
from framework.result import MatchOutcome, MatchResult

from .duet_engine import EngineResult, end_turn, guesses_left, reveal_card, submit_clue
from .duet_moves import EndTurn, GiveClue, Guess, MoveType, move_from_dict
from .duet_observation import DuetObservation
from .duet_perspective import get_perspective, remaining_greens_for
from .duet_setup import initialize_game_state
from .duet_state import DuetState, Outcome, PlayerSide, RevealedState
from .duet_words import parse_difficulty, parse_theme

ROLE_CLUE_GIVER = "CLUE_GIVER"
ROLE_GUESSER = "GUESSER"
ROLE_SUDDEN_DEATH_GUESSER = "SUDDEN_DEATH_GUESSER"
ROLE_WAITING = "WAITING"

_REVEALED_TOKENS = {
    RevealedState.GREEN: "G",
    RevealedState.BYSTANDER_HUMAN_TURN: "b",
    RevealedState.BYSTANDER_AI_TURN: "b",
    RevealedState.ASSASSIN: "X",
}


def side_for_player(player_id: str) -> PlayerSide:
    """Return the seat for a player ID."""
    try:
        return PlayerSide(str(player_id).strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown Duet player_id: {player_id!r}") from exc


class DuetGame(Game[DuetState, Move, DuetObservation]):
    """Cooperative two-seat Codenames Duet: a human and an AI share a dual key card."""

    game_name = "codenames_duet"

    def __init__(self, default_config: dict[str, Any] | None = None):
        self.default_config = default_config or {}

    def new_game(self, seed: int | None, config: dict[str, Any] | None = None) -> DuetState:
        """Create an initial state from theme/difficulty config."""
        cfg = dict(self.default_config)
        cfg.update(config or {})
        theme = parse_theme(cfg.get("theme"))
        difficulty = parse_difficulty(cfg.get("difficulty"))
        tokens = int(cfg["timer_tokens"]) if cfg.get("timer_tokens") is not None else difficulty.timer_tokens
        word_list = cfg.get("word_list")
        return initialize_game_state(
            tokens,
            theme,
            seed=seed,
            word_list=tuple(word_list) if word_list is not None else None,
        )

    def player_ids(self, state: DuetState) -> Sequence[str]:
        return (PlayerSide.HUMAN.value, PlayerSide.AI.value)

    def role_for_player(self, state: DuetState, player_id: str) -> str | None:
        """Return the role the seat holds right now."""
        side = side_for_player(player_id)
        if state.game_over:
            return None
        if state.sudden_death:
            return ROLE_SUDDEN_DEATH_GUESSER if side is state.sudden_death_guesser else ROLE_WAITING
        if side is state.current_turn.clue_giver:
            return ROLE_CLUE_GIVER
        return ROLE_GUESSER

    def current_player(self, state: DuetState) -> str | None:
        """Clue giver while no clue is active, guesser while one is, arbitrated seat in Sudden Death."""
        if state.game_over:
            return None
        if state.sudden_death:
            return state.sudden_death_guesser.value if state.sudden_death_guesser is not None else None
        if state.active_clue is None:
            return state.current_turn.clue_giver.value
        return state.current_turn.guesser.value

    def legal_moves(self, state: DuetState, player_id: str) -> LegalMovesSpec:
        """Return legal move list/spec for the player."""
        if self.is_terminal(state) or player_id != self.current_player(state):
            return []

        guesses = [Guess(index=index) for index in state.hidden_indices()]
        if state.sudden_death:
            return guesses
        if state.active_clue is None:
            side = side_for_player(player_id)
            return {
                "enumerable": False,
                "template": {"type": MoveType.GIVE_CLUE.value, "clue": "string", "count": "int>=0"},
                "count_max": remaining_greens_for(state, side),
                "forbidden_words": list(state.grid_words),
            }
        return [*guesses, EndTurn()]

    def resolve_move(self, state: DuetState, player_id: str, move: Move) -> EngineResult:
        """Run a move through the engine; rejected moves come back with `applied=False`."""
        side = side_for_player(player_id)
        if isinstance(move, GiveClue):
            return submit_clue(state, side, move.clue, move.count)
        if isinstance(move, Guess):
            return reveal_card(state, move.index, side)
        if isinstance(move, EndTurn):
            if state.sudden_death or state.active_clue is None or side is not state.current_turn.guesser:
                return EngineResult(state=state, applied=False, message="Only the guesser can end a guessing turn.")
            return end_turn(state, use_token=True, actor=side)
        return EngineResult(state=state, applied=False, message=f"Unsupported move type: {type(move).__name__}")

    def is_terminal(self, state: DuetState) -> bool:
        return state.game_over

    def outcome(self, state: DuetState) -> MatchResult:
        """Build structured result from a terminal state."""
        outcome = MatchOutcome.WIN if state.outcome is Outcome.WIN else MatchOutcome.LOSS
        return MatchResult(
            game_id="",
            game_name=self.game_name,
            seed=state.seed,
            outcome=outcome,
            termination_reason=state.ending.value if state.ending is not None else "unfinished",
            turns=state.turn_index,
            stats={
                "agents_found": state.total_greens_found(),
                "timer_tokens_left": state.timer_tokens,
                "timer_tokens_used": state.initial_timer_tokens - state.timer_tokens,
                "sudden_death": state.sudden_death,
                "theme": state.theme.value,
            },
            details=state.game_message,
            final_state_digest=state.state_digest(),
        )

    def observation(self, state: DuetState, player_id: str) -> DuetObservation:
        """Return the seat's view; only its own half of the key card is exposed."""
        side = side_for_player(player_id)
        return DuetObservation(
            player_id=side.value,
            side=side,
            role=self.role_for_player(state, player_id),
            grid_words=state.grid_words,
            revealed_states=state.revealed_states,
            own_key=get_perspective(state.key_card, side),
            timer_tokens=state.timer_tokens,
            current_turn=state.current_turn,
            active_clue=state.active_clue,
            guesses_left=guesses_left(state),
            own_greens_left=remaining_greens_for(state, side),
            partner_greens_left=remaining_greens_for(state, side.partner),
            total_greens_found=state.total_greens_found(),
            sudden_death=state.sudden_death,
            sudden_death_guesser=state.sudden_death_guesser,
            game_over=state.game_over,
            game_message=state.game_message,
            turn_index=state.turn_index,
            last_move=state.last_move,
        )

    def render(self, state: DuetState, player_id: str | None = None) -> str:
        """Render the 5x5 board; a seat sees its own key in lowercase tags."""
        key = get_perspective(state.key_card, side_for_player(player_id)) if player_id is not None else None
        cells: list[str] = []
        for index, word in enumerate(state.grid_words):
            revealed = state.revealed_states[index]
            if revealed is not RevealedState.HIDDEN:
                token = f"[{_REVEALED_TOKENS[revealed]}] {word.upper()}"
            elif key is not None:
                token = f"({key[index].value[0].lower()}) {word}"
            else:
                token = word
            cells.append(f"{index:02d}:{token}")

        rows = [" | ".join(cells[row : row + 5]) for row in range(0, len(cells), 5)]
        clue = f"{state.active_clue.word.upper()} {state.active_clue.count}" if state.active_clue else "-"
        header = (
            f"turn={state.current_turn.value} clue={clue} tokens={state.timer_tokens} "
            f"found={state.total_greens_found()} sudden_death={state.sudden_death} game_over={state.game_over}"
        )
        return header + "\n" + "\n".join(rows)

    def parse_move(self, data: Mapping[str, Any]) -> Move:
        return move_from_dict(data)
