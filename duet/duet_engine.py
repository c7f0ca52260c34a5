"""Turn and reveal engine: the only code that produces new DuetState values.

Every operation takes the current state and returns an `EngineResult`. A
rejected request carries the unchanged input state with `applied=False` and a
human-readable reason; nothing here raises for rule violations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .duet_perspective import remaining_targets_for
from .duet_state import (
    TOTAL_UNIQUE_GREEN_AGENTS,
    CardType,
    Clue,
    DuetState,
    Ending,
    Outcome,
    PlayerSide,
    RevealedState,
    TurnOwner,
)

ERROR_CLUE_WORD = "error"
WIN_MESSAGE = f"All {TOTAL_UNIQUE_GREEN_AGENTS} agents contacted! You win!"


@dataclass(frozen=True)
class EngineResult:
    """Outcome of one engine operation."""

    state: DuetState
    applied: bool
    message: str
    revealed_index: int | None = None
    revealed_as: RevealedState | None = None
    turn_ended: bool = False


def _rejected(state: DuetState, message: str) -> EngineResult:
    return EngineResult(state=state, applied=False, message=message)


def _committed(state: DuetState, **kwargs: Any) -> EngineResult:
    return EngineResult(state=state, applied=True, message=state.game_message, **kwargs)


def _finish(state: DuetState, outcome: Outcome, ending: Ending, message: str) -> DuetState:
    return state.evolve(
        game_over=True,
        outcome=outcome,
        ending=ending,
        game_message=message,
        active_clue=None,
        sudden_death_guesser=None,
    )


def _win(state: DuetState) -> DuetState:
    return _finish(state, Outcome.WIN, Ending.ALL_AGENTS_CONTACTED, WIN_MESSAGE)


def _settle_reveal(state: DuetState) -> DuetState:
    """Win check run after every reveal; it overrides a loss set by the same reveal."""
    if state.total_greens_found() >= TOTAL_UNIQUE_GREEN_AGENTS:
        return _win(state)
    return state


def _next_turn_message(turn: TurnOwner) -> str:
    return "AI's turn to give a clue." if turn is TurnOwner.AI_CLUE else "Your turn to give a clue."


def _joined(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def guess_allowance(clue: Clue, guesser: PlayerSide) -> int | None:
    """Maximum guesses for `clue`; None means unlimited."""
    if clue.count == 0:
        return None if guesser is PlayerSide.HUMAN else 1
    return clue.count + 1


def guesses_left(state: DuetState) -> int | None:
    """Guesses remaining under the active clue; None means unlimited."""
    if state.active_clue is None or state.game_over or state.sudden_death:
        return 0
    allowance = guess_allowance(state.active_clue, state.current_turn.guesser)
    if allowance is None:
        return None
    return max(0, allowance - state.guesses_made_for_clue)


def clue_conflict(word: str, grid_words: tuple[str, ...], *, check_components: bool = False) -> str | None:
    """Return why `word` may not be used as a clue on this grid, or None."""
    normalized = word.strip().lower()
    for grid_word in grid_words:
        candidate = grid_word.lower()
        if normalized == candidate:
            return f"'{word}' is a word on the board."
        if not check_components:
            continue
        if normalized in candidate:
            return f"'{word}' is part of the board word '{grid_word}'."
        if candidate in normalized:
            return f"'{word}' contains the board word '{grid_word}'."
    return None


def next_sudden_death_guesser(state: DuetState, last_guesser: PlayerSide | None) -> PlayerSide | None:
    """Pick who reveals next in Sudden Death.

    The partner of whoever acted last goes first; the same side goes again
    only when the partner has nothing left to find. None means deadlock.
    """
    preferred = last_guesser.partner if last_guesser is not None else PlayerSide.HUMAN
    for candidate in (preferred, preferred.partner):
        if remaining_targets_for(state, candidate) > 0:
            return candidate
    return None


def begin_ai_request(state: DuetState) -> EngineResult:
    """Mark an AI call as outstanding; refuses a duplicate call."""
    if state.game_over:
        return _rejected(state, "The game is over.")
    if state.ai_in_flight:
        return _rejected(state, "AI is already thinking.")
    return EngineResult(state=state.evolve(ai_in_flight=True), applied=True, message="AI is thinking...")


def finish_ai_request(state: DuetState) -> DuetState:
    return state.evolve(ai_in_flight=False)


def submit_clue(state: DuetState, giver: PlayerSide, word: str, count: int) -> EngineResult:
    """Activate a clue for the current clue giver."""
    if state.game_over:
        return _rejected(state, "The game is over.")
    if state.sudden_death:
        return _rejected(state, "No clues are given in Sudden Death.")
    if giver is PlayerSide.HUMAN and state.ai_in_flight:
        return _rejected(state, "Wait for the AI to finish.")
    if giver is not state.current_turn.clue_giver:
        return _rejected(state, f"It is not {giver.value}'s turn to give a clue.")
    if state.active_clue is not None:
        return _rejected(state, "A clue is already active.")
    word = word.strip()
    if not word:
        return _rejected(state, "Clue cannot be empty.")
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        return _rejected(state, "Clue count must be an integer >= 0.")
    conflict = clue_conflict(word, state.grid_words, check_components=giver is PlayerSide.AI)
    if conflict is not None:
        return _rejected(state, conflict)

    if giver is PlayerSide.HUMAN:
        message = f"Your Clue: {word.upper()} for {count}. AI is guessing."
    else:
        message = f"AI's Clue: {word.upper()} for {count}. Your turn to guess."
    next_state = state.evolve(
        active_clue=Clue(word=word, count=count),
        guesses_made_for_clue=0,
        human_guessing_concluded=False,
        game_message=message,
        turn_index=state.turn_index + 1,
        last_move={"type": "GiveClue", "player_id": giver.value, "clue": word, "count": count},
    )
    return _committed(next_state)


def apply_error_clue(state: DuetState) -> EngineResult:
    """Install the degenerate count-0 clue used when the AI clue call fails."""
    if state.game_over or state.sudden_death:
        return _rejected(state, "No clue can be given now.")
    if state.current_turn is not TurnOwner.AI_CLUE or state.active_clue is not None:
        return _rejected(state, "It is not the AI's turn to give a clue.")
    next_state = state.evolve(
        active_clue=Clue(word=ERROR_CLUE_WORD, count=0),
        guesses_made_for_clue=0,
        human_guessing_concluded=False,
        game_message="Error getting AI clue. Guess freely or end the turn.",
        turn_index=state.turn_index + 1,
        last_move={"type": "GiveClue", "player_id": PlayerSide.AI.value, "clue": ERROR_CLUE_WORD, "count": 0},
    )
    return _committed(next_state)


def reveal_card(state: DuetState, index: int, guesser: PlayerSide) -> EngineResult:
    """Reveal one grid card on behalf of `guesser`."""
    if state.game_over:
        return _rejected(state, "The game is over.")
    if not 0 <= index < len(state.grid_words):
        return _rejected(state, f"Card index {index} is out of range.")
    if not state.is_hidden(index):
        return _rejected(state, f"{state.grid_words[index].upper()} is already revealed.")
    if guesser is PlayerSide.HUMAN and state.ai_in_flight:
        return _rejected(state, "Wait for the AI to finish.")
    if state.sudden_death:
        return _reveal_sudden_death(state, index, guesser)
    return _reveal_normal(state, index, guesser)


def _reveal_normal(state: DuetState, index: int, guesser: PlayerSide) -> EngineResult:
    clue = state.active_clue
    if clue is None:
        return _rejected(state, "There is no active clue to guess against.")
    if guesser is not state.current_turn.guesser:
        return _rejected(state, f"It is not {guesser.value}'s turn to guess.")
    if guesser is PlayerSide.HUMAN and state.human_guessing_concluded:
        return _rejected(state, "Guessing for this clue has concluded.")

    # Identity comes from the clue giver's half of the key card, not the guesser's.
    identity = state.key_card[index].for_player(state.current_turn.clue_giver)
    word = state.grid_words[index].upper()
    guesses_made = state.guesses_made_for_clue + 1
    revealed = list(state.revealed_states)
    base = {
        "guesses_made_for_clue": guesses_made,
        "turn_index": state.turn_index + 1,
        "last_move": {"type": "Guess", "player_id": guesser.value, "index": index, "word": state.grid_words[index]},
    }

    if identity is CardType.ASSASSIN:
        revealed[index] = RevealedState.ASSASSIN
        next_state = _finish(
            state.evolve(revealed_states=tuple(revealed), **base),
            Outcome.LOSS,
            Ending.ASSASSIN,
            f"Assassin hit! {guesser.label} revealed an assassin. Game Over!",
        )
        return _committed(_settle_reveal(next_state), revealed_index=index, revealed_as=revealed[index], turn_ended=True)

    if identity is CardType.GREEN:
        revealed[index] = RevealedState.GREEN
        message = f"Correct! {word} is an agent."
        next_state = _settle_reveal(state.evolve(revealed_states=tuple(revealed), game_message=message, **base))
        if next_state.game_over:
            return _committed(next_state, revealed_index=index, revealed_as=revealed[index], turn_ended=True)
        allowance = guess_allowance(clue, guesser)
        if allowance is not None and guesses_made >= allowance:
            ended = _end_turn(next_state, use_token=False, prefix=_joined(message, "Max guesses for this clue reached."))
            return _committed(ended, revealed_index=index, revealed_as=revealed[index], turn_ended=True)
        return _committed(next_state, revealed_index=index, revealed_as=revealed[index])

    revealed[index] = RevealedState.bystander_for(guesser)
    message = f"Incorrect. {word} is a bystander. Turn ends."
    next_state = _settle_reveal(state.evolve(revealed_states=tuple(revealed), **base))
    if not next_state.game_over:
        next_state = _end_turn(next_state, use_token=True, prefix=message)
    return _committed(next_state, revealed_index=index, revealed_as=revealed[index], turn_ended=True)


def _reveal_sudden_death(state: DuetState, index: int, guesser: PlayerSide) -> EngineResult:
    if guesser is not state.sudden_death_guesser:
        return _rejected(state, f"It is not {guesser.value}'s turn in Sudden Death.")

    entry = state.key_card[index]
    own = entry.for_player(guesser)
    partners = entry.for_player(guesser.partner)
    word = state.grid_words[index].upper()
    revealed = list(state.revealed_states)
    base = {
        "turn_index": state.turn_index + 1,
        "last_move": {"type": "Guess", "player_id": guesser.value, "index": index, "word": state.grid_words[index]},
    }

    # Own assassin is checked before anything the partner's key says.
    if own is CardType.ASSASSIN:
        owner = "your" if guesser is PlayerSide.HUMAN else "the AI's"
        revealed[index] = RevealedState.ASSASSIN
        next_state = _finish(
            state.evolve(revealed_states=tuple(revealed), **base),
            Outcome.LOSS,
            Ending.ASSASSIN,
            f"Sudden Death: {word} was {owner} own assassin. Game Over!",
        )
    elif partners is CardType.ASSASSIN:
        revealed[index] = RevealedState.ASSASSIN
        next_state = _finish(
            state.evolve(revealed_states=tuple(revealed), **base),
            Outcome.LOSS,
            Ending.ASSASSIN,
            f"Sudden Death: {word} was an assassin. Game Over!",
        )
    elif partners is CardType.BYSTANDER:
        revealed[index] = RevealedState.bystander_for(guesser)
        next_state = _finish(
            state.evolve(revealed_states=tuple(revealed), **base),
            Outcome.LOSS,
            Ending.SUDDEN_DEATH_MISS,
            f"Sudden Death: {word} was a bystander. Game Over!",
        )
    else:
        revealed[index] = RevealedState.GREEN
        next_state = state.evolve(revealed_states=tuple(revealed), **base)
        if next_state.total_greens_found() < TOTAL_UNIQUE_GREEN_AGENTS:
            next_state = _hand_off_sudden_death(next_state, guesser, prefix=f"Correct! {word} is an agent.")

    next_state = _settle_reveal(next_state)
    return _committed(next_state, revealed_index=index, revealed_as=revealed[index], turn_ended=True)


def _hand_off_sudden_death(state: DuetState, last_guesser: PlayerSide | None, *, prefix: str = "") -> DuetState:
    next_guesser = next_sudden_death_guesser(state, last_guesser)
    if next_guesser is None:
        return _finish(
            state,
            Outcome.LOSS,
            Ending.SUDDEN_DEATH_DEADLOCK,
            _joined(prefix, "Sudden Death: no agents left that either of you can find. You lose."),
        )
    if next_guesser is PlayerSide.HUMAN:
        message = _joined(prefix, "Sudden Death: your turn to find one of the AI's agents.")
    else:
        message = _joined(prefix, "Sudden Death: the AI must find one of your agents.")
    return state.evolve(sudden_death_guesser=next_guesser, game_message=message)


def end_turn(state: DuetState, use_token: bool = True, *, actor: PlayerSide | None = None) -> EngineResult:
    """End the current turn, spending a timer token when `use_token` is set."""
    if state.game_over:
        return _rejected(state, "The game is over.")
    if state.sudden_death:
        return _rejected(state, "Turns do not end in Sudden Death; reveal a card.")
    if actor is PlayerSide.HUMAN and state.ai_in_flight:
        return _rejected(state, "Wait for the AI to finish.")
    next_state = _end_turn(state.evolve(turn_index=state.turn_index + 1), use_token=use_token)
    return _committed(next_state, turn_ended=True)


def _end_turn(state: DuetState, *, use_token: bool, prefix: str = "") -> DuetState:
    if state.total_greens_found() >= TOTAL_UNIQUE_GREEN_AGENTS:
        return _win(state)
    if state.timer_tokens <= 0:
        return _finish(
            state,
            Outcome.LOSS,
            Ending.OUT_OF_TIME,
            _joined(prefix, "Out of time! Not all agents were contacted. You lose."),
        )
    last_guesser = state.current_turn.guesser
    if use_token and state.timer_tokens == 1 and not state.assassin_revealed():
        sudden = state.evolve(
            timer_tokens=0,
            sudden_death=True,
            active_clue=None,
            guesses_made_for_clue=0,
            human_guessing_concluded=last_guesser is PlayerSide.HUMAN,
        )
        # The clue giver's turn just ended, so its partner reveals first.
        return _hand_off_sudden_death(
            sudden, state.current_turn.clue_giver, prefix=_joined(prefix, "Out of timer tokens!")
        )

    next_turn = state.current_turn.other
    return state.evolve(
        timer_tokens=state.timer_tokens - 1 if use_token else state.timer_tokens,
        current_turn=next_turn,
        active_clue=None,
        guesses_made_for_clue=0,
        human_guessing_concluded=last_guesser is PlayerSide.HUMAN,
        game_message=_joined(prefix, _next_turn_message(next_turn)),
    )


def pass_turn(state: DuetState, guesser: PlayerSide) -> EngineResult:
    """Forfeit the remaining guesses of `guesser` (adapter failure or empty guess list)."""
    if state.game_over:
        return _rejected(state, "The game is over.")
    if state.sudden_death:
        if guesser is not state.sudden_death_guesser:
            return _rejected(state, f"It is not {guesser.value}'s turn in Sudden Death.")
        next_state = state.evolve(turn_index=state.turn_index + 1)
        partner = guesser.partner
        if remaining_targets_for(next_state, partner) > 0:
            next_state = _hand_off_sudden_death(next_state, guesser, prefix=f"{guesser.label} passed.")
        else:
            next_state = _finish(
                next_state,
                Outcome.LOSS,
                Ending.SUDDEN_DEATH_DEADLOCK,
                f"{guesser.label} passed and nobody else has an agent to find. You lose.",
            )
        return _committed(next_state, turn_ended=True)

    if state.active_clue is None or guesser is not state.current_turn.guesser:
        return _rejected(state, f"It is not {guesser.value}'s turn to guess.")
    if guesser is PlayerSide.HUMAN and state.ai_in_flight:
        return _rejected(state, "Wait for the AI to finish.")
    next_state = _end_turn(
        state.evolve(turn_index=state.turn_index + 1),
        use_token=True,
        prefix=f"{guesser.label} passed.",
    )
    return _committed(next_state, turn_ended=True)


def pass_clue_turn(state: DuetState, giver: PlayerSide) -> EngineResult:
    """Skip giving a clue without spending a token (the giver has no agents left to clue)."""
    if state.game_over:
        return _rejected(state, "The game is over.")
    if state.sudden_death:
        return _rejected(state, "No clues are given in Sudden Death.")
    if giver is not state.current_turn.clue_giver or state.active_clue is not None:
        return _rejected(state, f"It is not {giver.value}'s turn to give a clue.")
    if giver is PlayerSide.HUMAN and state.ai_in_flight:
        return _rejected(state, "Wait for the AI to finish.")
    prefix = "AI passes." if giver is PlayerSide.AI else "You pass."
    next_state = _end_turn(state.evolve(turn_index=state.turn_index + 1), use_token=False, prefix=prefix)
    return _committed(next_state, turn_ended=True)
