"""Terminal play loop against the configured AI partner."""

from __future__ import annotations

import argparse
import asyncio
from typing import Callable, Sequence

from duet.duet_state import PlayerSide, TurnOwner
from duet.duet_words import Difficulty, Theme
from framework.errors import ConfigurationError
from server.agent_factory import create_agent, normalize_agent_config
from server.config import SUPPORTED_PROVIDERS, Settings, configure_logging
from server.session import DuetSession

HELP_TEXT = (
    "Commands:\n"
    "  clue WORD COUNT   give a clue (your clue turn)\n"
    "  reveal WORD|INDEX reveal a card (your guessing turn or Sudden Death)\n"
    "  end               stop guessing (spends a timer token)\n"
    "  new               start a new game\n"
    "  quit              exit\n"
)


def _human_is_up(session: DuetSession) -> bool:
    return session.game.current_player(session.state) == PlayerSide.HUMAN.value


def handle_command(session: DuetSession, line: str) -> str | None:
    """Apply one typed command; return a message to print, or None to quit."""
    parts = line.strip().split()
    if not parts:
        return HELP_TEXT
    command = parts[0].lower()
    if command in {"quit", "exit", "q"}:
        return None
    if command == "new":
        return session.reset()["message"]
    if command == "end":
        return session.end_turn()["message"]
    if command == "clue":
        if len(parts) != 3 or not parts[2].isdigit():
            return "Usage: clue WORD COUNT"
        return session.submit_clue(parts[1], int(parts[2]))["message"]
    if command == "reveal":
        if len(parts) != 2:
            return "Usage: reveal WORD|INDEX"
        target = parts[1]
        index = int(target) if target.isdigit() else session.state.index_of(target)
        if index is None:
            return f"{target.upper()} is not on the board."
        return session.reveal(index)["message"]
    return HELP_TEXT


async def play(session: DuetSession, input_fn: Callable[[str], str] = input) -> None:
    print(HELP_TEXT)
    while True:
        await session.advance()
        print()
        print(session.game.render(session.state, PlayerSide.HUMAN.value))
        print(session.state.game_message)
        if session.state.game_over:
            line = input_fn("Game over. Type 'new' to play again or 'quit': ")
        elif _human_is_up(session):
            waiting_for = "clue" if session.state.current_turn is TurnOwner.HUMAN_CLUE and not session.state.sudden_death else "guess"
            line = input_fn(f"Your {waiting_for}> ")
        else:
            break
        message = handle_command(session, line)
        if message is None:
            return
        print(message)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entrypoint for one interactive game."""
    parser = argparse.ArgumentParser(description="Play Codenames Duet against an AI partner.")
    parser.add_argument("--theme", default=None, choices=[theme.value for theme in Theme])
    parser.add_argument("--difficulty", default=None, choices=[level.value for level in Difficulty])
    parser.add_argument("--provider", default=None, choices=list(SUPPORTED_PROVIDERS))
    parser.add_argument("--model", default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--pacing", type=float, default=None, help="Seconds between AI reveals.")
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        parser.error(str(exc))
    configure_logging(settings.log_level)

    agent_config = normalize_agent_config(
        {"provider": args.provider or settings.ai_provider, "model": args.model or settings.ai_model}
    )
    try:
        session = DuetSession.create(
            seed=args.seed,
            theme=args.theme or settings.default_theme,
            difficulty=args.difficulty or settings.default_difficulty,
            agent=create_agent(agent_config),
            agent_config=agent_config,
            guess_pacing_sec=settings.guess_pacing_sec if args.pacing is None else args.pacing,
        )
        asyncio.run(play(session))
    except ConfigurationError as exc:
        print(f"AI is not configured: {exc}")
        return 2
    except (KeyboardInterrupt, EOFError):
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
