"""AI partners for Duet: LLM-backed, random baseline and scripted."""

from __future__ import annotations

import hashlib
import logging
import random
from typing import Any, Callable

from framework.agents.llm_agent import LLMAgent, LLMClient
from framework.errors import AgentExecutionError
from framework.player import Agent

from .duet_adapter import ClueRequest, ClueResponse, GuessRequest, GuessResponse
from .duet_engine import clue_conflict

logger = logging.getLogger(__name__)

DUET_SYSTEM_PROMPT = (
    "You are an expert Codenames Duet player cooperating with a human partner. "
    "Always answer with exactly one JSON object and nothing else. Do not use markdown fences."
)

# Fallback vocabulary for the offline baseline; filtered against the board before use.
_RANDOM_CLUE_WORDS = (
    "thing", "place", "motion", "nature", "metal", "color", "sound", "travel",
    "history", "science", "family", "weather", "music", "danger", "comfort", "shape",
)


def _word_list(words: list[str], empty: str = "None") -> str:
    return ", ".join(words) if words else empty


class DuetAgent(Agent):
    """An AI seat: answers clue and guess requests."""

    def give_clue(self, request: ClueRequest) -> ClueResponse:
        raise NotImplementedError

    def guess(self, request: GuessRequest) -> GuessResponse:
        raise NotImplementedError


class LLMDuetAgent(LLMAgent, DuetAgent):
    """Prompts a language model for clues and guesses in the adapter's JSON shape."""

    def __init__(self, agent_id: str, llm_client: LLMClient, *, max_retries: int = 2):
        super().__init__(agent_id, llm_client, system_prompt=DUET_SYSTEM_PROMPT, max_retries=max_retries)

    def give_clue(self, request: ClueRequest) -> ClueResponse:
        response = self.request_json(self._build_clue_prompt(request), ClueResponse.model_validate, purpose="clue")
        logger.info("LLM clue %s %d (%s)", response.clue_word, response.clue_number, response.reasoning or "")
        return response

    def guess(self, request: GuessRequest) -> GuessResponse:
        response = self.request_json(self._build_guess_prompt(request), GuessResponse.model_validate, purpose="guess")
        logger.info("LLM guesses %s (%s)", response.guessed_words, response.reasoning or "")
        return response

    def _build_clue_prompt(self, request: ClueRequest) -> str:
        return (
            "Your goal is to give a clue that helps your partner guess the green words on your key card "
            "while avoiding the assassin words.\n"
            f"Word theme: {request.theme.display_name}\n\n"
            f"Board: {_word_list(request.grid)}\n\n"
            f"Your green words (not yet revealed): {_word_list(request.green_words)}\n\n"
            f"Your assassin words (not yet revealed): {_word_list(request.assassin_words)}\n\n"
            f"Timer tokens remaining: {request.timer_tokens}\n\n"
            "Give one clue word and a number. The clue word must not be any word on the board or part of a "
            "board word. The number is how many of your green words the clue relates to. Maximize the green "
            "words your partner can find while steering clear of the assassins.\n\n"
            "Required output schema:\n"
            '{ "clueWord": "string", "clueNumber": 2, "reasoning": "short explanation" }\n'
        )

    def _build_guess_prompt(self, request: GuessRequest) -> str:
        revealed = _word_list(request.revealed_words)
        greens = _word_list(request.ai_green_words, empty="None remaining")
        assassins = _word_list(request.ai_assassin_words)
        if request.is_sudden_death:
            task = (
                "This is a SUDDEN DEATH round. Pick exactly ONE unrevealed word you believe is green for your "
                "partner. Revealing a bystander or an assassin loses the game for both of you. Avoid your own "
                "assassin words. If no pick is safe, pass with an empty guessedWords list and explain why.\n"
            )
            closing = "guessedWords must contain at most one word.\n"
        else:
            task = (
                "Your partner gave you a clue.\n"
                f"Clue word: {request.clue_word}\n"
                f"Clue number: {request.clue_number}\n"
                "Your guesses are checked against your partner's key card. Guess the words your partner is "
                "hinting at, most confident first. Do not prioritize your own green words unless they also "
                "match the clue.\n"
            )
            if request.clue_number > 0:
                closing = f"List between 1 and {request.clue_number + 1} words.\n"
            else:
                closing = "List exactly 1 word.\n"
        return (
            f"{task}\n"
            f"Word theme: {request.theme.display_name}\n\n"
            f"Board: {_word_list(request.grid_words)}\n\n"
            f"Already revealed (you cannot guess these): {revealed}\n\n"
            f"Your own assassin words (not yet revealed), be extremely careful: {assassins}\n\n"
            f"Your own green words (not yet revealed), for awareness: {greens}\n\n"
            f"{closing}"
            "If nothing fits or the risk is too high, return an empty guessedWords list and say why.\n\n"
            "Required output schema:\n"
            '{ "guessedWords": ["WORD", "WORD"], "reasoning": "short explanation" }\n'
        )


class RandomDuetAgent(DuetAgent):
    """Offline baseline: generic clues and random unrevealed guesses that skip its own assassins."""

    def __init__(self, agent_id: str):
        super().__init__(agent_id=agent_id)
        self._rng = random.Random()

    def reset(self, game_id: str, seed: int | None, config: dict[str, Any] | None) -> None:
        """Reseed deterministically per game."""
        material = f"{seed}:{game_id}:{self.agent_id}".encode("utf-8")
        derived_seed = int.from_bytes(hashlib.sha256(material).digest()[:8], byteorder="big", signed=False)
        self._rng.seed(derived_seed)

    def give_clue(self, request: ClueRequest) -> ClueResponse:
        options = [word for word in _RANDOM_CLUE_WORDS if clue_conflict(word, tuple(request.grid), check_components=True) is None]
        if not options:
            raise AgentExecutionError(self.agent_id, "No usable clue word for this board.")
        count = 1 if request.green_words else 0
        return ClueResponse(clue_word=self._rng.choice(options), clue_number=count, reasoning="random baseline")

    def guess(self, request: GuessRequest) -> GuessResponse:
        blocked = {word.lower() for word in request.revealed_words + request.ai_assassin_words}
        candidates = [word for word in request.grid_words if word.lower() not in blocked]
        if not candidates:
            return GuessResponse(guessed_words=[], reasoning="nothing safe to guess")
        limit = 1 if request.is_sudden_death or request.clue_number == 0 else request.clue_number
        picks = self._rng.sample(candidates, k=min(limit, len(candidates)))
        return GuessResponse(guessed_words=picks, reasoning="random baseline")


class ScriptedDuetAgent(DuetAgent):
    """Runs user-provided clue and guess callables."""

    def __init__(
        self,
        agent_id: str,
        clue_policy: Callable[[ClueRequest], ClueResponse] | None = None,
        guess_policy: Callable[[GuessRequest], GuessResponse] | None = None,
    ):
        super().__init__(agent_id=agent_id)
        self.clue_policy = clue_policy
        self.guess_policy = guess_policy
        self.clue_requests: list[ClueRequest] = []
        self.guess_requests: list[GuessRequest] = []

    def give_clue(self, request: ClueRequest) -> ClueResponse:
        if self.clue_policy is None:
            raise NotImplementedError("ScriptedDuetAgent requires a clue_policy(request) callable.")
        self.clue_requests.append(request)
        return self.clue_policy(request)

    def guess(self, request: GuessRequest) -> GuessResponse:
        if self.guess_policy is None:
            raise NotImplementedError("ScriptedDuetAgent requires a guess_policy(request) callable.")
        self.guess_requests.append(request)
        return self.guess_policy(request)
