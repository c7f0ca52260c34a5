"""Process settings read from the environment (and `.env`)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from duet.duet_words import Difficulty, Theme, parse_difficulty, parse_theme
from framework.agents.env_utils import getenv_any, getenv_float
from framework.errors import ConfigurationError

SUPPORTED_PROVIDERS = ("gemini", "openai", "anthropic", "ollama", "random")
DEFAULT_GUESS_PACING_SEC = 0.8


@dataclass(frozen=True)
class Settings:
    """Server-wide defaults; sessions may override theme and difficulty."""

    ai_provider: str = "gemini"
    ai_model: str | None = None
    guess_pacing_sec: float = DEFAULT_GUESS_PACING_SEC
    default_theme: Theme = Theme.STANDARD
    default_difficulty: Difficulty = Difficulty.STANDARD
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from DUET_* variables, raising ConfigurationError on bad values."""
        provider = (getenv_any("DUET_AI_PROVIDER", default="gemini") or "gemini").strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported DUET_AI_PROVIDER {provider!r}. Supported providers: {list(SUPPORTED_PROVIDERS)}"
            )
        pacing = getenv_float("DUET_GUESS_PACING_SEC", DEFAULT_GUESS_PACING_SEC)
        if pacing < 0:
            raise ConfigurationError("DUET_GUESS_PACING_SEC must be >= 0.")
        try:
            theme = parse_theme(getenv_any("DUET_DEFAULT_THEME"))
            difficulty = parse_difficulty(getenv_any("DUET_DEFAULT_DIFFICULTY"))
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        return cls(
            ai_provider=provider,
            ai_model=getenv_any("DUET_AI_MODEL"),
            guess_pacing_sec=pacing,
            default_theme=theme,
            default_difficulty=difficulty,
            log_level=(getenv_any("DUET_LOG_LEVEL", default="INFO") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logging.getLogger().setLevel(level)
