"""Factory for building the AI partner from settings."""

from __future__ import annotations

from typing import Any

from duet.duet_agents import DuetAgent, LLMDuetAgent, RandomDuetAgent
from framework.agents.env_utils import getenv_any
from framework.agents.llm_agent import LLMClient
from framework.agents.provider_clients import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OPENAI_MODEL,
    AnthropicMessagesClient,
    GeminiClient,
    OllamaClient,
    OpenAIChatClient,
)
from framework.errors import ConfigurationError
from server.config import SUPPORTED_PROVIDERS


def normalize_agent_config(raw: Any) -> dict[str, Any]:
    """Normalize an agent configuration (provider name or dict) into a typed dictionary."""
    if isinstance(raw, str):
        return {"provider": raw.strip().lower()}
    if isinstance(raw, dict):
        data = dict(raw)
        data["provider"] = str(data.get("provider", "gemini")).strip().lower()
        return data
    return {"provider": "gemini"}


def agent_label(config: dict[str, Any]) -> str:
    """Return a stable label for logs and views."""
    provider = str(config.get("provider", "gemini")).lower()
    model = config.get("model")
    if model:
        return f"{provider}:{model}"
    return provider


def build_llm_client(provider: str, model: str | None = None) -> LLMClient:
    """Instantiate the HTTP client for a provider."""
    if provider == "gemini":
        return GeminiClient(model=model or DEFAULT_GEMINI_MODEL)
    if provider == "openai":
        return OpenAIChatClient(model=model or DEFAULT_OPENAI_MODEL)
    if provider == "anthropic":
        return AnthropicMessagesClient(model=model or DEFAULT_ANTHROPIC_MODEL)
    if provider == "ollama":
        base_url = getenv_any("OLLAMA_BASE_URL", default="http://127.0.0.1:11434") or "http://127.0.0.1:11434"
        return OllamaClient(model=model or DEFAULT_OLLAMA_MODEL, base_url=base_url)
    raise ConfigurationError(
        f"Unsupported AI provider '{provider}'. Supported providers: {list(SUPPORTED_PROVIDERS)}."
    )


def create_agent(config: dict[str, Any]) -> DuetAgent:
    """Instantiate the AI partner for one agent config."""
    provider = str(config.get("provider", "gemini")).lower()
    if provider == "random":
        return RandomDuetAgent(agent_id="random-ai")
    client = build_llm_client(provider, config.get("model"))
    return LLMDuetAgent(
        agent_id=f"{provider}-ai",
        llm_client=client,
        max_retries=int(config.get("max_retries", 2)),
    )
