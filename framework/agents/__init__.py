"""LLM plumbing shared by game agents."""

from .env_utils import getenv_any, getenv_float, load_dotenv, require_env_any
from .llm_agent import LLMAgent, LLMClient, StubLLMClient, extract_json_object
from .provider_clients import (
    AnthropicMessagesClient,
    GeminiClient,
    OllamaClient,
    OpenAIChatClient,
)

__all__ = [
    "AnthropicMessagesClient",
    "GeminiClient",
    "LLMAgent",
    "LLMClient",
    "OllamaClient",
    "OpenAIChatClient",
    "StubLLMClient",
    "extract_json_object",
    "getenv_any",
    "getenv_float",
    "load_dotenv",
    "require_env_any",
]
