"""Provider-specific LLM clients speaking each vendor's HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .env_utils import getenv_any, require_env_any
from .http_utils import post_json

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_OLLAMA_MODEL = "llama3.1"

_ANTHROPIC_MODEL_ALIASES = {
    "claude-3-5-sonnet-latest": DEFAULT_ANTHROPIC_MODEL,
    "claude-3-5-sonnet-20241022": DEFAULT_ANTHROPIC_MODEL,
}


def _normalize_anthropic_model(model: str) -> str:
    normalized = model.strip()
    if not normalized:
        return DEFAULT_ANTHROPIC_MODEL
    return _ANTHROPIC_MODEL_ALIASES.get(normalized.lower(), normalized)


def _anthropic_messages_url(base_url: str) -> str:
    normalized = (base_url or "https://api.anthropic.com").rstrip("/")
    if normalized.endswith("/v1/messages"):
        return normalized
    if normalized.endswith("/v1"):
        return f"{normalized}/messages"
    return f"{normalized}/v1/messages"


def _extract_openai_content(response: dict[str, Any]) -> str:
    choices = response.get("choices", [])
    if not choices:
        raise ValueError("Provider response did not include choices.")
    message = choices[0].get("message", {})
    content = message.get("content")
    if isinstance(content, list):
        # Some providers return structured content blocks.
        content = "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    if not isinstance(content, str):
        raise ValueError("Provider response message content was not a string.")
    return content


def _extract_gemini_content(response: dict[str, Any]) -> str:
    candidates = response.get("candidates", [])
    if not candidates:
        feedback = response.get("promptFeedback")
        raise ValueError(f"Gemini response did not include candidates: {feedback}")
    parts = candidates[0].get("content", {}).get("parts", [])
    joined = "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()
    if not joined:
        raise ValueError("Gemini response contained no text content.")
    return joined


@dataclass(frozen=True)
class GeminiClient:
    """Google Generative Language `generateContent` client, asking for JSON output."""

    model: str = DEFAULT_GEMINI_MODEL
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout_sec: float = 60.0
    temperature: float = 0.7
    api_key_env: tuple[str, ...] = ("GEMINI_API_KEY", "GOOGLE_API_KEY")

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        api_key = require_env_any(*self.api_key_env)
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "responseMimeType": "application/json",
            },
        }
        if system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        response = post_json(
            url=f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent",
            payload=payload,
            headers={"x-goog-api-key": api_key},
            timeout_sec=self.timeout_sec,
        )
        return _extract_gemini_content(response)


@dataclass(frozen=True)
class OpenAIChatClient:
    """OpenAI Chat Completions API client."""

    model: str = DEFAULT_OPENAI_MODEL
    base_url: str = "https://api.openai.com/v1"
    timeout_sec: float = 60.0
    temperature: float = 0.0
    max_tokens: int | None = None
    api_key_env: tuple[str, ...] = ("OPENAI_API_KEY",)

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        api_key = require_env_any(*self.api_key_env)
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
        }
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens
        response = post_json(
            url=f"{self.base_url.rstrip('/')}/chat/completions",
            payload=payload,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout_sec=self.timeout_sec,
        )
        return _extract_openai_content(response)


@dataclass(frozen=True)
class AnthropicMessagesClient:
    """Anthropic Messages API client."""

    model: str = DEFAULT_ANTHROPIC_MODEL
    base_url: str = "https://api.anthropic.com"
    timeout_sec: float = 60.0
    temperature: float = 0.0
    max_tokens: int = 1024
    anthropic_version: str = "2023-06-01"
    api_key_env: tuple[str, ...] = ("ANTHROPIC_API_KEY",)

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        api_key = require_env_any(*self.api_key_env)
        model = _normalize_anthropic_model(self.model)
        base_url = getenv_any("ANTHROPIC_BASE_URL", default=self.base_url) or self.base_url
        payload: dict[str, Any] = {
            "model": model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            payload["system"] = system_prompt
        response = post_json(
            url=_anthropic_messages_url(base_url),
            payload=payload,
            headers={"x-api-key": api_key, "anthropic-version": self.anthropic_version},
            timeout_sec=self.timeout_sec,
        )
        content = response.get("content", [])
        if not content:
            raise ValueError("Anthropic response did not include content blocks.")
        joined = "".join(
            block.get("text", "")
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ).strip()
        if not joined:
            raise ValueError("Anthropic response contained no text content.")
        return joined


@dataclass(frozen=True)
class OllamaClient:
    """Local Ollama chat client."""

    model: str = DEFAULT_OLLAMA_MODEL
    base_url: str = "http://127.0.0.1:11434"
    timeout_sec: float = 120.0
    temperature: float = 0.0

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "format": "json",
            "options": {"temperature": self.temperature},
        }
        response = post_json(
            url=f"{self.base_url.rstrip('/')}/api/chat",
            payload=payload,
            headers={},
            timeout_sec=self.timeout_sec,
        )
        message = response.get("message", {})
        content = message.get("content")
        if not isinstance(content, str):
            raise ValueError("Ollama response did not include message.content.")
        return content
