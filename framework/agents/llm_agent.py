"""Provider-agnostic LLM agent skeleton with strict JSON output."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Mapping, Protocol, Sequence, TypeVar

from ..errors import AgentExecutionError, ConfigurationError
from ..player import Agent

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LLMClient(Protocol):
    """Minimal protocol for LLM API adapters."""

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        """Return a model response for a prompt."""


class StubLLMClient:
    """Replays canned responses in order; the last one repeats."""

    def __init__(self, responses: Sequence[str]):
        if not responses:
            raise ValueError("StubLLMClient needs at least one response.")
        self.responses = list(responses)
        self.prompts: list[str] = []

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:
        self.prompts.append(prompt)
        index = min(len(self.prompts) - 1, len(self.responses) - 1)
        return self.responses[index]


def extract_json_object(raw: str) -> dict[str, Any]:
    """Pull one JSON object out of a model reply, tolerating fences and chatter."""
    raw = raw.strip()
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = None

    if isinstance(parsed, dict):
        return parsed

    match = re.search(r"\{[\s\S]*\}", raw)
    if not match:
        raise ValueError("No JSON object found in LLM output.")
    parsed = json.loads(match.group(0))
    if not isinstance(parsed, dict):
        raise ValueError("LLM output JSON must be an object.")
    return parsed


class LLMAgent(Agent):
    """LLM-backed agent that asks for one JSON object per request and repairs bad replies."""

    def __init__(
        self,
        agent_id: str,
        llm_client: LLMClient,
        *,
        system_prompt: str | None = None,
        max_retries: int = 2,
    ):
        super().__init__(agent_id=agent_id)
        self.llm_client = llm_client
        self.system_prompt = system_prompt
        self.max_retries = max_retries
        self._last_debug_context: dict[str, Any] | None = None

    def reset(self, game_id: str, seed: int | None, config: dict[str, Any] | None) -> None:
        """Clear per-game debug context."""
        self._last_debug_context = None

    def debug_context(self) -> Mapping[str, Any] | None:
        """Return diagnostics for the most recent request."""
        if self._last_debug_context is None:
            return None
        return dict(self._last_debug_context)

    def request_json(self, prompt: str, parser: Callable[[dict[str, Any]], T], *, purpose: str = "move") -> T:
        """Prompt the model and parse its JSON reply with `parser`.

        Parse failures trigger up to `max_retries` repair prompts. Configuration
        problems propagate unchanged; everything else becomes AgentExecutionError.
        """
        context: dict[str, Any] = {
            "agent_id": self.agent_id,
            "purpose": purpose,
            "system_prompt": self.system_prompt,
            "initial_prompt": prompt,
            "repair_prompts": [],
            "raw_responses": [],
            "parse_errors": [],
        }
        self._last_debug_context = context
        try:
            raw = self.llm_client.complete(prompt, system_prompt=self.system_prompt)
        except ConfigurationError:
            raise
        except Exception as exc:
            context["parse_errors"].append({"attempt": 1, "error": f"LLM request failed: {exc}"})
            logger.warning("LLM %s request failed for %s: %s", purpose, self.agent_id, exc)
            raise AgentExecutionError(self.agent_id, f"LLM {purpose} request failed: {exc}") from exc
        context["raw_responses"].append(raw)

        last_error: str | None = None
        for attempt in range(self.max_retries + 1):
            try:
                if raw is None:
                    raise ValueError("LLM returned no response.")
                payload = extract_json_object(raw)
                result = parser(payload)
                context["selected_payload"] = payload
                return result
            except Exception as exc:
                last_error = str(exc)
                context["parse_errors"].append({"attempt": attempt + 1, "error": last_error})
                if attempt >= self.max_retries:
                    break
                repair_prompt = self._build_repair_prompt(raw_response=raw, error=last_error)
                context["repair_prompts"].append(repair_prompt)
                try:
                    raw = self.llm_client.complete(repair_prompt, system_prompt=self.system_prompt)
                    context["raw_responses"].append(raw)
                except ConfigurationError:
                    raise
                except Exception as repair_exc:
                    last_error = f"LLM repair request failed: {repair_exc}"
                    context["parse_errors"].append({"attempt": attempt + 2, "error": last_error})
                    break

        logger.warning("LLM %s output unusable for %s: %s", purpose, self.agent_id, last_error)
        raise AgentExecutionError(self.agent_id, f"LLM could not produce valid {purpose} JSON: {last_error}")

    def _build_repair_prompt(self, *, raw_response: str | None, error: str) -> str:
        return (
            "Repair the response into valid JSON matching the requested schema.\n"
            "Return only the JSON object, no markdown.\n"
            f"Error: {error}\n"
            f"Original response:\n{raw_response}\n"
        )
