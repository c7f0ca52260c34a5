"""Unit tests for LLMAgent JSON extraction, repair and error handling."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from framework.agents.llm_agent import LLMAgent, StubLLMClient, extract_json_object
from framework.errors import AgentExecutionError, ConfigurationError


@dataclass
class _FailingClient:
    """LLM client stub that always raises."""

    error: Exception

    def complete(self, prompt: str, *, system_prompt: str | None = None) -> str:  # noqa: ARG002
        raise self.error


def _count_parser(payload: dict) -> int:
    if "count" not in payload:
        raise ValueError("missing count")
    return int(payload["count"])


def test_extract_json_object_handles_fences_and_chatter() -> None:
    assert extract_json_object('{"a": 1}') == {"a": 1}
    assert extract_json_object('```json\n{"a": 2}\n```') == {"a": 2}
    assert extract_json_object('Sure! Here you go: {"a": 3} Good luck.') == {"a": 3}
    with pytest.raises(ValueError, match="No JSON object"):
        extract_json_object("no braces here")


def test_request_json_parses_first_reply_and_records_context() -> None:
    client = StubLLMClient(['{"count": 4}'])
    agent = LLMAgent("llm", client, system_prompt="be terse")

    assert agent.request_json("how many?", _count_parser, purpose="count") == 4
    assert client.prompts == ["how many?"]

    context = agent.debug_context()
    assert context is not None
    assert context["purpose"] == "count"
    assert context["selected_payload"] == {"count": 4}
    assert context["repair_prompts"] == []


def test_request_json_repairs_bad_reply() -> None:
    client = StubLLMClient(["not-json", '{"count": 2}'])
    agent = LLMAgent("llm", client, max_retries=2)

    assert agent.request_json("how many?", _count_parser) == 2
    assert len(client.prompts) == 2
    assert client.prompts[1].startswith("Repair the response")
    assert "not-json" in client.prompts[1]


def test_request_json_raises_after_retries_exhausted() -> None:
    client = StubLLMClient(["not-json", '{"other": 1}', "still not-json"])
    agent = LLMAgent("llm", client, max_retries=2)

    with pytest.raises(AgentExecutionError, match="valid move JSON") as excinfo:
        agent.request_json("how many?", _count_parser)

    assert excinfo.value.agent_id == "llm"
    assert len(client.prompts) == 3
    context = agent.debug_context()
    assert context is not None
    assert len(context["parse_errors"]) == 3
    assert len(context["raw_responses"]) == 3


def test_request_json_wraps_provider_failure() -> None:
    agent = LLMAgent("llm", _FailingClient(RuntimeError("request timeout")), max_retries=1)

    with pytest.raises(AgentExecutionError, match="request timeout"):
        agent.request_json("how many?", _count_parser, purpose="clue")


def test_request_json_lets_configuration_errors_through() -> None:
    agent = LLMAgent("llm", _FailingClient(ConfigurationError("Missing API key")))

    with pytest.raises(ConfigurationError, match="Missing API key"):
        agent.request_json("how many?", _count_parser)


def test_reset_clears_debug_context() -> None:
    agent = LLMAgent("llm", StubLLMClient(['{"count": 1}']))
    agent.request_json("how many?", _count_parser)
    assert agent.debug_context() is not None

    agent.reset("g1", 1, None)
    assert agent.debug_context() is None
