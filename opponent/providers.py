"""
LLM provider abstraction layer.

Wraps the hosted model APIs (Anthropic, OpenAI) behind a common interface
so the opponent is model-agnostic. When the caller passes a JSON schema
for the move, each provider asks its API for output constrained to it:
Anthropic through a forced tool call, OpenAI through a json_schema
response format. Either way the reply comes back as JSON text, so
extraction sees the same shape whatever the backend.
"""

from __future__ import annotations

import json
import os
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

MOVE_TOOL_NAME = "submit_move"


@dataclass
class LLMResponse:
    """Response from an LLM API call."""

    content: str
    model: str
    input_tokens: int
    output_tokens: int
    latency_ms: float


class LLMProvider(ABC):
    """Abstract LLM provider interface."""

    @abstractmethod
    def complete(
        self,
        system: str,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 512,
        response_schema: dict | None = None,
    ) -> LLMResponse:
        """Send a completion request.

        Args:
            system: System prompt
            messages: List of {role, content} message dicts
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            response_schema: JSON schema the reply must follow, if any

        Returns:
            LLMResponse whose content is plain text, or JSON text when a
            schema was given
        """
        ...

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Exact model identifier for reproducibility."""
        ...


class AnthropicProvider(LLMProvider):
    """Anthropic Claude API provider. A schema becomes a single forced tool."""

    def __init__(self, model: str = "claude-sonnet-4-20250514", api_key: str | None = None):
        self._model = model
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                import anthropic
            except ImportError as err:
                raise ImportError("anthropic package required. Install with: pip install anthropic") from err
            self._client = anthropic.Anthropic(api_key=self._api_key)
        return self._client

    @property
    def model_id(self) -> str:
        return self._model

    def complete(
        self,
        system: str,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 512,
        response_schema: dict | None = None,
    ) -> LLMResponse:
        client = self._get_client()
        request = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system,
            "messages": messages,
        }
        if response_schema is not None:
            request["tools"] = [
                {
                    "name": MOVE_TOOL_NAME,
                    "description": "Submit your move for this turn.",
                    "input_schema": response_schema,
                }
            ]
            request["tool_choice"] = {"type": "tool", "name": MOVE_TOOL_NAME}

        start = time.monotonic()
        response = client.messages.create(**request)
        elapsed = (time.monotonic() - start) * 1000

        # A tool call carries the move; text blocks are the fallback
        content = ""
        for block in response.content:
            if block.type == "tool_use" and block.name == MOVE_TOOL_NAME:
                content = json.dumps(block.input)
                break
            if block.type == "text":
                content += block.text

        return LLMResponse(
            content=content,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            latency_ms=elapsed,
        )


class OpenAIProvider(LLMProvider):
    """OpenAI API provider. Always requests JSON; a schema makes it structured output."""

    def __init__(self, model: str = "gpt-4o", api_key: str | None = None):
        self._model = model
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._client = None

    def _get_client(self):
        if self._client is None:
            try:
                import openai
            except ImportError as err:
                raise ImportError("openai package required. Install with: pip install openai") from err
            self._client = openai.OpenAI(api_key=self._api_key)
        return self._client

    @property
    def model_id(self) -> str:
        return self._model

    def complete(
        self,
        system: str,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 512,
        response_schema: dict | None = None,
    ) -> LLMResponse:
        client = self._get_client()
        if response_schema is not None:
            response_format = {
                "type": "json_schema",
                "json_schema": {"name": MOVE_TOOL_NAME, "schema": response_schema},
            }
        else:
            response_format = {"type": "json_object"}

        start = time.monotonic()
        response = client.chat.completions.create(
            model=self._model,
            messages=[{"role": "system", "content": system}, *messages],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format=response_format,
        )
        elapsed = (time.monotonic() - start) * 1000

        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=response.model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            latency_ms=elapsed,
        )


class MockProvider(LLMProvider):
    """Mock provider for testing without API calls.

    Returns configured responses in order. An Exception instance in the
    list is raised instead, to simulate a failed request.
    """

    def __init__(self, responses: list[str | Exception] | None = None):
        self._responses = list(responses) if responses else []
        self.call_log: list[dict] = []

    @property
    def model_id(self) -> str:
        return "mock-model"

    def complete(
        self,
        system: str,
        messages: list[dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 512,
        response_schema: dict | None = None,
    ) -> LLMResponse:
        self.call_log.append(
            {
                "system": system,
                "messages": messages,
                "response_schema": response_schema,
            }
        )
        content = self._responses.pop(0) if self._responses else ""
        if isinstance(content, Exception):
            raise content
        return LLMResponse(
            content=content,
            model="mock-model",
            input_tokens=100,
            output_tokens=50,
            latency_ms=10.0,
        )


PROVIDERS = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
}


def create_provider(name: str, model: str | None = None) -> LLMProvider:
    """Build a provider by name ('anthropic' or 'openai').

    Raises:
        ValueError: If the name is unknown
    """
    try:
        provider_cls = PROVIDERS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown provider '{name}'. Choose from: {', '.join(PROVIDERS)}") from None
    return provider_cls(model=model) if model else provider_cls()
