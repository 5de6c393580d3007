"""LLM Provider implementation using Anthropic Claude API."""

import os
from typing import Protocol

import anthropic

from ..errors import OracleError

DEFAULT_MODEL = "claude-sonnet-4-5"


class ILLMProvider(Protocol):
    """Abstraction for LLM access."""

    async def complete(
        self,
        messages: list[dict],  # [{"role": "user", "content": "..."}]
        system: str | None = None,
        max_tokens: int = 1024,
        tools: list[dict] | None = None,
    ) -> str:
        """Generate completion."""
        ...


class LLMProvider:
    """Anthropic Claude API provider."""

    def __init__(self, api_key: str | None = None, model: str | None = None):
        self._api_key = api_key or os.getenv("ANTHROPIC_API_KEY")
        if not self._api_key:
            raise ValueError("ANTHROPIC_API_KEY environment variable not set")

        self._model = model or os.getenv("ANTHROPIC_MODEL", DEFAULT_MODEL)
        self._client = anthropic.AsyncAnthropic(api_key=self._api_key)

    async def complete(
        self,
        messages: list[dict],  # [{"role": "user", "content": "..."}]
        system: str | None = None,
        max_tokens: int = 1024,
        tools: list[dict] | None = None,
    ) -> str:
        """Generate completion using Claude API.

        Server-side tools such as web search run inside the request; only
        the final text reaches the caller.
        """
        kwargs = {}
        if system:
            kwargs["system"] = system
        if tools:
            kwargs["tools"] = tools

        try:
            response = await self._client.messages.create(
                model=self._model,
                messages=messages,
                max_tokens=max_tokens,
                **kwargs,
            )
        except Exception as e:
            raise OracleError(f"LLM API error: {e}") from e

        # Only text blocks carry the answer
        return "".join(
            block.text for block in response.content if block.type == "text"
        )
