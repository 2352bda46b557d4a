"""LiteLLM model client.

Reaches hosted models through litellm, for example:
- Replicate: "replicate/anthropic/claude-3.7-sonnet"
- Anthropic: "claude-3-5-sonnet-20241022"
- OpenAI: "gpt-4o"
- Local: "ollama/codellama"

See https://docs.litellm.ai/docs/providers for the full list.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import litellm

from hedgehog.core.llm.provider import Message, build_messages
from hedgehog.logging import get_logger

log = get_logger("llm")


class LiteLLMProvider:
    """Model client using litellm for multi-provider support.

    Usage:
        provider = LiteLLMProvider("replicate/anthropic/claude-3.7-sonnet", api_key=token)

        async for text in provider.stream(prompt, system_prompt="You are..."):
            print(text, end="")
    """

    def __init__(
        self,
        model: str,
        *,
        api_key: str | None = None,
        api_base: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the provider.

        Args:
            model: litellm model identifier
            api_key: API key (litellm falls back to env vars if not provided)
            api_base: Custom API base URL
            **kwargs: Additional litellm options
        """
        self._model = model
        self._api_key = api_key
        self._api_base = api_base
        self._kwargs = kwargs

    @property
    def model(self) -> str:
        return self._model

    def _build_kwargs(self, messages: list[Message], *, max_tokens: int) -> dict[str, Any]:
        """Build kwargs for the litellm call."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": m.role.value, "content": m.content} for m in messages],
            "max_tokens": max_tokens,
            "stream": True,
            **self._kwargs,
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._api_base:
            kwargs["api_base"] = self._api_base
        return kwargs

    async def stream(
        self,
        prompt: str,
        *,
        system_prompt: str,
        max_tokens: int = 4096,
    ) -> AsyncIterator[str]:
        """Stream the reply to ``prompt`` as text chunks."""
        kwargs = self._build_kwargs(build_messages(prompt, system_prompt), max_tokens=max_tokens)
        log.debug("Requesting %s (max_tokens=%d)", self._model, max_tokens)

        response = await litellm.acompletion(**kwargs)

        async for chunk in response:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            text = delta.content if delta else None
            if text:
                yield text
