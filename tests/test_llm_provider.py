"""Tests for the LiteLLM model client.

Tests coverage for:
- src/hedgehog/core/llm/litellm_provider.py
- src/hedgehog/core/llm/provider.py
"""

from __future__ import annotations

from unittest.mock import AsyncMock, Mock, patch

import pytest

from hedgehog.core.llm.litellm_provider import LiteLLMProvider
from hedgehog.core.llm.provider import Message, ModelClient, Role, build_messages
from tests.utils import aiter_of, create_mock_llm_stream_chunk


class TestMessages:
    def test_system_then_user(self):
        messages = build_messages("Review this", "You are a reviewer.")

        assert messages == [
            Message(Role.SYSTEM, "You are a reviewer."),
            Message(Role.USER, "Review this"),
        ]

    def test_empty_system_prompt_is_omitted(self):
        assert build_messages("Review this", "") == [Message(Role.USER, "Review this")]


class TestLiteLLMProvider:
    """Tests for LiteLLMProvider."""

    def test_initialization(self):
        provider = LiteLLMProvider("replicate/anthropic/claude-3.7-sonnet", api_key="r8_test")

        assert provider.model == "replicate/anthropic/claude-3.7-sonnet"
        assert isinstance(provider, ModelClient)

    def test_extra_options_are_passed_through(self):
        provider = LiteLLMProvider("gpt-4o", api_base="http://localhost:4000", seed=1)

        kwargs = provider._build_kwargs([Message(Role.USER, "hi")], max_tokens=10)

        assert kwargs["seed"] == 1
        assert kwargs["api_base"] == "http://localhost:4000"

    def test_build_kwargs(self):
        """Test _build_kwargs constructs a streaming call."""
        provider = LiteLLMProvider(
            "replicate/anthropic/claude-3.7-sonnet",
            api_key="r8_test",
            api_base="http://localhost:8000",
        )

        kwargs = provider._build_kwargs(
            build_messages("Hello!", "You are helpful."),
            max_tokens=4096,
        )

        assert kwargs["model"] == "replicate/anthropic/claude-3.7-sonnet"
        assert kwargs["max_tokens"] == 4096
        assert kwargs["stream"] is True
        assert kwargs["api_key"] == "r8_test"
        assert kwargs["api_base"] == "http://localhost:8000"
        assert kwargs["messages"] == [
            {"role": "system", "content": "You are helpful."},
            {"role": "user", "content": "Hello!"},
        ]

    def test_build_kwargs_without_credentials(self):
        provider = LiteLLMProvider("ollama/codellama")

        kwargs = provider._build_kwargs([Message(Role.USER, "hi")], max_tokens=10)

        assert "api_key" not in kwargs
        assert "api_base" not in kwargs

    @pytest.mark.asyncio
    async def test_stream_success(self):
        """Test chunks are yielded as plain text in order."""
        provider = LiteLLMProvider("replicate/anthropic/claude-3.7-sonnet", api_key="r8_test")

        chunks = [
            create_mock_llm_stream_chunk("Hello", False),
            create_mock_llm_stream_chunk(" world", False),
            create_mock_llm_stream_chunk("!", True),
        ]

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acompletion:
            mock_acompletion.return_value = aiter_of(chunks)

            collected = [
                text
                async for text in provider.stream(
                    "Test prompt", system_prompt="Be brief.", max_tokens=4096
                )
            ]

            assert collected == ["Hello", " world", "!"]

            mock_acompletion.assert_called_once()
            call_kwargs = mock_acompletion.call_args.kwargs
            assert call_kwargs["stream"] is True
            assert call_kwargs["max_tokens"] == 4096
            assert call_kwargs["api_key"] == "r8_test"
            assert call_kwargs["messages"][-1] == {"role": "user", "content": "Test prompt"}

    @pytest.mark.asyncio
    async def test_stream_skips_empty_deltas(self):
        """Test empty, missing and choiceless chunks are skipped."""
        provider = LiteLLMProvider("gpt-4o")

        no_choices = Mock()
        no_choices.choices = []

        chunks = [
            create_mock_llm_stream_chunk("Text", False),
            create_mock_llm_stream_chunk("", False),
            create_mock_llm_stream_chunk(None, False),
            no_choices,
            create_mock_llm_stream_chunk("More", True),
        ]

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acompletion:
            mock_acompletion.return_value = aiter_of(chunks)

            collected = [text async for text in provider.stream("Test", system_prompt="")]

            assert collected == ["Text", "More"]

    @pytest.mark.asyncio
    async def test_stream_error_propagates(self):
        """Test failures opening the stream reach the caller."""
        provider = LiteLLMProvider("gpt-4o")

        with patch("litellm.acompletion", new_callable=AsyncMock) as mock_acompletion:
            mock_acompletion.side_effect = ConnectionError("API unavailable")

            with pytest.raises(ConnectionError, match="API unavailable"):
                async for _ in provider.stream("Test", system_prompt="x"):
                    pass
