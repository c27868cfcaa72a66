"""
Tests for the LLM client wrappers with the provider SDK clients mocked out
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from config import LLMProvider, RecommendationConfig
from llm_clients import AnthropicClient, Message, OpenAIClient, create_llm_client


def _config(provider=LLMProvider.CLAUDE, model="claude-sonnet-4-20250514"):
    return RecommendationConfig(enabled=True, provider=provider, model=model, api_key="test-key", max_tokens=512)


def _openai_response(content="{}", finish_reason="stop"):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)],
        usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5),
    )


class TestFactory:

    def test_provider_selects_client(self):
        assert isinstance(create_llm_client(_config()), AnthropicClient)
        assert isinstance(create_llm_client(_config(LLMProvider.OPENAI, "gpt-4o-mini")), OpenAIClient)


class TestAnthropicClient:

    @pytest.mark.asyncio
    async def test_chat_joins_text_blocks(self):
        client = AnthropicClient(_config())
        sdk = MagicMock()
        sdk.messages.create = AsyncMock(return_value=SimpleNamespace(
            content=[
                SimpleNamespace(type="text", text='{"recommendations": '),
                SimpleNamespace(type="text", text="[]}"),
            ],
            stop_reason="end_turn",
            usage=SimpleNamespace(input_tokens=12, output_tokens=3),
        ))
        client._client = sdk

        response = await client.chat([Message(role="user", content="hi")], system_prompt="be brief")

        assert response.content == '{"recommendations": []}'
        assert response.stop_reason == "end_turn"
        assert response.usage == {"input_tokens": 12, "output_tokens": 3}
        kwargs = sdk.messages.create.call_args.kwargs
        assert kwargs["system"] == "be brief"
        assert kwargs["max_tokens"] == 512
        assert kwargs["messages"] == [{"role": "user", "content": "hi"}]


class TestOpenAIClient:

    @pytest.mark.asyncio
    async def test_system_prompt_is_first_message(self):
        client = OpenAIClient(_config(LLMProvider.OPENAI, "gpt-4o-mini"))
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(return_value=_openai_response())
        client._client = sdk

        await client.chat([Message(role="user", content="hi")], system_prompt="be brief")

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "be brief"}
        assert kwargs["max_tokens"] == 512
        assert "max_completion_tokens" not in kwargs

    @pytest.mark.asyncio
    async def test_gpt5_uses_max_completion_tokens(self):
        client = OpenAIClient(_config(LLMProvider.OPENAI, "gpt-5-mini"))
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(return_value=_openai_response(finish_reason="length"))
        client._client = sdk

        response = await client.chat([Message(role="user", content="hi")])

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["max_completion_tokens"] == 512
        assert "max_tokens" not in kwargs
        assert response.stop_reason == "max_tokens"

    @pytest.mark.asyncio
    async def test_close_releases_sdk_client(self):
        client = OpenAIClient(_config(LLMProvider.OPENAI, "gpt-4o-mini"))
        sdk = MagicMock()
        sdk.close = AsyncMock()
        client._client = sdk

        await client.close()

        sdk.close.assert_awaited_once()
        assert client._client is None
