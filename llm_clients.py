"""
LLM Client Abstraction Layer.

Provides a unified interface for the providers that can generate
productivity recommendations. Clients are constructed explicitly and
handed to the recommendation service; nothing here is a global.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from config import RecommendationConfig, LLMProvider

logger = logging.getLogger(__name__)


@dataclass
class Message:
    """A message in the conversation."""
    role: str  # "user", "assistant"
    content: str


@dataclass
class LLMResponse:
    """Response from an LLM."""
    content: str
    stop_reason: str  # "end_turn", "max_tokens"
    usage: dict = field(default_factory=dict)  # {"input_tokens": X, "output_tokens": Y}


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    def __init__(self, config: RecommendationConfig):
        self.config = config
        self._client = None

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the client connection."""
        pass

    @abstractmethod
    async def chat(
        self,
        messages: list[Message],
        system_prompt: Optional[str] = None
    ) -> LLMResponse:
        """
        Send a chat request to the LLM.

        Args:
            messages: Conversation history
            system_prompt: Optional system prompt

        Returns:
            LLM response text
        """
        pass

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        if self._client is not None and hasattr(self._client, "close"):
            await self._client.close()
        self._client = None


class AnthropicClient(BaseLLMClient):
    """Client for Anthropic's Claude API."""

    async def initialize(self) -> None:
        from anthropic import AsyncAnthropic
        self._client = AsyncAnthropic(api_key=self.config.api_key)

    async def chat(
        self,
        messages: list[Message],
        system_prompt: Optional[str] = None
    ) -> LLMResponse:
        if self._client is None:
            await self.initialize()

        response = await self._client.messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            system=system_prompt or "",
            messages=[{"role": msg.role, "content": msg.content} for msg in messages],
        )

        content = "".join(block.text for block in response.content if block.type == "text")

        return LLMResponse(
            content=content,
            stop_reason="max_tokens" if response.stop_reason == "max_tokens" else "end_turn",
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens
            }
        )


class OpenAIClient(BaseLLMClient):
    """Client for OpenAI's API."""

    async def initialize(self) -> None:
        from openai import AsyncOpenAI
        self._client = AsyncOpenAI(
            api_key=self.config.api_key,
            max_retries=3,
            timeout=60.0,
        )

    async def chat(
        self,
        messages: list[Message],
        system_prompt: Optional[str] = None
    ) -> LLMResponse:
        if self._client is None:
            await self.initialize()

        openai_messages = []
        if system_prompt:
            openai_messages.append({"role": "system", "content": system_prompt})
        openai_messages.extend({"role": msg.role, "content": msg.content} for msg in messages)

        kwargs = {
            "model": self.config.model,
            "messages": openai_messages,
            "temperature": self.config.temperature,
        }

        # GPT-5 models use max_completion_tokens instead of max_tokens
        if "gpt-5" in self.config.model.lower():
            kwargs["max_completion_tokens"] = self.config.max_tokens
        else:
            kwargs["max_tokens"] = self.config.max_tokens

        response = await self._client.chat.completions.create(**kwargs)

        choice = response.choices[0]
        logger.debug(f"OpenAI response: finish_reason={choice.finish_reason}")

        return LLMResponse(
            content=choice.message.content or "",
            stop_reason="max_tokens" if choice.finish_reason == "length" else "end_turn",
            usage={
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens
            }
        )


def create_llm_client(config: RecommendationConfig) -> BaseLLMClient:
    """
    Factory function to create the LLM client for a recommendation config.

    The client is not initialized; call initialize() or let the first
    chat() do it.
    """
    clients = {
        LLMProvider.CLAUDE: AnthropicClient,
        LLMProvider.OPENAI: OpenAIClient,
    }

    client_class = clients.get(config.provider)
    if not client_class:
        raise ValueError(f"Unsupported LLM provider: {config.provider}")

    return client_class(config)
