"""Text-generation providers: prompt in, streamed text fragments out."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol

import anthropic
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from meeting_recap.config import Settings
from meeting_recap.errors import ConfigurationError, ProviderError
from meeting_recap.pipeline_config import LLMProvider

DEFAULT_MODELS: dict[LLMProvider, str] = {
    LLMProvider.ANTHROPIC: "claude-sonnet-4-20250514",
    LLMProvider.OPENAI: "gpt-4o",
    LLMProvider.OLLAMA: "llama3.2",
}


class TextGenerator(Protocol):
    """Anything that turns a prompt into a lazy sequence of text fragments."""

    def generate(self, prompt: str) -> AsyncIterator[str]: ...


class AnthropicGenerator:
    """Streams completions from the Anthropic Messages API."""

    def __init__(self, client: AsyncAnthropic, model: str, max_tokens: int = 4096) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, prompt: str) -> AsyncIterator[str]:
        try:
            async with self._client.messages.stream(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            ) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.APIError as exc:
            raise ProviderError(f"Anthropic request failed: {exc}") from exc


class OpenAIGenerator:
    """Streams chat completions from OpenAI or an OpenAI-compatible server."""

    def __init__(self, client: AsyncOpenAI, model: str, max_tokens: int = 4096) -> None:
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    async def generate(self, prompt: str) -> AsyncIterator[str]:
        try:
            stream = await self._client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                stream=True,
            )
            async for chunk in stream:
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except openai.APIError as exc:
            raise ProviderError(f"OpenAI request failed: {exc}") from exc


def get_generator(settings: Settings) -> TextGenerator:
    """Build the generator selected by ``settings.llm_provider``.

    Raises:
        ConfigurationError: Unknown provider, or no API key for a provider
            that needs one. Raised before any request is made.
    """
    try:
        provider = LLMProvider(settings.llm_provider.strip().lower())
    except ValueError as exc:
        raise ConfigurationError(f"Unknown provider: {settings.llm_provider}") from exc

    model = settings.llm_model or DEFAULT_MODELS[provider]

    if provider is LLMProvider.ANTHROPIC:
        if not settings.anthropic_api_key:
            raise ConfigurationError("Anthropic API key is required")
        return AnthropicGenerator(
            AsyncAnthropic(api_key=settings.anthropic_api_key), model, settings.max_tokens
        )

    if provider is LLMProvider.OPENAI:
        if not settings.openai_api_key:
            raise ConfigurationError("OpenAI API key is required")
        return OpenAIGenerator(
            AsyncOpenAI(api_key=settings.openai_api_key), model, settings.max_tokens
        )

    # Ollama serves an OpenAI-compatible API and ignores the key.
    client = AsyncOpenAI(
        base_url=f"{settings.ollama_base_url.rstrip('/')}/v1",
        api_key="ollama",
    )
    return OpenAIGenerator(client, model, settings.max_tokens)
