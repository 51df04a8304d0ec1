"""Construction of the generation client from :class:`LLMSettings`."""

from __future__ import annotations

from typing import Union

from ai_changelog.config.loader import PROVIDER_OLLAMA, LLMSettings
from ai_changelog.llm.anthropic_client import AnthropicClient
from ai_changelog.llm.ollama_client import OllamaClient


DEFAULT_OLLAMA_URL = "http://localhost"
DEFAULT_OLLAMA_PORT = 11434


def create_client(settings: LLMSettings) -> Union[AnthropicClient, OllamaClient]:
    """Return the client for ``settings.provider``."""
    if settings.provider == PROVIDER_OLLAMA:
        return OllamaClient(
            base_url=settings.base_url or DEFAULT_OLLAMA_URL,
            port=settings.port or DEFAULT_OLLAMA_PORT,
            model=settings.model,
            request_timeout=settings.request_timeout,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
        )
    return AnthropicClient(
        api_key=settings.api_key,
        model=settings.model,
        base_url=settings.base_url,
        request_timeout=settings.request_timeout,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
    )
