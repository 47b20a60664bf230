"""LLM adapters and factory helpers."""

from __future__ import annotations

import logging

from pg_ai_query.llm.anthropic_adapter import AnthropicAdapter
from pg_ai_query.llm.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    GenerateOptions,
    HTTPLLMClient,
    LLMClient,
    LLMConfigError,
    LLMError,
    LLMResponse,
)
from pg_ai_query.llm.openai_adapter import OpenAIAdapter
from pg_ai_query.models.provider import Provider

logger = logging.getLogger(__name__)

ADAPTERS: dict[Provider, type[HTTPLLMClient]] = {
    Provider.OPENAI: OpenAIAdapter,
    Provider.ANTHROPIC: AnthropicAdapter,
}


def adapter_for(provider: Provider) -> type[HTTPLLMClient]:
    """Adapter class for a provider; unknown providers map to OpenAI."""
    adapter = ADAPTERS.get(provider)
    if adapter is None:
        logger.warning("Unknown provider %r, defaulting to OpenAI", provider.value)
        return OpenAIAdapter
    return adapter


def create_llm_client(
    provider: Provider,
    api_key: str,
    *,
    timeout_seconds: float = 30.0,
    max_retries: int = 3,
) -> LLMClient:
    """Create the LLM client for a resolved provider and credential."""
    adapter = adapter_for(provider)
    logger.info("Creating %s client", adapter.provider.display_name)
    return adapter(
        api_key=api_key,
        timeout_seconds=timeout_seconds,
        max_retries=max_retries,
    )


__all__ = [
    "ADAPTERS",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_TEMPERATURE",
    "AnthropicAdapter",
    "GenerateOptions",
    "LLMClient",
    "LLMConfigError",
    "LLMError",
    "LLMResponse",
    "OpenAIAdapter",
    "adapter_for",
    "create_llm_client",
]
