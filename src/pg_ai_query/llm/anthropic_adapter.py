"""Anthropic implementation of the LLM client interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from pg_ai_query.llm.base import GenerateOptions, HTTPLLMClient, LLMError
from pg_ai_query.models.provider import ModelProfile, Provider

ANTHROPIC_API_VERSION = "2023-06-01"


@dataclass(frozen=True)
class AnthropicAdapter(HTTPLLMClient):
    """Generate text using the Anthropic Messages API."""

    provider: ClassVar[Provider] = Provider.ANTHROPIC
    fallback_model: ClassVar[str] = "claude-3-5-sonnet-20241022"
    api_key_env: ClassVar[str] = "ANTHROPIC_API_KEY"
    default_models: ClassVar[tuple[ModelProfile, ...]] = (
        ModelProfile(
            name="claude-3-5-sonnet-20241022",
            description="Claude 3.5 Sonnet - Latest model",
            max_tokens=8192,
            temperature=0.7,
        ),
    )

    base_url: str = "https://api.anthropic.com/v1"

    def _endpoint(self) -> str:
        return self.base_url.rstrip("/") + "/messages"

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_API_VERSION,
            "Content-Type": "application/json",
        }

    def _request_body(self, options: GenerateOptions) -> dict[str, object]:
        return {
            "model": options.model,
            "max_tokens": options.resolved_max_tokens,
            "temperature": options.resolved_temperature,
            "system": options.system_prompt,
            "messages": [{"role": "user", "content": options.user_prompt}],
        }

    def _extract_text(self, payload: dict[str, object]) -> str:
        content = payload.get("content")
        if not isinstance(content, list):
            raise LLMError("Anthropic response is missing content blocks.")

        parts: list[str] = []
        for block in content:
            if not isinstance(block, dict):
                raise LLMError("Anthropic response has invalid content block format.")
            if block.get("type") == "text" and isinstance(block.get("text"), str):
                parts.append(block["text"])
        return "".join(parts)
