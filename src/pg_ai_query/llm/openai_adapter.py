"""OpenAI implementation of the LLM client interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from pg_ai_query.llm.base import GenerateOptions, HTTPLLMClient, LLMError
from pg_ai_query.models.provider import ModelProfile, Provider


@dataclass(frozen=True)
class OpenAIAdapter(HTTPLLMClient):
    """Generate text using the OpenAI Chat Completions API."""

    provider: ClassVar[Provider] = Provider.OPENAI
    fallback_model: ClassVar[str] = "gpt-4o"
    api_key_env: ClassVar[str] = "OPENAI_API_KEY"
    default_models: ClassVar[tuple[ModelProfile, ...]] = (
        ModelProfile(
            name="gpt-4o",
            description="GPT-4 Omni - Latest model",
            max_tokens=16384,
            temperature=0.7,
        ),
        ModelProfile(
            name="gpt-4",
            description="GPT-4 - High quality model",
            max_tokens=8192,
            temperature=0.7,
        ),
        ModelProfile(
            name="gpt-3.5-turbo",
            description="GPT-3.5 Turbo - Fast and efficient",
            max_tokens=4096,
            temperature=0.7,
        ),
    )

    base_url: str = "https://api.openai.com/v1"

    def _endpoint(self) -> str:
        return self.base_url.rstrip("/") + "/chat/completions"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _request_body(self, options: GenerateOptions) -> dict[str, object]:
        return {
            "model": options.model,
            "max_tokens": options.resolved_max_tokens,
            "temperature": options.resolved_temperature,
            "messages": [
                {"role": "system", "content": options.system_prompt},
                {"role": "user", "content": options.user_prompt},
            ],
        }

    def _extract_text(self, payload: dict[str, object]) -> str:
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise LLMError("OpenAI response is missing choices.")

        first = choices[0]
        if not isinstance(first, dict):
            raise LLMError("OpenAI response has invalid choice format.")

        message = first.get("message")
        if not isinstance(message, dict):
            raise LLMError("OpenAI response is missing message content.")

        content = message.get("content")
        if content is None:
            return ""
        if not isinstance(content, str):
            raise LLMError("OpenAI message content is not text.")
        return content
