"""Provider and model profiles shared by configuration and LLM adapters."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """Known LLM vendors."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return {
            Provider.OPENAI: "OpenAI",
            Provider.ANTHROPIC: "Anthropic",
        }.get(self, "Unknown")


class ModelProfile(BaseModel):
    """Generation parameters registered for a named model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class ProviderProfile(BaseModel):
    """Configured state of one provider: credential and model catalogue."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    api_key: str = ""
    api_key_source: str = ""
    available_models: tuple[ModelProfile, ...] = ()
    default_model: ModelProfile | None = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    def find_model(self, name: str) -> ModelProfile | None:
        for model in self.available_models:
            if model.name == name:
                return model
        return None
