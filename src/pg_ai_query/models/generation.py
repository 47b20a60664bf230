"""Typed request, model payload and outcome records for SQL generation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProviderPreference(str, Enum):
    """Provider choice carried by a generation request."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    AUTO = "auto"


class ErrorKind(str, Enum):
    """Terminal failure categories of a generation run."""

    EMPTY_INPUT = "EmptyInput"
    NO_CREDENTIAL = "NoCredential"
    CLIENT_INIT_ERROR = "ClientInitError"
    PROVIDER_ERROR = "ProviderError"
    EMPTY_RESPONSE = "EmptyResponse"
    UNSAFE_QUERY = "UnsafeQuery"
    INTERNAL_ERROR = "InternalError"


class GenerationRequest(BaseModel):
    """Natural-language request plus optional credential and provider choice."""

    model_config = ConfigDict(frozen=True)

    natural_language: str
    api_key: str | None = None
    provider: ProviderPreference = ProviderPreference.AUTO

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, value: object) -> object:
        if value is None:
            return ProviderPreference.AUTO
        if isinstance(value, str):
            normalized = value.strip().lower()
            return normalized or ProviderPreference.AUTO
        return value

    @field_validator("api_key")
    @classmethod
    def normalize_api_key(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class GenerationFailure(BaseModel):
    """Failure result returned by a pipeline stage."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = Field(min_length=1)


class ExtractedResponse(BaseModel):
    """Structured fields recovered from free-form model text."""

    model_config = ConfigDict(frozen=True)

    sql: str = ""
    explanation: str = ""
    warnings: list[str] = Field(default_factory=list)
    row_limit_applied: bool = False
    suggested_visualization: str = "table"


class ModelOutcome(BaseModel):
    """Result of one generation run as returned to callers."""

    model_config = ConfigDict(frozen=True)

    success: bool
    generated_query: str = ""
    explanation: str = ""
    warnings: list[str] = Field(default_factory=list)
    row_limit_applied: bool = False
    suggested_visualization: str = "table"
    error_kind: ErrorKind | None = None
    error_message: str = ""

    @model_validator(mode="after")
    def check_failure_shape(self) -> "ModelOutcome":
        if not self.success:
            if self.generated_query:
                raise ValueError("failed outcomes cannot carry a generated query.")
            if not self.error_message or self.error_kind is None:
                raise ValueError("failed outcomes need an error kind and message.")
        return self

    @property
    def needs_clarification(self) -> bool:
        """True when the model asked a question instead of returning SQL."""
        return self.success and not self.generated_query

    @classmethod
    def failed(cls, failure: GenerationFailure) -> "ModelOutcome":
        return cls(
            success=False,
            error_kind=failure.kind,
            error_message=failure.message,
        )
