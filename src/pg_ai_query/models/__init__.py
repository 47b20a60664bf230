"""Typed records used across the generation pipeline."""

from pg_ai_query.models.generation import (
    ErrorKind,
    ExtractedResponse,
    GenerationFailure,
    GenerationRequest,
    ModelOutcome,
    ProviderPreference,
)
from pg_ai_query.models.provider import ModelProfile, Provider, ProviderProfile

__all__ = [
    "ErrorKind",
    "ExtractedResponse",
    "GenerationFailure",
    "GenerationRequest",
    "ModelOutcome",
    "ModelProfile",
    "Provider",
    "ProviderPreference",
    "ProviderProfile",
]
