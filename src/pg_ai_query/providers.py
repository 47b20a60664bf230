"""Provider and credential resolution for generation requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pg_ai_query.config import Settings
from pg_ai_query.models.generation import (
    ErrorKind,
    GenerationFailure,
    GenerationRequest,
    ProviderPreference,
)
from pg_ai_query.models.provider import Provider, ProviderProfile

logger = logging.getLogger(__name__)

AUTO_PROBE_ORDER = (Provider.OPENAI, Provider.ANTHROPIC)

NO_CREDENTIAL_MESSAGE = (
    "API key required. Pass it as a parameter or set an OpenAI or Anthropic "
    "API key in ~/.pg_ai.config."
)

_SOURCE_LABELS = {
    "config": "configuration",
    "env": "environment",
}


@dataclass(frozen=True)
class ProviderSelection:
    """Provider chosen for a request, with the credential to use."""

    provider: Provider
    api_key: str
    api_key_source: str
    profile: ProviderProfile | None = None


def _describe_source(source: str) -> str:
    return _SOURCE_LABELS.get(source, source or "unknown source")


def _explicit_selection(
    provider: Provider,
    request: GenerationRequest,
    settings: Settings,
) -> ProviderSelection | GenerationFailure:
    profile = settings.get_provider(provider)
    if request.api_key:
        api_key, source = request.api_key, "parameter"
    elif profile is not None and profile.has_api_key:
        api_key, source = profile.api_key, profile.api_key_source
    else:
        logger.warning("No API key available for %s provider", provider.value)
        return GenerationFailure(
            kind=ErrorKind.NO_CREDENTIAL,
            message=(
                f"No API key available for {provider.value} provider. Please "
                "provide API key as parameter or configure it in ~/.pg_ai.config."
            ),
        )

    logger.info(
        "Explicit %s provider selection from parameter, API key from %s",
        provider.display_name,
        _describe_source(source),
    )
    return ProviderSelection(
        provider=provider,
        api_key=api_key,
        api_key_source=source,
        profile=profile,
    )


def resolve_provider(
    request: GenerationRequest,
    settings: Settings,
) -> ProviderSelection | GenerationFailure:
    """Choose provider and credential.

    An explicit preference wins and never falls back to another provider.
    Under ``auto`` an inline key means OpenAI; otherwise configured keys are
    probed in ``AUTO_PROBE_ORDER``.
    """
    if request.provider is not ProviderPreference.AUTO:
        return _explicit_selection(Provider(request.provider.value), request, settings)

    if request.api_key:
        logger.info(
            "Auto-selecting OpenAI provider (API key provided, no provider specified)"
        )
        return ProviderSelection(
            provider=Provider.OPENAI,
            api_key=request.api_key,
            api_key_source="parameter",
            profile=settings.get_provider(Provider.OPENAI),
        )

    for provider in AUTO_PROBE_ORDER:
        profile = settings.get_provider(provider)
        if profile is not None and profile.has_api_key:
            logger.info(
                "Auto-selecting %s provider based on %s",
                provider.display_name,
                _describe_source(profile.api_key_source),
            )
            return ProviderSelection(
                provider=provider,
                api_key=profile.api_key,
                api_key_source=profile.api_key_source,
                profile=profile,
            )

    logger.warning("No API key found in parameters, configuration or environment")
    return GenerationFailure(kind=ErrorKind.NO_CREDENTIAL, message=NO_CREDENTIAL_MESSAGE)
