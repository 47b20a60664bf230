import logging

import pytest

from pg_ai_query.models.generation import ErrorKind, GenerationFailure, GenerationRequest
from pg_ai_query.models.provider import Provider
from pg_ai_query.providers import ProviderSelection, resolve_provider


def _request(**kwargs):
    return GenerationRequest(natural_language="count orders", **kwargs)


def test_explicit_provider_uses_its_configured_key(make_settings):
    settings = make_settings(OPENAI_API_KEY="sk-openai", ANTHROPIC_API_KEY="sk-ant")

    selection = resolve_provider(_request(provider="anthropic"), settings)

    assert isinstance(selection, ProviderSelection)
    assert selection.provider is Provider.ANTHROPIC
    assert selection.api_key == "sk-ant"
    assert selection.api_key_source == "env"


def test_explicit_provider_prefers_inline_key(make_settings):
    settings = make_settings(ANTHROPIC_API_KEY="sk-ant")

    selection = resolve_provider(
        _request(provider="anthropic", api_key="sk-ant-inline"), settings
    )

    assert selection.provider is Provider.ANTHROPIC
    assert selection.api_key == "sk-ant-inline"
    assert selection.api_key_source == "parameter"


def test_explicit_provider_never_falls_back_to_another_provider(make_settings):
    settings = make_settings(OPENAI_API_KEY="sk-openai")

    result = resolve_provider(_request(provider="anthropic"), settings)

    assert isinstance(result, GenerationFailure)
    assert result.kind is ErrorKind.NO_CREDENTIAL
    assert "anthropic provider" in result.message
    assert "parameter" in result.message
    assert "~/.pg_ai.config" in result.message


def test_auto_with_inline_key_defaults_to_openai(make_settings):
    settings = make_settings(ANTHROPIC_API_KEY="sk-ant")

    selection = resolve_provider(_request(api_key="sk-inline"), settings)

    assert selection.provider is Provider.OPENAI
    assert selection.api_key == "sk-inline"
    assert selection.api_key_source == "parameter"


def test_auto_probes_openai_before_anthropic(make_settings):
    settings = make_settings(OPENAI_API_KEY="sk-openai", ANTHROPIC_API_KEY="sk-ant")

    selection = resolve_provider(_request(), settings)

    assert selection.provider is Provider.OPENAI
    assert selection.api_key == "sk-openai"


def test_auto_falls_through_to_anthropic(make_settings):
    settings = make_settings("[anthropic]\napi_key = sk-ant-file\n")

    selection = resolve_provider(_request(provider="AUTO"), settings)

    assert selection.provider is Provider.ANTHROPIC
    assert selection.api_key_source == "config"
    assert selection.profile.default_model.name == "claude-3-5-sonnet-20241022"


def test_no_credential_anywhere_fails(make_settings, caplog):
    result = resolve_provider(_request(), make_settings())

    assert isinstance(result, GenerationFailure)
    assert result.kind is ErrorKind.NO_CREDENTIAL
    assert "parameter" in result.message
    assert "No API key found" in caplog.text


def test_resolution_path_is_logged(make_settings, caplog):
    caplog.set_level(logging.INFO, logger="pg_ai_query")
    settings = make_settings(ANTHROPIC_API_KEY="sk-ant")

    resolve_provider(_request(), settings)

    assert "Auto-selecting Anthropic provider based on environment" in caplog.text


@pytest.mark.parametrize("value", [None, "", "  "])
def test_missing_preference_means_auto(value):
    assert GenerationRequest(natural_language="x", provider=value).provider.value == "auto"


def test_unknown_preference_is_rejected():
    with pytest.raises(ValueError):
        GenerationRequest(natural_language="x", provider="gemini")
