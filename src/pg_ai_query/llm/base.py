"""Provider-independent LLM client interface and shared HTTP transport."""

from __future__ import annotations

import http.client
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar
from urllib import error, request

from pg_ai_query.models.provider import ModelProfile, Provider

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 4096
DEFAULT_TEMPERATURE = 0.7

_RETRYABLE_STATUS = frozenset({408, 409, 429, 500, 502, 503, 504})


class LLMError(RuntimeError):
    """Raised inside adapters when a request to the provider fails."""


class LLMConfigError(ValueError):
    """Raised when an LLM client cannot be constructed."""


class _TransientLLMError(LLMError):
    """Failure worth retrying (network errors, throttling, 5xx)."""


@dataclass(frozen=True)
class GenerateOptions:
    """Model name, prompt pair and sampling parameters for one call."""

    model: str
    system_prompt: str
    user_prompt: str
    max_tokens: int | None = None
    temperature: float | None = None

    @property
    def resolved_max_tokens(self) -> int:
        return self.max_tokens if self.max_tokens is not None else DEFAULT_MAX_TOKENS

    @property
    def resolved_temperature(self) -> float:
        if self.temperature is not None:
            return self.temperature
        return DEFAULT_TEMPERATURE


@dataclass(frozen=True)
class LLMResponse:
    """Raw model text, or the transport error that prevented it."""

    text: str
    ok: bool
    error_message: str = ""


class LLMClient(ABC):
    """Abstract LLM adapter interface."""

    provider: ClassVar[Provider]
    fallback_model: ClassVar[str]
    api_key_env: ClassVar[str]
    default_models: ClassVar[tuple[ModelProfile, ...]] = ()

    @abstractmethod
    def generate(self, options: GenerateOptions) -> LLMResponse:
        """Run one completion; transport failures come back as ``ok=False``."""


def validate_api_key(api_key: str, provider: Provider) -> str:
    normalized = (api_key or "").strip()
    if not normalized:
        raise LLMConfigError(f"{provider.display_name} API key is empty.")
    if any(char.isspace() for char in normalized):
        raise LLMConfigError(
            f"{provider.display_name} API key has an invalid format "
            "(contains whitespace)."
        )
    return normalized


@dataclass(frozen=True)
class HTTPLLMClient(LLMClient):
    """JSON-over-HTTPS client with timeout and retry budget."""

    api_key: str
    base_url: str = ""
    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_backoff_seconds: float = 0.5

    def __post_init__(self) -> None:
        object.__setattr__(self, "api_key", validate_api_key(self.api_key, self.provider))
        if self.max_retries < 0:
            raise LLMConfigError("max_retries cannot be negative.")

    def generate(self, options: GenerateOptions) -> LLMResponse:
        body = self._request_body(options)
        try:
            payload = self._post_json(self._endpoint(), body)
            text = self._extract_text(payload)
        except LLMError as exc:
            logger.warning("%s request failed: %s", self.provider.display_name, exc)
            return LLMResponse(text="", ok=False, error_message=str(exc))
        return LLMResponse(text=text, ok=True)

    @abstractmethod
    def _endpoint(self) -> str:
        """Full URL of the completion endpoint."""

    @abstractmethod
    def _headers(self) -> dict[str, str]:
        """Provider authentication and content headers."""

    @abstractmethod
    def _request_body(self, options: GenerateOptions) -> dict[str, object]:
        """Provider-specific request payload."""

    @abstractmethod
    def _extract_text(self, payload: dict[str, object]) -> str:
        """Pull generated text out of a decoded response payload."""

    def _post_json(self, endpoint: str, body: dict[str, object]) -> dict[str, object]:
        attempts = self.max_retries + 1
        attempt = 1
        while True:
            try:
                return self._send(endpoint, body)
            except _TransientLLMError as exc:
                if attempt >= attempts:
                    raise LLMError(str(exc)) from exc
                logger.info(
                    "%s request attempt %d/%d failed: %s; retrying",
                    self.provider.display_name,
                    attempt,
                    attempts,
                    exc,
                )
                time.sleep(self.retry_backoff_seconds * attempt)
                attempt += 1

    def _send(self, endpoint: str, body: dict[str, object]) -> dict[str, object]:
        name = self.provider.display_name
        req = request.Request(
            endpoint,
            method="POST",
            data=json.dumps(body).encode("utf-8"),
            headers=self._headers(),
        )

        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as response:
                payload = json.loads(response.read().decode("utf-8"))
        except error.HTTPError as exc:
            details = exc.read().decode("utf-8", errors="replace")
            message = f"{name} request failed with HTTP {exc.code}: {details}"
            if exc.code in _RETRYABLE_STATUS:
                raise _TransientLLMError(message) from exc
            raise LLMError(message) from exc
        except error.URLError as exc:
            raise _TransientLLMError(f"{name} request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise _TransientLLMError(f"{name} request timed out.") from exc
        except (http.client.HTTPException, ConnectionError) as exc:
            raise _TransientLLMError(f"{name} response was interrupted: {exc!r}") from exc
        except json.JSONDecodeError as exc:
            raise LLMError(f"{name} response was not valid JSON.") from exc
        except UnicodeDecodeError as exc:
            raise LLMError(f"{name} response was not valid UTF-8.") from exc

        if not isinstance(payload, dict):
            raise LLMError(f"{name} response has an unexpected shape.")
        return payload
