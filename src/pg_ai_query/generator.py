"""End-to-end natural-language to SQL generation pipeline."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pg_ai_query.config import Settings
from pg_ai_query.db.inspector import DatabaseSchema, SchemaInspector, TableDetails
from pg_ai_query.extraction import extract_response
from pg_ai_query.llm import (
    GenerateOptions,
    LLMClient,
    LLMConfigError,
    adapter_for,
    create_llm_client,
)
from pg_ai_query.models.generation import (
    ErrorKind,
    ExtractedResponse,
    GenerationFailure,
    GenerationRequest,
    ModelOutcome,
)
from pg_ai_query.prompts import build_prompt
from pg_ai_query.providers import ProviderSelection, resolve_provider
from pg_ai_query.sql.limits import apply_row_limit
from pg_ai_query.sql.safety import check_catalog_access

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., LLMClient]

NO_CATALOG_MESSAGE = "No catalog connection configured (set POSTGRES_DSN)."


def _failure(kind: ErrorKind, message: str) -> ModelOutcome:
    return ModelOutcome.failed(GenerationFailure(kind=kind, message=message))


class QueryGenerator:
    """Compose provider resolution, prompting, the LLM call and response checks.

    The generator keeps no state between calls: ``settings`` is frozen and
    the inspector opens a fresh connection per catalog query, so one
    instance can serve concurrent callers.
    """

    def __init__(
        self,
        settings: Settings,
        inspector: SchemaInspector | None = None,
        client_factory: ClientFactory = create_llm_client,
    ) -> None:
        self._settings = settings
        self._inspector = inspector
        self._client_factory = client_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryGenerator":
        inspector = (
            SchemaInspector.from_dsn(settings.postgres_dsn)
            if settings.postgres_dsn
            else None
        )
        return cls(settings, inspector=inspector)

    @property
    def settings(self) -> Settings:
        return self._settings

    def list_tables(self) -> DatabaseSchema:
        if self._inspector is None:
            return DatabaseSchema(success=False, error_message=NO_CATALOG_MESSAGE)
        return self._inspector.list_tables()

    def describe_table(self, table_name: str, schema_name: str = "public") -> TableDetails:
        if self._inspector is None:
            return TableDetails(
                table_name=table_name,
                schema_name=schema_name,
                error_message=NO_CATALOG_MESSAGE,
            )
        return self._inspector.describe_table(table_name, schema_name)

    def generate(self, request: GenerationRequest) -> ModelOutcome:
        """Run the pipeline; every failure is returned as an outcome."""
        try:
            return self._generate(request)
        except Exception as exc:
            logger.exception("Query generation failed unexpectedly")
            return _failure(ErrorKind.INTERNAL_ERROR, f"Internal error: {exc}")

    def _generate(self, request: GenerationRequest) -> ModelOutcome:
        if not request.natural_language.strip():
            return _failure(ErrorKind.EMPTY_INPUT, "Natural language query cannot be empty")

        selection = resolve_provider(request, self._settings)
        if isinstance(selection, GenerationFailure):
            return ModelOutcome.failed(selection)

        prompt = build_prompt(request.natural_language, self._inspector)

        try:
            client = self._client_factory(
                selection.provider,
                selection.api_key,
                timeout_seconds=self._settings.timeout_seconds,
                max_retries=self._settings.general.max_retries,
            )
        except LLMConfigError as exc:
            logger.warning(
                "Failed to create %s client: %s", selection.provider.display_name, exc
            )
            return _failure(
                ErrorKind.CLIENT_INIT_ERROR, f"Failed to create AI client: {exc}"
            )

        options = self._generate_options(
            selection, prompt.system_prompt, prompt.user_prompt
        )
        response = client.generate(options)
        if not response.ok:
            return _failure(
                ErrorKind.PROVIDER_ERROR, f"AI API error: {response.error_message}"
            )
        if not response.text.strip():
            return _failure(ErrorKind.EMPTY_RESPONSE, "Empty response from AI service")

        extracted = extract_response(response.text)
        if not extracted.sql.strip():
            logger.info("Model returned no SQL; returning its explanation")
            return ModelOutcome(
                success=True,
                explanation=extracted.explanation,
                warnings=extracted.warnings,
                suggested_visualization=extracted.suggested_visualization,
            )

        verdict = check_catalog_access(extracted.sql)
        if not verdict.ok:
            logger.warning("Rejected generated query that touches system catalogs")
            return _failure(ErrorKind.UNSAFE_QUERY, verdict.reason)

        return self._success(extracted)

    def _generate_options(
        self,
        selection: ProviderSelection,
        system_prompt: str,
        user_prompt: str,
    ) -> GenerateOptions:
        profile = selection.profile
        if profile is not None and profile.default_model is not None:
            model_name = profile.default_model.name
        else:
            model_name = adapter_for(selection.provider).fallback_model

        model = self._settings.get_model(model_name)
        if model is None:
            logger.info("Using model: %s with default settings", model_name)
            return GenerateOptions(
                model=model_name,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
            )

        logger.info(
            "Using %s model %s with max_tokens=%d, temperature=%.2f",
            selection.provider.display_name,
            model_name,
            model.max_tokens,
            model.temperature,
        )
        return GenerateOptions(
            model=model_name,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            max_tokens=model.max_tokens,
            temperature=model.temperature,
        )

    def _success(self, extracted: ExtractedResponse) -> ModelOutcome:
        sql = extracted.sql
        warnings = list(extracted.warnings)
        row_limit_applied = extracted.row_limit_applied

        query_settings = self._settings.query
        if query_settings.enforce_limit and not row_limit_applied:
            limited = apply_row_limit(sql, query_settings.default_limit)
            if limited.limit_added:
                sql = limited.sql
                row_limit_applied = True
                warnings.append(
                    f"[INFO] ROW_LIMIT: Added LIMIT {query_settings.default_limit} "
                    "to an unbounded query"
                )

        return ModelOutcome(
            success=True,
            generated_query=sql,
            explanation=extracted.explanation,
            warnings=warnings,
            row_limit_applied=row_limit_applied,
            suggested_visualization=extracted.suggested_visualization,
        )
