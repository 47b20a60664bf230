"""Recover structured SQL payloads from free-form model text."""

from __future__ import annotations

import json
import logging
import re

from pg_ai_query.models.generation import ExtractedResponse

logger = logging.getLogger(__name__)

RAW_OUTPUT_EXPLANATION = "Raw LLM output (no JSON detected)"

_JSON_BLOCK = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)


def _parse_object(text: str) -> dict[str, object] | None:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return value if isinstance(value, dict) else None


def _find_payload(text: str) -> dict[str, object] | None:
    match = _JSON_BLOCK.search(text)
    if match:
        payload = _parse_object(match.group(1))
        if payload is not None:
            return payload
        logger.debug("Fenced block found but did not parse as a JSON object")
    return _parse_object(text)


def _string_field(payload: dict[str, object], key: str, default: str) -> str:
    value = payload.get(key, default)
    return value if isinstance(value, str) else default


def _warnings_field(payload: dict[str, object]) -> list[str]:
    value = payload.get("warnings")
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    if value is not None:
        logger.debug("Ignoring malformed warnings value: %r", value)
    return []


def extract_response(text: str) -> ExtractedResponse:
    """Parse model output: fenced JSON block, then whole-text JSON, then raw SQL.

    Never raises. Fields missing from the payload take their defaults, and a
    ``warnings`` value that is neither a string nor a list of strings becomes
    an empty list.
    """
    payload = _find_payload(text or "")
    if payload is None:
        return ExtractedResponse(sql=text or "", explanation=RAW_OUTPUT_EXPLANATION)

    row_limit_applied = payload.get("row_limit_applied", False)
    return ExtractedResponse(
        sql=_string_field(payload, "sql", ""),
        explanation=_string_field(payload, "explanation", ""),
        warnings=_warnings_field(payload),
        row_limit_applied=row_limit_applied if isinstance(row_limit_applied, bool) else False,
        suggested_visualization=_string_field(payload, "suggested_visualization", "table"),
    )
