"""Render generation outcomes according to the [response] settings."""

from __future__ import annotations

import json

from pg_ai_query.config import ResponseSettings
from pg_ai_query.models.generation import ModelOutcome


def _formatted(outcome: ModelOutcome, response: ResponseSettings) -> str:
    document: dict[str, object] = {"query": outcome.generated_query}
    if response.show_explanation and outcome.explanation:
        document["explanation"] = outcome.explanation
    if response.show_warnings and outcome.warnings:
        document["warnings"] = list(outcome.warnings)
    if response.show_suggested_visualization:
        document["suggested_visualization"] = outcome.suggested_visualization
    if outcome.row_limit_applied:
        document["row_limit_applied"] = True
    return json.dumps(document, indent=2)


def _plain(outcome: ModelOutcome, response: ResponseSettings) -> str:
    lines = [outcome.generated_query]
    if response.show_explanation and outcome.explanation:
        lines.extend(["", f"-- Explanation: {outcome.explanation}"])
    if response.show_warnings:
        lines.extend(f"-- Warning: {warning}" for warning in outcome.warnings)
    if response.show_suggested_visualization:
        lines.append(f"-- Suggested Visualization: {outcome.suggested_visualization}")
    return "\n".join(lines)


def format_outcome(outcome: ModelOutcome, response: ResponseSettings) -> str:
    """Render a successful outcome for display.

    Clarification outcomes render as the model's question alone, and failures
    as their error message.
    """
    if not outcome.success:
        return f"Query generation failed: {outcome.error_message}"
    if outcome.needs_clarification:
        return outcome.explanation or "The model did not return a query."
    if response.use_formatted_response:
        return _formatted(outcome, response)
    return _plain(outcome, response)
