"""Prompt builders for pg-ai-query."""

from pg_ai_query.prompts.sql_generation import (
    MAX_DETAILED_TABLES,
    SYSTEM_PROMPT,
    PromptBundle,
    build_prompt,
    format_schema_for_ai,
    format_table_details_for_ai,
)

__all__ = [
    "MAX_DETAILED_TABLES",
    "SYSTEM_PROMPT",
    "PromptBundle",
    "build_prompt",
    "format_schema_for_ai",
    "format_table_details_for_ai",
]
