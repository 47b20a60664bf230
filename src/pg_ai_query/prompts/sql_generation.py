"""Prompt builder for schema-grounded NL-to-SQL generation requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pg_ai_query.db.inspector import DatabaseSchema, SchemaInspector, TableDetails

logger = logging.getLogger(__name__)

MAX_DETAILED_TABLES = 3

SYSTEM_PROMPT = """You are a senior data analyst that writes **correct, efficient, safe SQL** for the exact database schema provided below.

### INPUTS YOU WILL RECEIVE
1. **User question** - natural language request.
2. **Schema** - tables, approximate row counts and, for tables named in the request, columns, keys and indexes.
3. **Database dialect** - PostgreSQL.

### YOUR OUTPUT (JSON only, no extra text)
{
  "sql": "exact SQL query to run",
  "explanation": "plain English summary of what the query does",
  "warnings": ["list of risks, e.g. 'scans 2M rows', 'uses full table scan'"] or [],
  "row_limit_applied": true/false,
  "suggested_visualization": "bar|line|table|none"
}

"warnings": array of strings, each formatted as:
[<SEVERITY>] <CODE>: <message> [details]
- INFO: helpful context
- WARN: performance, ambiguity, or best practice
- Never include ERROR (those fail the whole request)

### GOLDEN RULES (NEVER BREAK)
1. **NEVER use SELECT *** - always list columns explicitly.
2. **ALWAYS apply LIMIT 1000** unless the user says "all", "full", or "complete".
3. **NEVER write DELETE, UPDATE, INSERT, DROP, or other DDL**.
4. **ONLY use tables/columns from the schema**. Never reference tables or columns that are not listed.
5. **PREFER explicit JOINs** over implicit ones. Use aliases.
6. **For "top N", "most recent", etc. use ORDER BY with LIMIT, or ROW_NUMBER() for per-group rankings**.
7. **If the request is unclear, leave "sql" empty and ask ONE clarifying question in "explanation"**.
"""


@dataclass(frozen=True)
class PromptBundle:
    """Inspectable prompt pair sent to the LLM client."""

    natural_language: str
    system_prompt: str
    user_prompt: str
    mentioned_tables: list[str] = field(default_factory=list)
    schema_context: str = ""


def format_schema_for_ai(schema: DatabaseSchema) -> str:
    lines = [
        "=== DATABASE SCHEMA ===",
        "IMPORTANT: These are the ONLY tables available in this database:",
        "",
    ]
    for table in schema.tables:
        lines.append(
            f"- {table.qualified_name} ({table.table_type}, ~{table.estimated_rows} rows)"
        )
    if not schema.tables:
        lines.append("- No user tables found in database")

    lines.extend(
        [
            "",
            "CRITICAL: If user asks for tables not listed above, return an error "
            "with available table names.",
            "Do NOT query information_schema or pg_catalog tables.",
        ]
    )
    return "\n".join(lines) + "\n"


def format_table_details_for_ai(details: TableDetails) -> str:
    lines = [f"=== TABLE: {details.schema_name}.{details.table_name} ===", "", "COLUMNS:"]
    for column in details.columns:
        line = f"- {column.column_name} ({column.data_type})"
        if column.is_primary_key:
            line += " [PRIMARY KEY]"
        if column.is_foreign_key:
            line += f" [FK -> {column.foreign_table}.{column.foreign_column}]"
        if not column.is_nullable:
            line += " [NOT NULL]"
        if column.column_default:
            line += f" [DEFAULT: {column.column_default}]"
        lines.append(line)

    if details.indexes:
        lines.extend(["", "INDEXES:"])
        lines.extend(f"- {index}" for index in details.indexes)
    return "\n".join(lines) + "\n"


def _schema_context(
    natural_language: str,
    inspector: SchemaInspector,
) -> tuple[str, list[str]]:
    schema = inspector.list_tables()
    if not schema.success:
        logger.warning(
            "Schema context unavailable, generating without it: %s",
            schema.error_message,
        )
        return "", []

    context = format_schema_for_ai(schema)

    # Case-sensitive substring match against the raw request text.
    mentioned = [
        table for table in schema.tables if table.table_name in natural_language
    ][:MAX_DETAILED_TABLES]

    for table in mentioned:
        details = inspector.describe_table(table.table_name, table.schema_name)
        if details.success:
            context += "\n" + format_table_details_for_ai(details)
        else:
            logger.warning(
                "Skipping details for %s: %s",
                table.qualified_name,
                details.error_message,
            )
    return context, [table.qualified_name for table in mentioned]


def build_prompt(
    natural_language: str,
    inspector: SchemaInspector | None = None,
) -> PromptBundle:
    """Build the system/user prompt pair, with best-effort schema context."""
    schema_context = ""
    mentioned: list[str] = []
    if inspector is not None:
        schema_context, mentioned = _schema_context(natural_language, inspector)

    user_prompt = (
        "Generate a PostgreSQL query for this request:\n\n"
        f"Request: {natural_language}\n"
    )
    if schema_context:
        user_prompt += f"Schema info:\n{schema_context}\n"

    return PromptBundle(
        natural_language=natural_language,
        system_prompt=SYSTEM_PROMPT,
        user_prompt=user_prompt,
        mentioned_tables=mentioned,
        schema_context=schema_context,
    )
