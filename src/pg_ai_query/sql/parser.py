"""SQL parsing helpers backed by SQLGlot."""

from __future__ import annotations

from sqlglot import exp, parse
from sqlglot.errors import SqlglotError


class SQLParseError(RuntimeError):
    """Raised when SQL cannot be parsed as a single PostgreSQL statement."""


def parse_single_statement(sql: str) -> exp.Expression:
    """Parse exactly one statement using PostgreSQL dialect semantics."""
    normalized = sql.strip().rstrip(";").strip()
    if not normalized:
        raise SQLParseError("SQL cannot be empty.")

    try:
        statements = [stmt for stmt in parse(normalized, read="postgres") if stmt is not None]
    except SqlglotError as exc:
        raise SQLParseError(f"Invalid SQL: {exc}") from exc

    if len(statements) != 1:
        raise SQLParseError(f"Expected one SQL statement, found {len(statements)}.")
    return statements[0]
