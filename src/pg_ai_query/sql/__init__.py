"""SQL safety and row-limit utilities."""

from pg_ai_query.sql.limits import RowLimitResult, apply_row_limit
from pg_ai_query.sql.parser import SQLParseError, parse_single_statement
from pg_ai_query.sql.safety import (
    SYSTEM_TABLE_REJECTION,
    SafetyVerdict,
    check_catalog_access,
)

__all__ = [
    "SQLParseError",
    "parse_single_statement",
    "RowLimitResult",
    "apply_row_limit",
    "SYSTEM_TABLE_REJECTION",
    "SafetyVerdict",
    "check_catalog_access",
]
