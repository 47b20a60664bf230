"""Catalog-access safety check for generated SQL."""

from __future__ import annotations

from dataclasses import dataclass

SYSTEM_CATALOG_TOKENS = ("INFORMATION_SCHEMA", "PG_CATALOG")

SYSTEM_TABLE_REJECTION = (
    "Generated query accesses system tables. Please query user tables only."
)


@dataclass(frozen=True)
class SafetyVerdict:
    ok: bool
    reason: str = ""


def check_catalog_access(sql: str) -> SafetyVerdict:
    """Reject SQL mentioning a system catalog, in any letter casing.

    This is a substring scan, not a parse: identifiers split by comments or
    built through string concatenation are not detected.
    """
    upper_sql = sql.upper()
    if any(token in upper_sql for token in SYSTEM_CATALOG_TOKENS):
        return SafetyVerdict(ok=False, reason=SYSTEM_TABLE_REJECTION)
    return SafetyVerdict(ok=True)
