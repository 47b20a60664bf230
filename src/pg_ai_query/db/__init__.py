"""Catalog access helpers for pg-ai-query."""

from pg_ai_query.db.connection import (
    DatabaseConnectionError,
    connect_readonly,
    readonly_connection_factory,
)
from pg_ai_query.db.inspector import (
    ColumnMetadata,
    DatabaseSchema,
    SchemaInspector,
    TableDetails,
    TableMetadata,
)

__all__ = [
    "ColumnMetadata",
    "DatabaseConnectionError",
    "DatabaseSchema",
    "SchemaInspector",
    "TableDetails",
    "TableMetadata",
    "connect_readonly",
    "readonly_connection_factory",
]
