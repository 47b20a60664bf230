"""PostgreSQL catalog inspection for prompt grounding."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import psycopg

from pg_ai_query.db.connection import (
    ConnectionFactory,
    DatabaseConnectionError,
    readonly_connection_factory,
)
from pg_ai_query.db.queries import (
    LIST_TABLES_QUERY,
    TABLE_COLUMNS_QUERY,
    TABLE_INDEXES_QUERY,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableMetadata:
    table_name: str
    schema_name: str
    table_type: str
    estimated_rows: int = 0

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    def to_dict(self) -> dict[str, object]:
        return {
            "table_name": self.table_name,
            "schema_name": self.schema_name,
            "table_type": self.table_type,
            "estimated_rows": self.estimated_rows,
        }


@dataclass(frozen=True)
class ColumnMetadata:
    column_name: str
    data_type: str
    is_nullable: bool = True
    column_default: str = ""
    is_primary_key: bool = False
    is_foreign_key: bool = False
    foreign_table: str = ""
    foreign_column: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "column_name": self.column_name,
            "data_type": self.data_type,
            "is_nullable": self.is_nullable,
            "column_default": self.column_default or None,
            "is_primary_key": self.is_primary_key,
            "is_foreign_key": self.is_foreign_key,
            "foreign_table": self.foreign_table or None,
            "foreign_column": self.foreign_column or None,
        }


@dataclass
class DatabaseSchema:
    """Table inventory, or the reason it could not be read."""

    success: bool
    tables: list[TableMetadata] = field(default_factory=list)
    error_message: str = ""


@dataclass
class TableDetails:
    """Columns and index definitions of one table."""

    table_name: str
    schema_name: str
    success: bool = False
    columns: list[ColumnMetadata] = field(default_factory=list)
    indexes: list[str] = field(default_factory=list)
    error_message: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "table_name": self.table_name,
            "schema_name": self.schema_name,
            "columns": [column.to_dict() for column in self.columns],
            "indexes": list(self.indexes),
        }


class SchemaInspector:
    """Read-only catalog queries; failures come back as ``success=False``."""

    def __init__(self, connect: ConnectionFactory) -> None:
        self._connect = connect

    @classmethod
    def from_dsn(cls, postgres_dsn: str, connect_timeout: int = 5) -> "SchemaInspector":
        return cls(readonly_connection_factory(postgres_dsn, connect_timeout))

    def list_tables(self) -> DatabaseSchema:
        """List user base tables ordered by schema and name."""
        try:
            with self._connect() as conn:
                with conn.cursor() as cur:
                    cur.execute(LIST_TABLES_QUERY)
                    rows = cur.fetchall()
        except (DatabaseConnectionError, psycopg.Error) as exc:
            logger.warning("Failed to list database tables: %s", exc)
            return DatabaseSchema(success=False, error_message=str(exc))

        tables = [
            TableMetadata(
                table_name=table_name,
                schema_name=schema_name,
                table_type=table_type,
                estimated_rows=int(estimated_rows or 0),
            )
            for table_name, schema_name, table_type, estimated_rows in rows
        ]
        return DatabaseSchema(success=True, tables=tables)

    def describe_table(self, table_name: str, schema_name: str = "public") -> TableDetails:
        """Describe columns (catalog order) and indexes of one table."""
        details = TableDetails(table_name=table_name, schema_name=schema_name)
        params = {"table_name": table_name, "schema_name": schema_name}

        try:
            with self._connect() as conn:
                with conn.cursor() as cur:
                    cur.execute(TABLE_COLUMNS_QUERY, params)
                    column_rows = cur.fetchall()
                    cur.execute(TABLE_INDEXES_QUERY, params)
                    index_rows = cur.fetchall()
        except (DatabaseConnectionError, psycopg.Error) as exc:
            logger.warning(
                "Failed to describe table %s.%s: %s", schema_name, table_name, exc
            )
            details.error_message = str(exc)
            return details

        if not column_rows:
            details.error_message = (
                f"Table '{schema_name}.{table_name}' was not found or has no columns."
            )
            return details

        for (
            column_name,
            data_type,
            is_nullable,
            column_default,
            is_primary_key,
            is_foreign_key,
            foreign_table,
            foreign_column,
        ) in column_rows:
            details.columns.append(
                ColumnMetadata(
                    column_name=column_name,
                    data_type=data_type,
                    is_nullable=is_nullable == "YES",
                    column_default=column_default or "",
                    is_primary_key=bool(is_primary_key),
                    is_foreign_key=bool(is_foreign_key),
                    foreign_table=foreign_table or "",
                    foreign_column=foreign_column or "",
                )
            )

        details.indexes = [indexdef for _name, indexdef in index_rows if indexdef]
        details.success = True
        return details
