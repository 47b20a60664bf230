import json
import logging
from pathlib import Path

import pytest

from pg_ai_query.config import Settings, load_settings
from pg_ai_query.db.inspector import (
    ColumnMetadata,
    DatabaseSchema,
    TableDetails,
    TableMetadata,
)
from pg_ai_query.llm import LLMResponse

ORDERS_SQL = "SELECT id, created_at FROM orders ORDER BY created_at DESC LIMIT 5"

ORDERS_RESPONSE = json.dumps(
    {
        "sql": ORDERS_SQL,
        "explanation": "Five most recent orders by creation time.",
        "warnings": [],
        "row_limit_applied": True,
        "suggested_visualization": "table",
    }
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("pg_ai_query")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "POSTGRES_DSN", "PG_AI_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings(tmp_path: Path):
    """Build Settings from inline INI text and an explicit environment."""

    def _make(config_text: str | None = None, **environ: str) -> Settings:
        path = tmp_path / "pg_ai.config"
        if config_text is not None:
            path.write_text(config_text, encoding="utf-8")
        return load_settings(config_path=path, environ=environ)

    return _make


class FakeInspector:
    """In-memory stand-in for SchemaInspector."""

    def __init__(self, tables=None, details=None, fail_listing=False):
        self.tables = tables or []
        self.details = details or {}
        self.fail_listing = fail_listing
        self.described: list[tuple[str, str]] = []

    def list_tables(self) -> DatabaseSchema:
        if self.fail_listing:
            return DatabaseSchema(success=False, error_message="connection refused")
        return DatabaseSchema(success=True, tables=list(self.tables))

    def describe_table(self, table_name: str, schema_name: str = "public") -> TableDetails:
        self.described.append((table_name, schema_name))
        details = self.details.get((schema_name, table_name))
        if details is None:
            return TableDetails(
                table_name=table_name,
                schema_name=schema_name,
                error_message="not found",
            )
        return details


def orders_inspector() -> FakeInspector:
    tables = [
        TableMetadata("customers", "public", "BASE TABLE", 120),
        TableMetadata("orders", "public", "BASE TABLE", 5400),
    ]
    details = {
        ("public", "orders"): TableDetails(
            table_name="orders",
            schema_name="public",
            success=True,
            columns=[
                ColumnMetadata(
                    "id",
                    "integer",
                    is_nullable=False,
                    column_default="nextval('orders_id_seq'::regclass)",
                    is_primary_key=True,
                ),
                ColumnMetadata(
                    "customer_id",
                    "integer",
                    is_foreign_key=True,
                    foreign_table="customers",
                    foreign_column="id",
                ),
                ColumnMetadata("created_at", "timestamp with time zone", is_nullable=False),
            ],
            indexes=["CREATE UNIQUE INDEX orders_pkey ON public.orders USING btree (id)"],
        )
    }
    return FakeInspector(tables=tables, details=details)


@pytest.fixture
def inspector() -> FakeInspector:
    return orders_inspector()


class StubClient:
    def __init__(self, response: LLMResponse):
        self.response = response
        self.calls = []

    def generate(self, options):
        self.calls.append(options)
        return self.response


class RecordingClientFactory:
    """Client factory that records construction and returns a stub client."""

    def __init__(self, text: str = "", ok: bool = True, error_message: str = "", error=None):
        self.client = StubClient(LLMResponse(text=text, ok=ok, error_message=error_message))
        self.error = error
        self.created = []

    def __call__(self, provider, api_key, **kwargs):
        self.created.append((provider, api_key, kwargs))
        if self.error is not None:
            raise self.error
        return self.client

    @property
    def calls(self):
        return self.client.calls
