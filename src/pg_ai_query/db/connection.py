"""Read-only PostgreSQL connection factory for catalog inspection."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager, contextmanager
from functools import partial
from typing import Iterator

import psycopg

ConnectionFactory = Callable[[], AbstractContextManager[psycopg.Connection]]


class DatabaseConnectionError(RuntimeError):
    """Raised when a PostgreSQL catalog connection cannot be opened."""


@contextmanager
def connect_readonly(
    postgres_dsn: str,
    connect_timeout: int = 5,
) -> Iterator[psycopg.Connection]:
    """Open a PostgreSQL connection whose transactions default to read-only."""
    try:
        with psycopg.connect(
            postgres_dsn,
            connect_timeout=connect_timeout,
            options="-c default_transaction_read_only=on",
        ) as conn:
            yield conn
    except psycopg.OperationalError as exc:
        raise DatabaseConnectionError(
            f"Could not connect to PostgreSQL with provided DSN: {exc}"
        ) from exc


def readonly_connection_factory(
    postgres_dsn: str,
    connect_timeout: int = 5,
) -> ConnectionFactory:
    """Bind a DSN into a zero-argument connection factory."""
    return partial(connect_readonly, postgres_dsn, connect_timeout)
