import pytest

from pg_ai_query.sql import (
    SYSTEM_TABLE_REJECTION,
    SQLParseError,
    apply_row_limit,
    check_catalog_access,
    parse_single_statement,
)


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT table_name FROM information_schema.tables",
        "select relname from PG_CATALOG.pg_class",
        "SELECT * FROM Information_Schema.Columns",
        "SELECT c.oid FROM pg_Catalog.pg_class c JOIN orders o ON true",
    ],
)
def test_catalog_access_is_rejected_in_any_casing(sql):
    verdict = check_catalog_access(sql)

    assert verdict.ok is False
    assert verdict.reason == SYSTEM_TABLE_REJECTION


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT id, created_at FROM orders ORDER BY created_at DESC LIMIT 5",
        "SELECT catalog_id FROM product_catalog",
        "",
    ],
)
def test_user_table_queries_are_accepted(sql):
    assert check_catalog_access(sql).ok is True


def test_row_limit_added_to_unbounded_select():
    result = apply_row_limit("SELECT id, name FROM customers", 1000)

    assert result.limit_added is True
    assert result.sql == "SELECT id, name FROM customers LIMIT 1000"


def test_row_limit_ignores_trailing_semicolon():
    result = apply_row_limit("SELECT id FROM orders;", 50)

    assert result.limit_added is True
    assert result.sql == "SELECT id FROM orders LIMIT 50"


def test_existing_limit_is_left_alone():
    sql = "SELECT id FROM orders LIMIT 5"

    assert apply_row_limit(sql, 1000).sql == sql
    assert apply_row_limit(sql, 1000).limit_added is False


def test_row_limit_keeps_the_original_text():
    sql = "SELECT id, created_at::date\nFROM orders  -- newest first\n;"

    result = apply_row_limit(sql, 1000)

    assert result.limit_added is True
    assert result.sql == "SELECT id, created_at::date\nFROM orders  -- newest first\nLIMIT 1000"


def test_untokenizable_text_is_returned_unchanged():
    sql = "SELECT 'abc FROM t"

    result = apply_row_limit(sql, 1000)

    assert result.limit_added is False
    assert result.sql == sql


def test_parse_single_statement_wraps_tokenizer_errors():
    with pytest.raises(SQLParseError, match="Invalid SQL"):
        parse_single_statement("I can't tell which table you mean")


def test_single_row_aggregate_is_left_alone():
    result = apply_row_limit("SELECT COUNT(*) FROM orders", 1000)

    assert result.limit_added is False
    assert result.sql == "SELECT COUNT(*) FROM orders"


def test_grouped_aggregate_is_limited():
    result = apply_row_limit("SELECT status, COUNT(*) FROM orders GROUP BY status", 1000)

    assert result.limit_added is True
    assert result.sql.endswith("LIMIT 1000")


def test_window_aggregate_is_limited():
    result = apply_row_limit(
        "SELECT id, SUM(amount) OVER (PARTITION BY customer_id) FROM orders", 10
    )

    assert result.limit_added is True


@pytest.mark.parametrize(
    "sql",
    [
        "DELETE FROM orders",
        "SELECT 1; SELECT 2",
    ],
)
def test_non_queries_and_multiple_statements_are_unchanged(sql):
    result = apply_row_limit(sql, 1000)

    assert result.limit_added is False
    assert result.sql == sql


def test_parse_single_statement_rejects_empty_input():
    with pytest.raises(SQLParseError):
        parse_single_statement("  ;  ")


def test_parse_single_statement_rejects_multiple_statements():
    with pytest.raises(SQLParseError, match="Expected one SQL statement"):
        parse_single_statement("SELECT 1; SELECT 2")
