"""Row-limit guard applied to generated queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlglot import exp

from pg_ai_query.sql.parser import SQLParseError, parse_single_statement

logger = logging.getLogger(__name__)

LIMIT_CAPABLE_TYPES: tuple[type[exp.Expression], ...] = (
    exp.Select,
    exp.Union,
    exp.Intersect,
    exp.Except,
)


@dataclass(frozen=True)
class RowLimitResult:
    sql: str
    limit_added: bool = False


def _single_row_aggregate(expression: exp.Expression) -> bool:
    if not isinstance(expression, exp.Select) or expression.args.get("group"):
        return False
    for projection in expression.expressions:
        for agg in projection.find_all(exp.AggFunc):
            if agg.find_ancestor(exp.Window) is None:
                return True
    return False


def apply_row_limit(sql: str, limit: int) -> RowLimitResult:
    """Append ``LIMIT limit`` to an unbounded query, leaving anything else as-is.

    Statements that do not parse, are not queries, already carry a limit, or
    aggregate to a single row are returned unchanged.
    """
    try:
        expression = parse_single_statement(sql)
    except SQLParseError as exc:
        logger.debug("Row limit not applied, SQL did not parse: %s", exc)
        return RowLimitResult(sql=sql)

    if not isinstance(expression, LIMIT_CAPABLE_TYPES):
        return RowLimitResult(sql=sql)
    if expression.args.get("limit") is not None:
        return RowLimitResult(sql=sql)
    if _single_row_aggregate(expression):
        return RowLimitResult(sql=sql)

    body = sql.strip().rstrip(";").rstrip()
    # A trailing line comment would swallow a same-line LIMIT.
    separator = "\n" if "--" in body.rsplit("\n", 1)[-1] else " "
    return RowLimitResult(sql=f"{body}{separator}LIMIT {limit}", limit_added=True)
