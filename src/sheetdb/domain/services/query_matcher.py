"""Query matcher: decides whether a document satisfies a query.

A structured query maps field names to either a literal (coerced equality)
or an operator object such as ``{"$gt": 30}``. All field conditions must
hold. A query carrying ``$where`` is instead a single expression evaluated
per document, and replaces structured matching entirely.

Evaluation is fail-closed: a condition that raises (malformed regex,
incomparable values, expression errors) counts as not matching, so one odd
record never fails a whole query.
"""

import re
from collections.abc import Mapping
from typing import Any

from sheetdb.core.coercion import coerce
from sheetdb.core.exceptions import InvalidQueryError
from sheetdb.core.expressions import Node, evaluate_expression, parse_expression
from sheetdb.core.expressions.evaluator import regex_flags, stringify
from sheetdb.core.logging import get_logger

logger = get_logger(__name__)

WHERE_KEY = "$where"

# Checked in this order; the first one present in an operator object decides.
OPERATORS = (
    "$gt",
    "$lt",
    "$gte",
    "$lte",
    "$ne",
    "$regex",
    "$startsWith",
    "$endsWith",
)


def _apply_operator(op: str, raw: Any, condition: Mapping[str, Any]) -> bool:
    """Evaluate one operator against a raw field value."""
    operand = condition[op]

    if op == "$gt":
        return coerce(raw) > coerce(operand)
    if op == "$lt":
        return coerce(raw) < coerce(operand)
    if op == "$gte":
        return coerce(raw) >= coerce(operand)
    if op == "$lte":
        return coerce(raw) <= coerce(operand)
    if op == "$ne":
        return coerce(raw) != coerce(operand)
    if op == "$regex":
        flags = regex_flags(condition.get("$options"))
        return re.search(stringify(operand), stringify(raw), flags) is not None
    if op == "$startsWith":
        return stringify(raw).startswith(stringify(operand))
    if op == "$endsWith":
        return stringify(raw).endswith(stringify(operand))

    raise InvalidQueryError(f"Unsupported operator: {op}")


def match_condition(raw: Any, condition: Any) -> bool:
    """Evaluate a single field condition. Errors propagate to the caller."""
    if isinstance(condition, Mapping):
        for op in OPERATORS:
            if op in condition:
                return _apply_operator(op, raw, condition)
        # An operator object without a recognised operator places no constraint
        return True

    return coerce(raw) == coerce(condition)


class QueryMatcher:
    """Compiled query that can be tested against many documents.

    Example:
        matcher = QueryMatcher({"age": {"$gt": 30}})
        adults = [doc for doc in docs if matcher.matches(doc)]
    """

    def __init__(self, query: Mapping[str, Any] | None = None) -> None:
        """Compile a query.

        Args:
            query: Structured query, or ``{"$where": "<expression>"}``.

        Raises:
            InvalidQueryError: If the query is not a mapping or its
                ``$where`` expression does not parse.
        """
        query = query or {}
        if not isinstance(query, Mapping):
            raise InvalidQueryError("Query must be an object")

        self.query = query
        self.where: Node | None = None
        if WHERE_KEY in query:
            self.where = parse_expression(query[WHERE_KEY])

    def matches(self, doc: Mapping[str, Any]) -> bool:
        """Return True if the document satisfies the query."""
        if self.where is not None:
            return self._matches_where(doc)

        for field, condition in self.query.items():
            try:
                if not match_condition(doc.get(field), condition):
                    return False
            except Exception as e:
                logger.debug(
                    "Condition evaluation failed, treating as non-matching",
                    field=field,
                    error=str(e),
                )
                return False
        return True

    def _matches_where(self, doc: Mapping[str, Any]) -> bool:
        context = dict(doc)
        context["doc"] = doc
        try:
            return bool(evaluate_expression(self.where, context))
        except Exception as e:
            logger.debug(
                "$where evaluation failed, treating as non-matching",
                error=str(e),
            )
            return False


def matches(doc: Mapping[str, Any], query: Mapping[str, Any] | None) -> bool:
    """Convenience wrapper: compile ``query`` and test a single document."""
    return QueryMatcher(query).matches(doc)
