"""Evaluator for filter and comparator expressions."""

import re
from collections.abc import Mapping
from typing import Any

from ..coercion import coerce, compare_values, is_number
from .ast import (
    BinaryOp,
    FunctionCall,
    ListLiteral,
    Literal,
    Node,
    Subscript,
    UnaryOp,
    Variable,
)
from .exceptions import ExpressionEvaluationError

REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def regex_flags(options: str | None) -> int:
    """Translate Mongo-style option letters ('i', 'm', 's', 'x') into re flags."""
    flags = 0
    for letter in options or "":
        if letter not in REGEX_FLAGS:
            raise ValueError(f"Unsupported regex option: {letter!r}")
        flags |= REGEX_FLAGS[letter]
    return flags


def stringify(value: Any) -> str:
    """String form used by the text operators. Missing values are empty."""
    return "" if value is None else str(value)


class Evaluator:
    """Evaluates an AST against a context of named values.

    Variables only resolve through mapping keys, so an expression can read
    document fields but never reach attributes or callables of Python objects.
    """

    def __init__(self, context: Mapping[str, Any]):
        """Initialize the evaluator.

        Args:
            context: Names visible to the expression (document fields, doc, a, b).
        """
        self.context = context

    def evaluate(self, node: Node) -> Any:
        """Evaluate a node."""
        if isinstance(node, Literal):
            return node.value

        if isinstance(node, Variable):
            return self._resolve_variable(node.name)

        if isinstance(node, BinaryOp):
            return self._evaluate_binary(node)

        if isinstance(node, UnaryOp):
            return self._evaluate_unary(node)

        if isinstance(node, FunctionCall):
            return self._evaluate_function(node)

        if isinstance(node, ListLiteral):
            return [self.evaluate(item) for item in node.items]

        if isinstance(node, Subscript):
            return self._subscript(self.evaluate(node.container), self.evaluate(node.key))

        raise ExpressionEvaluationError(f"Unknown node type: {type(node).__name__}")

    def _resolve_variable(self, name: str) -> Any:
        """Resolve a dotted name from the context. Missing names are None."""
        value: Any = self.context

        for part in name.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]

        return value

    def _subscript(self, container: Any, key: Any) -> Any:
        """Look up a mapping key or list index. Anything unresolvable is None."""
        if isinstance(container, Mapping):
            return container.get(key) if isinstance(key, str) else None
        if isinstance(container, list):
            index = coerce(key)
            if is_number(index) and isinstance(index, int):
                if -len(container) <= index < len(container):
                    return container[index]
        return None

    def _evaluate_binary(self, node: BinaryOp) -> Any:
        """Evaluate binary operations."""
        # Short-circuit logic for AND/OR
        if node.operator == "and":
            if not bool(self.evaluate(node.left)):
                return False
            return bool(self.evaluate(node.right))

        if node.operator == "or":
            if bool(self.evaluate(node.left)):
                return True
            return bool(self.evaluate(node.right))

        left = self.evaluate(node.left)
        right = self.evaluate(node.right)
        op = node.operator

        if op == "in":
            return self._membership(left, right)

        left, right = coerce(left), coerce(right)

        if op == "==":
            return left == right
        if op == "!=":
            return left != right

        # Incomparable types (e.g. None < 5) are simply not ordered
        try:
            if op == "<":
                return left < right
            if op == ">":
                return left > right
            if op == "<=":
                return left <= right
            if op == ">=":
                return left >= right
        except TypeError:
            return False

        raise ExpressionEvaluationError(f"Unknown binary operator: {op}")

    def _membership(self, item: Any, container: Any) -> bool:
        """Evaluate 'item in container' for lists and strings."""
        if container is None:
            return False
        if isinstance(container, str):
            return stringify(item) in container
        if isinstance(container, list):
            return coerce(item) in [coerce(element) for element in container]
        return False

    def _evaluate_unary(self, node: UnaryOp) -> Any:
        """Evaluate unary operations."""
        operand = self.evaluate(node.operand)

        if node.operator == "not":
            return not bool(operand)

        if node.operator == "-":
            number = coerce(operand)
            if not is_number(number):
                raise ExpressionEvaluationError(f"Cannot negate non-numeric value {operand!r}")
            return -number

        raise ExpressionEvaluationError(f"Unknown unary operator: {node.operator}")

    def _evaluate_function(self, node: FunctionCall) -> Any: # noqa: C901
        """Evaluate calls to the built-in functions."""
        args = [self.evaluate(arg) for arg in node.arguments]
        name = node.name

        def expect(*counts: int) -> None:
            if len(args) not in counts:
                expected = " or ".join(str(c) for c in counts)
                raise ExpressionEvaluationError(f"{name}() expects {expected} arguments")

        if name == "contains":
            expect(2)
            return self._membership(args[1], args[0])

        if name == "starts_with":
            expect(2)
            return stringify(args[0]).startswith(stringify(args[1]))

        if name == "ends_with":
            expect(2)
            return stringify(args[0]).endswith(stringify(args[1]))

        if name == "matches":
            expect(2, 3)
            options = args[2] if len(args) == 3 else None
            try:
                flags = regex_flags(options)
                return re.search(stringify(args[1]), stringify(args[0]), flags) is not None
            except (re.error, ValueError) as e:
                raise ExpressionEvaluationError(f"Invalid regular expression: {e}") from e

        if name == "lower":
            expect(1)
            return stringify(args[0]).lower()

        if name == "upper":
            expect(1)
            return stringify(args[0]).upper()

        if name == "len":
            expect(1)
            if args[0] is None:
                return 0
            if isinstance(args[0], (str, list)):
                return len(args[0])
            return len(stringify(args[0]))

        if name == "number":
            expect(1)
            value = coerce(args[0])
            return value if is_number(value) else None

        if name == "compare":
            expect(2)
            return compare_values(args[0], args[1])

        raise ExpressionEvaluationError(f"Unknown function: {name}")
