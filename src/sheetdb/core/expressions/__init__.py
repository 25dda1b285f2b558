"""Expression language for $where filters and comparator sorts.

Callers describe bespoke filters and orderings as data: a small language of
field references, literals, comparisons, boolean operators and a fixed set of
functions, interpreted here. No host code is ever executed.
"""

from collections.abc import Mapping
from typing import Any

from .ast import Node
from .evaluator import Evaluator
from .exceptions import ExpressionError, ExpressionEvaluationError, ExpressionSyntaxError
from .lexer import Lexer
from .parser import Parser

def parse_expression(expression: str) -> Node:
    """Parse an expression string into an AST."""
    if not isinstance(expression, str):
        raise ExpressionSyntaxError(
            f"Expression must be a string, got {type(expression).__name__}"
        )
    lexer = Lexer(expression)
    parser = Parser(lexer)
    return parser.parse()

def evaluate_expression(node: Node, context: Mapping[str, Any]) -> Any:
    """Evaluate a parsed expression AST against a context."""
    return Evaluator(context).evaluate(node)

__all__ = [
    "parse_expression",
    "evaluate_expression",
    "Node",
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
]
