"""Exceptions for expression parsing and evaluation."""

from sheetdb.core.exceptions import InvalidQueryError


class ExpressionError(InvalidQueryError):
    """Base class for all expression-related errors."""
    pass


class ExpressionSyntaxError(ExpressionError):
    """Raised when expression syntax is invalid."""
    def __init__(self, message: str, position: int | None = None):
        self.position = position
        super().__init__(f"{message} at position {position}" if position is not None else message)


class ExpressionEvaluationError(ExpressionError):
    """Raised when expression evaluation fails."""
    pass
