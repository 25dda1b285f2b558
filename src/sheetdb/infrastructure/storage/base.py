"""Base abstractions for backing table stores.

A table store keeps named tables of rows. Row 1 of every table is its header.
Rows and columns are addressed 1-based, the way spreadsheets address them.
Each operation is atomic on its own; the store offers no isolation across
operations.
"""

import json
import math
from abc import ABC, abstractmethod
from typing import Any

from sheetdb.core.exceptions import InvalidCellReferenceError


def format_cell(value: Any) -> str:
    """Render a value as the display string the store keeps.

    Examples:
        >>> format_cell(None)
        ''
        >>> format_cell(10.0)
        '10'
        >>> format_cell(True)
        'TRUE'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


def check_row(row: int) -> None:
    """Validate a 1-based row index."""
    if not isinstance(row, int) or isinstance(row, bool) or row < 1:
        raise InvalidCellReferenceError(f"Row index must be a positive integer, got {row!r}")


def check_column(column: int) -> None:
    """Validate a 1-based column index."""
    if not isinstance(column, int) or isinstance(column, bool) or column < 1:
        raise InvalidCellReferenceError(f"Column index must be a positive integer, got {column!r}")


class TableStore(ABC):
    """Abstract base class for backing table stores."""

    @abstractmethod
    async def list_tables(self) -> list[str]:
        """Names of all tables, in creation order."""
        ...

    @abstractmethod
    async def has_table(self, name: str) -> bool:
        """Check whether a table exists."""
        ...

    @abstractmethod
    async def create_table(self, name: str, header: list[Any]) -> None:
        """Create a table whose first row is ``header``.

        Raises:
            TableExistsError: If the name is taken.
        """
        ...

    @abstractmethod
    async def read_all(self, name: str) -> list[list[str]]:
        """Every row of the table, header first."""
        ...

    @abstractmethod
    async def read_header(self, name: str) -> list[str]:
        """Row 1 of the table. Always at least one cell (``[""]`` if empty)."""
        ...

    @abstractmethod
    async def read_row(self, name: str, row: int) -> list[str]:
        """One row by 1-based index; ``[]`` past the last row."""
        ...

    @abstractmethod
    async def row_count(self, name: str) -> int:
        """Number of rows including the header."""
        ...

    @abstractmethod
    async def append_row(self, name: str, values: list[Any]) -> None:
        """Add a row after the last one."""
        ...

    @abstractmethod
    async def set_cell(self, name: str, row: int, column: int, value: Any) -> None:
        """Write one cell, growing the table and the row as needed."""
        ...

    @abstractmethod
    async def delete_row(self, name: str, row: int) -> None:
        """Remove a row. Rows below it move up by one.

        Raises:
            InvalidCellReferenceError: If the row does not exist.
        """
        ...
