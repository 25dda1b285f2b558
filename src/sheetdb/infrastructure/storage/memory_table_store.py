"""In-process table store.

Keeps every table as a list of rows in memory. Used for tests and for the
``memory`` backend, where data lives as long as the process does.
"""

from typing import Any

from sheetdb.core.exceptions import (
    InvalidCellReferenceError,
    TableExistsError,
    TableNotFoundError,
)
from sheetdb.infrastructure.storage.base import TableStore, check_column, check_row, format_cell


class MemoryTableStore(TableStore):
    """Table store implementation backed by Python lists."""

    def __init__(self, tables: dict[str, list[list[Any]]] | None = None) -> None:
        """Initialize the store, optionally seeded with raw tables.

        Args:
            tables: Mapping of table name to rows (header first). Values are
                formatted the same way written cells are.
        """
        self._tables: dict[str, list[list[str]]] = {}
        for name, rows in (tables or {}).items():
            self._tables[name] = [[format_cell(v) for v in row] for row in rows]

    def _rows(self, name: str) -> list[list[str]]:
        try:
            return self._tables[name]
        except KeyError:
            raise TableNotFoundError(name) from None

    async def list_tables(self) -> list[str]:
        return list(self._tables)

    async def has_table(self, name: str) -> bool:
        return name in self._tables

    async def create_table(self, name: str, header: list[Any]) -> None:
        if name in self._tables:
            raise TableExistsError(name)
        self._tables[name] = [[format_cell(v) for v in header]]

    async def read_all(self, name: str) -> list[list[str]]:
        return [list(row) for row in self._rows(name)]

    async def read_header(self, name: str) -> list[str]:
        rows = self._rows(name)
        header = list(rows[0]) if rows else []
        return header or [""]

    async def read_row(self, name: str, row: int) -> list[str]:
        check_row(row)
        rows = self._rows(name)
        return list(rows[row - 1]) if row <= len(rows) else []

    async def row_count(self, name: str) -> int:
        return len(self._rows(name))

    async def append_row(self, name: str, values: list[Any]) -> None:
        self._rows(name).append([format_cell(v) for v in values])

    async def set_cell(self, name: str, row: int, column: int, value: Any) -> None:
        check_row(row)
        check_column(column)
        rows = self._rows(name)
        while len(rows) < row:
            rows.append([])
        cells = rows[row - 1]
        while len(cells) < column:
            cells.append("")
        cells[column - 1] = format_cell(value)

    async def delete_row(self, name: str, row: int) -> None:
        check_row(row)
        rows = self._rows(name)
        if row > len(rows):
            raise InvalidCellReferenceError(
                f"Row {row} is out of range for table '{name}' with {len(rows)} rows"
            )
        del rows[row - 1]
