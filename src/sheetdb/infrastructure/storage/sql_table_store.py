"""SQL table store backed by SQLAlchemy async sessions.

Each store operation runs in its own session and commits once, which makes
it atomic on its own. Nothing spans operations.
"""

import json
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sheetdb.core.exceptions import (
    InvalidCellReferenceError,
    TableExistsError,
    TableNotFoundError,
)
from sheetdb.core.logging import get_logger
from sheetdb.infrastructure.persistence.models import SheetRowModel, SheetTableModel
from sheetdb.infrastructure.storage.base import TableStore, check_column, check_row, format_cell

logger = get_logger(__name__)


def _encode(values: list[Any]) -> str:
    return json.dumps([format_cell(v) for v in values], ensure_ascii=False)


def _decode(cells: str) -> list[str]:
    return list(json.loads(cells or "[]"))


class SqlTableStore(TableStore):
    """Table store implementation over the sheet_tables/sheet_rows schema."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize the store.

        Args:
            session_factory: Factory producing async sessions bound to a
                database where the store's tables exist.
        """
        self._session_factory = session_factory

    async def _table_id(self, session: AsyncSession, name: str) -> int:
        result = await session.execute(
            select(SheetTableModel.id).where(SheetTableModel.name == name)
        )
        table_id = result.scalar_one_or_none()
        if table_id is None:
            raise TableNotFoundError(name)
        return table_id

    async def _get_row(self, session: AsyncSession, table_id: int, row: int) -> SheetRowModel | None:
        result = await session.execute(
            select(SheetRowModel).where(
                SheetRowModel.table_id == table_id,
                SheetRowModel.position == row,
            )
        )
        return result.scalar_one_or_none()

    async def _count(self, session: AsyncSession, table_id: int) -> int:
        result = await session.execute(
            select(func.coalesce(func.max(SheetRowModel.position), 0)).where(
                SheetRowModel.table_id == table_id
            )
        )
        return int(result.scalar_one())

    async def list_tables(self) -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SheetTableModel.name).order_by(SheetTableModel.id)
            )
            return list(result.scalars().all())

    async def has_table(self, name: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SheetTableModel.id).where(SheetTableModel.name == name)
            )
            return result.scalar_one_or_none() is not None

    async def create_table(self, name: str, header: list[Any]) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SheetTableModel.id).where(SheetTableModel.name == name)
            )
            if result.scalar_one_or_none() is not None:
                raise TableExistsError(name)

            table = SheetTableModel(name=name)
            session.add(table)
            await session.flush()
            session.add(SheetRowModel(table_id=table.id, position=1, cells=_encode(header)))
            await session.commit()

        logger.info("Table created", table=name, header=[format_cell(h) for h in header])

    async def read_all(self, name: str) -> list[list[str]]:
        async with self._session_factory() as session:
            table_id = await self._table_id(session, name)
            result = await session.execute(
                select(SheetRowModel.position, SheetRowModel.cells)
                .where(SheetRowModel.table_id == table_id)
                .order_by(SheetRowModel.position)
            )
            rows: list[list[str]] = []
            for position, cells in result.all():
                # Positions skipped by set_cell beyond the end read as empty rows
                while len(rows) < position - 1:
                    rows.append([])
                rows.append(_decode(cells))
            return rows

    async def read_header(self, name: str) -> list[str]:
        header = await self.read_row(name, 1)
        return header or [""]

    async def read_row(self, name: str, row: int) -> list[str]:
        check_row(row)
        async with self._session_factory() as session:
            table_id = await self._table_id(session, name)
            model = await self._get_row(session, table_id, row)
            return _decode(model.cells) if model is not None else []

    async def row_count(self, name: str) -> int:
        async with self._session_factory() as session:
            table_id = await self._table_id(session, name)
            return await self._count(session, table_id)

    async def append_row(self, name: str, values: list[Any]) -> None:
        async with self._session_factory() as session:
            table_id = await self._table_id(session, name)
            position = await self._count(session, table_id) + 1
            session.add(SheetRowModel(table_id=table_id, position=position, cells=_encode(values)))
            await session.commit()

    async def set_cell(self, name: str, row: int, column: int, value: Any) -> None:
        check_row(row)
        check_column(column)
        async with self._session_factory() as session:
            table_id = await self._table_id(session, name)
            model = await self._get_row(session, table_id, row)
            if model is None:
                model = SheetRowModel(table_id=table_id, position=row, cells="[]")
                session.add(model)

            cells = _decode(model.cells)
            while len(cells) < column:
                cells.append("")
            cells[column - 1] = format_cell(value)
            model.cells = json.dumps(cells, ensure_ascii=False)
            await session.commit()

    async def delete_row(self, name: str, row: int) -> None:
        check_row(row)
        async with self._session_factory() as session:
            table_id = await self._table_id(session, name)
            count = await self._count(session, table_id)
            if row > count:
                raise InvalidCellReferenceError(
                    f"Row {row} is out of range for table '{name}' with {count} rows"
                )

            await session.execute(
                delete(SheetRowModel).where(
                    SheetRowModel.table_id == table_id,
                    SheetRowModel.position == row,
                )
            )
            await session.execute(
                update(SheetRowModel)
                .where(SheetRowModel.table_id == table_id, SheetRowModel.position > row)
                .values(position=SheetRowModel.position - 1)
            )
            await session.commit()
