"""Schema (column) manager.

A collection's schema is the header row of its table: an ordered,
append-only list of column names. New columns are always added at the end.
"""

from collections.abc import Iterable

from sheetdb.core.logging import get_logger
from sheetdb.domain.entities import CREATED_AT_FIELD, ID_FIELD, CollectionInfo
from sheetdb.infrastructure.storage.base import TableStore

logger = get_logger(__name__)

DEFAULT_COLUMNS = [ID_FIELD, CREATED_AT_FIELD]


class SchemaManager:
    """Reads and extends table headers through a table store."""

    def __init__(self, store: TableStore) -> None:
        self.store = store

    async def get_or_create(self, table: str) -> list[str]:
        """Return the table's header, creating the table first if it is missing.

        New tables start with the default ``_id`` and ``createdAt`` columns.
        """
        if not await self.store.has_table(table):
            await self.store.create_table(table, DEFAULT_COLUMNS)
            logger.info("Collection created", collection=table, columns=DEFAULT_COLUMNS)
        return await self.store.read_header(table)

    async def ensure_columns(self, table: str, keys: Iterable[str]) -> list[str]:
        """Append every key missing from the header as a trailing column.

        Idempotent: a second call with the same keys writes nothing.

        Args:
            table: Table name.
            keys: Column names the caller is about to write.

        Returns:
            The updated header, in column order.
        """
        header = await self.store.read_header(table)
        added = []

        for key in keys:
            key = str(key)
            if key in header:
                continue
            await self.store.set_cell(table, 1, len(header) + 1, key)
            header.append(key)
            added.append(key)

        if added:
            logger.info("Columns added", collection=table, columns=added)
        return header

    async def get_schema(self) -> list[CollectionInfo]:
        """Describe every table: name, document count and non-empty header fields.

        Introspection only; never consulted when validating writes.
        """
        schema = []
        for name in await self.store.list_tables():
            rows = await self.store.row_count(name)
            header = await self.store.read_header(name)
            schema.append(
                CollectionInfo(
                    collection=name,
                    count=max(0, rows - 1),
                    fields=[field for field in header if field],
                )
            )
        return schema
