"""Document engine: find, insert, update and delete over one table.

The engine composes the document reader, query matcher, sorter and schema
manager. It keeps no state between calls besides the table itself; each call
reads the table fresh, and any row numbers it captures are only used within
that same call.
"""

from collections.abc import Mapping
from typing import Any

from sheetdb.application.services.document_reader import DocumentReader
from sheetdb.application.services.schema_manager import SchemaManager
from sheetdb.core.exceptions import InvalidQueryError, RequestError, StaleRowError
from sheetdb.core.logging import get_logger
from sheetdb.domain.entities import (
    CREATED_AT_FIELD,
    ID_FIELD,
    ROW_FIELD,
    DeleteResult,
    Document,
    UpdateResult,
)
from sheetdb.domain.services import DocumentIdGenerator, DocumentSorter, QueryMatcher
from sheetdb.infrastructure.storage.base import TableStore

logger = get_logger(__name__)


def parse_limit(value: Any) -> int | None:
    """Normalize the ``limit`` option. None and 0 mean no limit."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise InvalidQueryError(f"Limit must be a non-negative integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidQueryError(f"Limit must be a non-negative integer, got {value!r}")
    return int(value) or None


def _payload(data: Any, name: str) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise RequestError(f"{name} must be an object")
    return {str(key): value for key, value in data.items() if key != ROW_FIELD}


class DocumentEngine:
    """CRUD operations over a single collection table.

    Example:
        engine = DocumentEngine(store, "users")
        await engine.insert_one({"name": "Ada", "age": 36})
        adults = await engine.find({"age": {"$gte": 18}}, {"sort": {"age": -1}})
    """

    def __init__(
        self,
        store: TableStore,
        table: str,
        *,
        verify_row_identity: bool = False,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Backing table store handle.
            table: Name of the collection table.
            verify_row_identity: Re-read each target row's ``_id`` right before
                writing to or deleting it, and fail with StaleRowError if the
                row now holds a different document.
        """
        self.store = store
        self.table = table
        self.verify_row_identity = verify_row_identity
        self.schema = SchemaManager(store)
        self.reader = DocumentReader(store)

    async def find(
        self,
        query: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> list[Document]:
        """Find documents matching a query.

        Args:
            query: Structured query or ``{"$where": "<expression>"}``.
            options: Optional ``sort`` (structured spec or comparator
                expression) and ``limit`` (keep the first N after sorting).

        Returns:
            Matching documents. Each still carries its ``row``; use
            ``to_dict()`` for the externally visible form.
        """
        options = options or {}
        if not isinstance(options, Mapping):
            raise InvalidQueryError("Options must be an object")

        matcher = QueryMatcher(query)
        sorter = DocumentSorter(options.get("sort"))
        limit = parse_limit(options.get("limit"))

        documents = [doc for doc in await self.reader.read_all(self.table) if matcher.matches(doc)]
        documents = sorter.sort(documents)
        if limit:
            documents = documents[:limit]

        logger.debug("Find completed", collection=self.table, matched=len(documents))
        return documents

    async def find_one(self, query: Mapping[str, Any] | None = None) -> Document | None:
        """Return the first matching document, or None when nothing matches."""
        documents = await self.find(query, {"limit": 1})
        return documents[0] if documents else None

    async def insert_one(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one document as a new row at the end of the table.

        ``_id`` and ``createdAt`` are generated when absent or empty. Keys
        missing from the header become new trailing columns; header columns
        absent from the document are written empty.

        Returns:
            The stored document, generated fields included.
        """
        document = _payload(data, "Document")
        if not document.get(ID_FIELD):
            document[ID_FIELD] = DocumentIdGenerator.generate()
        if not document.get(CREATED_AT_FIELD):
            document[CREATED_AT_FIELD] = DocumentIdGenerator.timestamp()

        header = await self.schema.ensure_columns(self.table, document.keys())
        row = [document[name] if name and name in document else "" for name in header]
        await self.store.append_row(self.table, row)

        logger.info("Document inserted", collection=self.table, document_id=document[ID_FIELD])
        return document

    async def update_one(
        self,
        query: Mapping[str, Any] | None,
        update: Mapping[str, Any],
    ) -> UpdateResult:
        """Write the update's fields into every document matching ``query``.

        Despite the name this updates all matches, not just the first.
        ``_id`` never changes once inserted, so an ``_id`` key in the update
        is ignored.

        Returns:
            UpdateResult with the number of matched (and written) documents.
        """
        payload = _payload(update, "Update")
        if payload.pop(ID_FIELD, None) is not None:
            logger.debug("Ignoring _id in update payload", collection=self.table)
        targets = await self.find(query, {})
        if not targets:
            return UpdateResult(modified_count=0)

        header = await self.schema.ensure_columns(self.table, payload.keys())
        columns = {key: header.index(key) + 1 for key in payload}

        for doc in targets:
            if self.verify_row_identity:
                await self._verify_row(doc, header)
            for key, value in payload.items():
                await self.store.set_cell(self.table, doc.row, columns[key], value)

        logger.info(
            "Documents updated",
            collection=self.table,
            modified_count=len(targets),
            fields=list(payload),
        )
        return UpdateResult(modified_count=len(targets))

    async def delete_many(self, query: Mapping[str, Any] | None) -> DeleteResult:
        """Delete every document matching ``query``.

        Rows are removed bottom-up: deleting a row shifts every row below it,
        so going in descending order keeps the remaining row numbers valid.
        """
        targets = await self.find(query, {})
        header = await self.store.read_header(self.table) if self.verify_row_identity else []

        for doc in sorted(targets, key=lambda d: d.row, reverse=True):
            if self.verify_row_identity:
                await self._verify_row(doc, header)
            await self.store.delete_row(self.table, doc.row)

        logger.info("Documents deleted", collection=self.table, deleted_count=len(targets))
        return DeleteResult(deleted_count=len(targets))

    async def _verify_row(self, doc: Document, header: list[str]) -> None:
        """Fail if the document's row no longer holds the same ``_id``."""
        if not doc.id or ID_FIELD not in header:
            logger.debug("Row identity not verifiable, document has no _id", row=doc.row)
            return

        cells = await self.store.read_row(self.table, doc.row)
        column = header.index(ID_FIELD)
        actual = cells[column] if column < len(cells) else None
        if actual != doc.id:
            logger.warning(
                "Stale row detected",
                collection=self.table,
                row=doc.row,
                expected_id=doc.id,
                actual_id=actual,
            )
            raise StaleRowError(self.table, doc.row, doc.id, actual)
