"""Document reader: materializes table rows as documents."""

from sheetdb.core.logging import get_logger
from sheetdb.domain.entities import Document
from sheetdb.infrastructure.storage.base import TableStore

logger = get_logger(__name__)


class DocumentReader:
    """Turns every row below a table's header into a Document."""

    def __init__(self, store: TableStore) -> None:
        self.store = store

    async def read_all(self, table: str) -> list[Document]:
        """Read all documents of a table, in row order.

        Fields are aligned to the header by position. A row shorter than the
        header leaves the trailing fields absent; empty header cells are
        skipped. Each document's ``row`` is its 1-based table row.
        """
        rows = await self.store.read_all(table)
        if not rows:
            return []

        header, data_rows = rows[0], rows[1:]
        documents = []
        for index, cells in enumerate(data_rows):
            fields = {
                name: cells[column]
                for column, name in enumerate(header)
                if name and column < len(cells)
            }
            documents.append(Document(fields, row=index + 2))

        logger.debug("Documents read", collection=table, count=len(documents))
        return documents
