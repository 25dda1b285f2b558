"""Request dispatcher: routes an action to the document engine.

Turns one decoded request (action, collection and arguments) into a
JSON-ready result. Errors are raised to the caller, which renders them as
an error envelope.
"""

from collections.abc import Mapping
from typing import Any

from sheetdb.application.services.document_engine import DocumentEngine
from sheetdb.application.services.schema_manager import SchemaManager
from sheetdb.core.exceptions import RequestError
from sheetdb.core.logging import get_logger
from sheetdb.infrastructure.storage.base import TableStore

logger = get_logger(__name__)

SCHEMA_ACTION = "getSchema"
COLLECTION_ACTIONS = ("find", "findOne", "insertOne", "updateOne", "deleteMany")
ACTIONS = (SCHEMA_ACTION, *COLLECTION_ACTIONS)


class RequestDispatcher:
    """Executes database actions against one table store."""

    def __init__(self, store: TableStore, *, verify_row_identity: bool = False) -> None:
        """Initialize the dispatcher.

        Args:
            store: Backing table store handle shared by all requests.
            verify_row_identity: Passed to every DocumentEngine it builds.
        """
        self.store = store
        self.verify_row_identity = verify_row_identity
        self.schema = SchemaManager(store)

    async def execute(
        self,
        action: str | None,
        collection: str | None = None,
        query: Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> Any:
        """Run one action and return its JSON-ready result.

        Raises:
            RequestError: If the collection is missing or the action is unknown.
            SheetDBError: For query and store failures.
        """
        if action == SCHEMA_ACTION:
            return [info.to_dict() for info in await self.schema.get_schema()]

        if not collection:
            raise RequestError("Collection name is required")
        if action not in COLLECTION_ACTIONS:
            raise RequestError(f"Unknown action: {action}")

        await self.schema.get_or_create(collection)
        engine = DocumentEngine(
            self.store,
            collection,
            verify_row_identity=self.verify_row_identity,
        )
        query = query or {}

        logger.debug("Dispatching action", action=action, collection=collection)

        if action == "find":
            return [doc.to_dict() for doc in await engine.find(query, options or {})]
        if action == "findOne":
            doc = await engine.find_one(query)
            return doc.to_dict() if doc is not None else None
        if action == "insertOne":
            return await engine.insert_one(data or {})
        if action == "updateOne":
            return (await engine.update_one(query, data or {})).to_dict()
        # deleteMany
        return (await engine.delete_many(query)).to_dict()
