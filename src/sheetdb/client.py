"""Async client for a SheetDB deployment.

Every call is a JSON ``POST`` to the deployment URL; error envelopes are
raised as SheetDBClientError.

Example:
    async with SheetDB("http://localhost:8000/") as db:
        users = db.collection("users")
        ada = await users.insert_one({"name": "Ada", "age": 36})
        ada["age"] = 37
        await ada.save()
        seniors = await users.find("age > 30", sort={"age": -1}, limit=10)
"""

from collections.abc import Mapping
from typing import Any

import httpx

from sheetdb.core.exceptions import SheetDBError
from sheetdb.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class SheetDBClientError(SheetDBError):
    """Raised when the service answers with an error envelope or cannot be reached."""

    pass


class SheetDB:
    """Connection to one SheetDB deployment."""

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the connection.

        Args:
            url: Deployment URL (the database endpoint).
            client: HTTP client to use. When omitted one is created and
                closed by ``aclose()``.
            timeout: Request timeout in seconds for the created client.
        """
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def __aenter__(self) -> "SheetDB":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this connection created it."""
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, action: str, **body: Any) -> Any:
        payload = {"action": action, **{k: v for k, v in body.items() if v is not None}}
        try:
            response = await self._client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise SheetDBClientError(f"Request to {self.url} failed: {e}") from e

        try:
            envelope = response.json()
        except ValueError as e:
            raise SheetDBClientError(
                f"Unexpected response from {self.url}: HTTP {response.status_code}"
            ) from e

        if not isinstance(envelope, dict) or "status" not in envelope:
            raise SheetDBClientError(f"Unexpected response from {self.url}: {envelope!r}")
        if envelope["status"] == "error":
            logger.debug("Action failed", action=action, message=envelope.get("message"))
            raise SheetDBClientError(envelope.get("message") or "Unknown error")
        return envelope.get("data")

    async def get_schema(self) -> list[dict[str, Any]]:
        """Describe every collection: ``[{collection, count, fields}]``."""
        return await self._request("getSchema")

    def collection(self, name: str) -> "Collection":
        """Return a handle on a collection. Nothing is sent until it is used."""
        return Collection(self, name)


class Collection:
    """Remote collection handle."""

    def __init__(self, db: SheetDB, name: str) -> None:
        self.db = db
        self.name = name

    def _request(self, action: str, **body: Any) -> Any:
        return self.db._request(action, collection=self.name, **body)

    async def find(
        self,
        query: Mapping[str, Any] | str | None = None,
        *,
        sort: Any = None,
        limit: int | None = None,
    ) -> list["RemoteDocument"]:
        """Find documents.

        Args:
            query: Structured query, or an expression string used as ``$where``.
            sort: Sort specification or comparator expression over ``a`` and ``b``.
            limit: Maximum number of documents to return.
        """
        if isinstance(query, str):
            query = {"$where": query}
        options = {}
        if sort is not None:
            options["sort"] = sort
        if limit is not None:
            options["limit"] = limit

        documents = await self._request("find", query=dict(query or {}), options=options)
        return [RemoteDocument(doc, self) for doc in documents]

    async def find_one(self, query: Mapping[str, Any] | str | None = None) -> "RemoteDocument | None":
        """Return the first matching document, or None."""
        if isinstance(query, str):
            query = {"$where": query}
        document = await self._request("findOne", query=dict(query or {}))
        return RemoteDocument(document, self) if document is not None else None

    async def insert_one(self, data: Mapping[str, Any]) -> "RemoteDocument":
        """Insert a document and return it with its generated ``_id`` and ``createdAt``."""
        document = await self._request("insertOne", data=dict(data))
        return RemoteDocument(document, self)

    async def update_one(self, query: Mapping[str, Any], data: Mapping[str, Any]) -> dict[str, int]:
        """Write ``data`` into every matching document. Returns ``{"modifiedCount": n}``."""
        return await self._request("updateOne", query=dict(query), data=dict(data))

    async def delete_many(self, query: Mapping[str, Any]) -> dict[str, int]:
        """Delete every matching document. Returns ``{"deletedCount": n}``."""
        return await self._request("deleteMany", query=dict(query))


class RemoteDocument(dict):
    """A document returned by the service, bound to its collection."""

    def __init__(self, data: Mapping[str, Any], collection: Collection) -> None:
        super().__init__(data)
        self.collection = collection

    @property
    def id(self) -> str | None:
        return self.get("_id")

    def to_dict(self) -> dict[str, Any]:
        """Plain copy of the fields, without ``_row``."""
        return {key: value for key, value in self.items() if key != "_row"}

    async def save(self) -> dict[str, int]:
        """Write the current fields back to the service, matching on ``_id``."""
        if not self.id:
            raise SheetDBClientError("Cannot save a document without an _id")
        update = self.to_dict()
        update.pop("_id", None)
        return await self.collection.update_one({"_id": self.id}, update)

    async def delete(self) -> dict[str, int]:
        """Delete this document from the service, matching on ``_id``."""
        if not self.id:
            raise SheetDBClientError("Cannot delete a document without an _id")
        return await self.collection.delete_many({"_id": self.id})
