"""Document entity materialized from one table row.

A document is an insertion-ordered mapping of column name to value. The
physical row it was read from is kept beside the mapping, never inside it,
so it cannot leak into persisted data or API responses.
"""

from collections.abc import Iterator, MutableMapping
from typing import Any

ID_FIELD = "_id"
CREATED_AT_FIELD = "createdAt"
ROW_FIELD = "_row"


class Document(MutableMapping[str, Any]):
    """One logical record of a collection.

    Attributes:
        row: 1-based row in the backing table (row 1 is the header), or None
            for documents that were not read from a table. Only valid within
            the read-then-write sequence of a single operation.
    """

    __slots__ = ("_fields", "row")

    def __init__(self, fields: dict[str, Any] | None = None, row: int | None = None) -> None:
        self._fields: dict[str, Any] = dict(fields or {})
        self._fields.pop(ROW_FIELD, None)
        self.row = row

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key == ROW_FIELD:
            raise KeyError(f"'{ROW_FIELD}' is reserved and cannot be stored")
        self._fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"Document({self._fields!r}, row={self.row!r})"

    @property
    def id(self) -> Any:
        """The conventional primary key, if present."""
        return self._fields.get(ID_FIELD)

    def to_dict(self) -> dict[str, Any]:
        """Externally observable copy of the fields, without the row."""
        return dict(self._fields)
