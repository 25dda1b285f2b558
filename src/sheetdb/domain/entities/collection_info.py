"""Collection introspection and write-result entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CollectionInfo:
    """Introspection summary of one collection.

    Attributes:
        collection: Table name.
        count: Number of rows below the header.
        fields: Non-empty header cells, in column order.
    """

    collection: str
    count: int
    fields: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("Document count cannot be negative")

    def to_dict(self) -> dict[str, Any]:
        return {"collection": self.collection, "count": self.count, "fields": list(self.fields)}


@dataclass
class UpdateResult:
    """Outcome of an update: how many documents were written."""

    modified_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"modifiedCount": self.modified_count}


@dataclass
class DeleteResult:
    """Outcome of a delete: how many documents were removed."""

    deleted_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"deletedCount": self.deleted_count}
