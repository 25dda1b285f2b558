"""Domain entities for SheetDB.

Entities are plain Python classes that represent core concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from sheetdb.domain.entities.collection_info import CollectionInfo, DeleteResult, UpdateResult
from sheetdb.domain.entities.document import (
    CREATED_AT_FIELD,
    ID_FIELD,
    ROW_FIELD,
    Document,
)

__all__ = [
    "CREATED_AT_FIELD",
    "CollectionInfo",
    "DeleteResult",
    "Document",
    "ID_FIELD",
    "ROW_FIELD",
    "UpdateResult",
]
