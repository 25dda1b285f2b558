"""Domain services for SheetDB.

Services contain business logic that doesn't naturally fit within a single entity.
They have no dependencies on infrastructure or external frameworks.
"""

from sheetdb.domain.services.document_id_generator import DocumentIdGenerator
from sheetdb.domain.services.document_sorter import (
    DocumentSorter,
    parse_sort_fields,
    sort_documents,
)
from sheetdb.domain.services.query_matcher import QueryMatcher, matches

__all__ = [
    "DocumentIdGenerator",
    "DocumentSorter",
    "QueryMatcher",
    "matches",
    "parse_sort_fields",
    "sort_documents",
]
