"""Application services: schema management, reading and CRUD orchestration."""

from sheetdb.application.services.document_engine import DocumentEngine, parse_limit
from sheetdb.application.services.document_reader import DocumentReader
from sheetdb.application.services.request_dispatcher import ACTIONS, RequestDispatcher
from sheetdb.application.services.schema_manager import DEFAULT_COLUMNS, SchemaManager

__all__ = [
    "ACTIONS",
    "DEFAULT_COLUMNS",
    "DocumentEngine",
    "DocumentReader",
    "RequestDispatcher",
    "SchemaManager",
    "parse_limit",
]
