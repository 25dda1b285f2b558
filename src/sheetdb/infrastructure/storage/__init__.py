"""Backing table stores."""

from sheetdb.infrastructure.storage.base import TableStore, format_cell
from sheetdb.infrastructure.storage.factory import build_store
from sheetdb.infrastructure.storage.memory_table_store import MemoryTableStore
from sheetdb.infrastructure.storage.sql_table_store import SqlTableStore

__all__ = [
    "MemoryTableStore",
    "SqlTableStore",
    "TableStore",
    "build_store",
    "format_cell",
]
