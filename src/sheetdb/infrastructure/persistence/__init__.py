"""Persistence layer for the SQL table store (SQLAlchemy async)."""

from sheetdb.infrastructure.persistence.database import Base, DatabaseManager, init_database

__all__ = [
    "Base",
    "DatabaseManager",
    "init_database",
]
