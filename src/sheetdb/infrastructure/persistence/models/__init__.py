"""SQLAlchemy models for the SQL table store.

All models inherit from the Base class defined in database.py.
"""

from sheetdb.infrastructure.persistence.models.sheet import SheetRowModel, SheetTableModel

__all__ = [
    "SheetRowModel",
    "SheetTableModel",
]
