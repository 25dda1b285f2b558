"""SQLAlchemy models for the SQL table store.

A store table is one ``sheet_tables`` record plus its rows in ``sheet_rows``.
Each row keeps its cells as a JSON-encoded list of display strings and its
1-based position within the table.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from sheetdb.infrastructure.persistence.database import Base


class SheetTableModel(Base):
    """SQLAlchemy model for the sheet_tables table.

    Attributes:
        id: Autoincrement key, which also gives the creation order.
        name: Table (collection) name.
        created_at: Timestamp when the table was created.
    """

    __tablename__ = "sheet_tables"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Table name",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<SheetTable(id={self.id}, name={self.name})>"


class SheetRowModel(Base):
    """SQLAlchemy model for the sheet_rows table.

    Attributes:
        id: Autoincrement surrogate key.
        table_id: Owning table.
        position: 1-based row number; 1 is the header.
        cells: JSON array of cell display strings.
    """

    __tablename__ = "sheet_rows"
    __table_args__ = (Index("ix_sheet_rows_table_position", "table_id", "position"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("sheet_tables.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, comment="1-based row number")
    cells: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="[]",
        comment="JSON array of cell display strings",
    )

    def __repr__(self) -> str:
        return f"<SheetRow(table_id={self.table_id}, position={self.position})>"
