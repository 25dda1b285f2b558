"""Pydantic schemas for API requests and responses."""

from sheetdb.infrastructure.api.schemas.database_schemas import (
    DatabaseRequest,
    ErrorResponse,
    SuccessResponse,
)

__all__ = [
    "DatabaseRequest",
    "ErrorResponse",
    "SuccessResponse",
]
