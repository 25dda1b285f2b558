"""Pydantic schemas for the database endpoint."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class DatabaseRequest(BaseModel):
    """A single database action.

    ``action`` is kept as a free string so unknown actions reach the
    dispatcher and come back as an error envelope rather than a 422.
    """

    model_config = ConfigDict(extra="ignore")

    action: str | None = Field(None, description="find, findOne, insertOne, updateOne, deleteMany or getSchema")
    collection: str | None = Field(None, description="Target collection (table) name")
    query: dict[str, Any] | None = Field(None, description="Structured filter or {'$where': expression}")
    options: dict[str, Any] | None = Field(None, description="Optional 'sort' and 'limit'")
    data: dict[str, Any] | None = Field(None, description="Document or update payload")


class SuccessResponse(BaseModel):
    """Envelope for a successful action."""

    status: Literal["success"] = "success"
    data: Any = Field(None, description="Action result")


class ErrorResponse(BaseModel):
    """Envelope for a failed action."""

    status: Literal["error"] = "error"
    message: str = Field(..., description="Human-readable error message")
