"""Exception hierarchy for SheetDB.

Every error that reaches the request boundary is a SheetDBError (or an
unexpected exception) and is reported as an error envelope with its message.
"""


class SheetDBError(Exception):
    """Base class for all SheetDB errors."""

    pass


class RequestError(SheetDBError):
    """Raised when a request is malformed (missing collection, unknown action)."""

    pass


class InvalidQueryError(RequestError):
    """Raised when a query or sort specification cannot be interpreted."""

    pass


class StoreError(SheetDBError):
    """Base class for backing store failures."""

    pass


class TableNotFoundError(StoreError):
    """Raised when an operation targets a table that does not exist."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table '{table}' not found")


class TableExistsError(StoreError):
    """Raised when creating a table whose name is already taken."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table '{table}' already exists")


class InvalidCellReferenceError(StoreError):
    """Raised when a row or column index is outside the table."""

    pass


class StaleRowError(SheetDBError):
    """Raised when a row no longer holds the document read earlier in the request."""

    def __init__(self, table: str, row: int, expected_id: str, actual_id: str | None) -> None:
        self.table = table
        self.row = row
        self.expected_id = expected_id
        self.actual_id = actual_id
        super().__init__(
            f"Row {row} of '{table}' changed since it was read: "
            f"expected _id '{expected_id}', found '{actual_id}'"
        )
