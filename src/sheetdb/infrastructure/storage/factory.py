"""Table store selection from settings."""

from sheetdb.core.config import Settings
from sheetdb.core.logging import get_logger
from sheetdb.infrastructure.persistence import DatabaseManager
from sheetdb.infrastructure.storage.base import TableStore
from sheetdb.infrastructure.storage.memory_table_store import MemoryTableStore
from sheetdb.infrastructure.storage.sql_table_store import SqlTableStore

logger = get_logger(__name__)


def build_store(settings: Settings) -> tuple[TableStore, DatabaseManager | None]:
    """Create the table store selected by ``settings.store_backend``.

    Returns:
        The store and, for the sql backend, the database manager behind it.
        The caller owns the manager and must run ``init_database`` on it
        before use and ``disconnect`` after.
    """
    if settings.store_backend == "sql":
        db = DatabaseManager(settings)
        logger.debug("Using SQL table store")
        return SqlTableStore(db.session_factory), db
    logger.debug("Using in-memory table store")
    return MemoryTableStore(), None
