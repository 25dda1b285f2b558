"""API Routes for SheetDB."""

from .database_router import router as database_router
from .driver_router import router as driver_router

__all__ = [
    "database_router",
    "driver_router",
]
