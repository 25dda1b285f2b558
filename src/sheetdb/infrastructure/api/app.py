"""FastAPI application factory and configuration.

This module provides the application factory function for creating
and configuring the FastAPI application with its table store, middleware,
routes and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sheetdb.application.services import RequestDispatcher
from sheetdb.core.config import Settings, get_settings
from sheetdb.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from sheetdb.infrastructure.persistence import DatabaseManager, init_database
from sheetdb.infrastructure.storage import TableStore, build_store

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Prepares the SQL database on startup when the sql backend is in use and
    disposes of its engine on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Starting SheetDB",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        store_backend=settings.store_backend,
    )

    db: DatabaseManager | None = app.state.db_manager
    if db is not None:
        try:
            await init_database(db)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error("Failed to initialize database", error=str(e))
            raise

    yield

    logger.info("Shutting down SheetDB")
    if db is not None:
        await db.disconnect()
        logger.info("Database connection closed")


def create_app(settings: Settings | None = None, store: TableStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use. Defaults to the cached application settings.
        store: Table store to serve. Defaults to the one selected by settings;
            passing one in lets tests run against an isolated store.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Document database over header-row tables",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    db_manager = None
    if store is None:
        store, db_manager = build_store(settings)

    app.state.settings = settings
    app.state.store = store
    app.state.db_manager = db_manager
    app.state.dispatcher = RequestDispatcher(
        store,
        verify_row_identity=settings.verify_row_identity,
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)

    return app


def register_health_check(app: FastAPI) -> None:
    """Register health check endpoints."""

    @app.get("/health", tags=["health"])
    async def health_check():
        """Basic health check endpoint.

        Returns 200 if the service is running. Does not check the
        backing store.
        """
        settings = app.state.settings
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "store_backend": type(app.state.store).__name__,
        }


def register_routes(app: FastAPI) -> None:
    """Register API routes."""
    from sheetdb.infrastructure.api.routes import database_router, driver_router

    app.include_router(database_router, tags=["database"])
    app.include_router(driver_router, tags=["driver"])


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "Unhandled exception",
            path=str(request.url),
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "message": str(exc) if app.state.settings.debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Register custom middleware."""

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Log every request and attach a correlation ID."""
        correlation_id = request.headers.get("X-Correlation-ID") or new_correlation_id()
        bind_correlation_id(correlation_id)

        logger.info("Request started", method=request.method, path=str(request.url.path))

        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                method=request.method,
                path=str(request.url.path),
                status_code=response.status_code,
            )
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()


# Create the application instance
app = create_app()
