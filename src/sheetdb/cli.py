"""Command-line interface for SheetDB.

This module provides the CLI commands for running the SheetDB service and
inspecting its configured store.
"""

import asyncio
import json
import os

import click

from sheetdb import __version__
from sheetdb.core.config import Settings, get_settings
from sheetdb.core.logging import configure_logging, get_logger


def _settings(ctx: click.Context) -> Settings:
    settings = get_settings()
    log_level = ctx.obj.get("log_level") if ctx.obj else None
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    return settings


@click.group()
@click.version_option(version=__version__, prog_name="SheetDB")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides SHEETDB_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """SheetDB - document database over header-row tables."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None, reload: bool) -> None:
    """Start the SheetDB server."""
    import uvicorn

    settings = _settings(ctx)
    bind_host = host or settings.host
    bind_port = port or settings.port

    # The app is imported by uvicorn and reads its settings from the environment
    if ctx.obj.get("log_level"):
        os.environ["SHEETDB_LOG_LEVEL"] = settings.log_level
        get_settings.cache_clear()

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting SheetDB server",
        host=bind_host,
        port=bind_port,
        workers=settings.workers,
        reload=reload,
        store_backend=settings.store_backend,
        environment=settings.environment,
    )

    uvicorn.run(
        "sheetdb.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else settings.workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.pass_context
def schema(ctx: click.Context) -> None:
    """Print every collection of the configured store as JSON."""
    from sheetdb.application.services import RequestDispatcher
    from sheetdb.infrastructure.persistence import init_database
    from sheetdb.infrastructure.storage import build_store

    settings = _settings(ctx)
    configure_logging(settings)

    async def describe() -> list:
        store, db = build_store(settings)
        try:
            if db is not None:
                await init_database(db)
            return await RequestDispatcher(store).execute("getSchema")
        finally:
            if db is not None:
                await db.disconnect()

    click.echo(json.dumps(asyncio.run(describe()), indent=2))


@cli.command()
@click.option(
    "--url",
    type=str,
    default=None,
    help="Service URL to bake into the driver (defaults to SHEETDB_EXTERNAL_URL)",
)
@click.pass_context
def driver(ctx: click.Context, url: str | None) -> None:
    """Print the generated client driver module."""
    from sheetdb.infrastructure.services import get_driver_renderer

    settings = _settings(ctx)
    configure_logging(settings)
    click.echo(get_driver_renderer().render(url or settings.external_url), nl=False)


def main() -> None:
    """Main entry point for the CLI.

    This function is called when the `sheetdb` command is run
    or when using `python -m sheetdb`.
    """
    cli()


if __name__ == "__main__":
    main()
