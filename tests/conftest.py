"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sheetdb.core.config import Settings
from sheetdb.infrastructure.persistence import models  # noqa: F401
from sheetdb.infrastructure.persistence.database import Base
from sheetdb.infrastructure.storage import MemoryTableStore, SqlTableStore


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests: in-memory backend, JSON logs."""
    return Settings(
        environment="testing",
        store_backend="memory",
        external_url="http://sheetdb.test/",
        log_level="DEBUG",
        log_format="json",
    )


@pytest.fixture
def memory_store() -> MemoryTableStore:
    """An empty in-memory table store."""
    return MemoryTableStore()


@pytest_asyncio.fixture
async def sql_store() -> AsyncGenerator[SqlTableStore, None]:
    """SQL table store over an in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield SqlTableStore(session_factory)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(test_settings: Settings, memory_store: MemoryTableStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for an app serving the test's memory store."""
    from sheetdb.infrastructure.api.app import create_app

    app = create_app(settings=test_settings, store=memory_store)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
