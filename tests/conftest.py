"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from pokeroll.config import get_settings
from pokeroll.database import close_db, create_all, get_session, init_db


@pytest.fixture
def database_url(tmp_path, monkeypatch) -> str:
    """Point the app at a throwaway SQLite file for this test."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'pokeroll.db'}"
    monkeypatch.setenv("POKEROLL_DATABASE_URL", url)
    monkeypatch.setenv("POKEROLL_SEED_CATALOG_ON_STARTUP", "false")
    monkeypatch.setenv("POKEROLL_LOG_FORMAT", "console")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def db_session(database_url: str) -> AsyncGenerator[AsyncSession, None]:
    """A session on a freshly created schema."""
    await init_db(database_url)
    await create_all()
    async for session in get_session():
        yield session
        await session.close()
        break
    await close_db()


@pytest_asyncio.fixture
async def user(db_session: AsyncSession):
    """A committed player with a default currency row."""
    from pokeroll.auth.service import create_user

    created = await create_user(db_session, "ash@example.com", name="Ash")
    await db_session.commit()
    return created


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession) -> AsyncSession:
    """Session with the starter catalog seeded."""
    from pokeroll.catalog.seed import seed_catalog

    await seed_catalog(db_session)
    return db_session


@pytest_asyncio.fixture
async def client(database_url: str) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client against a seeded database."""
    from pokeroll.catalog.seed import seed_catalog
    from pokeroll.main import create_app

    app = create_app()
    await init_db(database_url)
    await create_all()
    async for session in get_session():
        await seed_catalog(session)
        await session.close()
        break

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_db()
