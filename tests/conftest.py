"""
Pytest fixtures for IdentityGate tests.
"""

import os

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure test config is set before importing identitygate modules.
os.environ.setdefault("IDENTITYGATE_ENV", "development")
os.environ.setdefault(
    "IDENTITYGATE_DATABASE_URL",
    os.getenv("IDENTITYGATE_TEST_DATABASE_URL", "sqlite+aiosqlite://"),
)

from identitygate.config import settings
from identitygate.db.base import Base
from identitygate.keys import SeededRandomSource, set_random_source
import identitygate.db.tables  # noqa: F401


@pytest.fixture
def random_source():
    """Deterministic random source installed as the shared source."""
    source = SeededRandomSource(1234)
    set_random_source(source)
    yield source
    set_random_source(None)


@pytest.fixture
async def engine():
    """Create a test engine and wire it into identitygate.db.base."""
    if settings.database_url.startswith("sqlite"):
        engine = create_async_engine(
            settings.database_url,
            echo=settings.debug,
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(settings.database_url, echo=settings.debug)

    # Override global engine/session factory for get_session() callers.
    from identitygate import db as db_module

    db_module.base.engine = engine
    db_module.base.async_session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    """Provide a clean database session per test."""
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session
        await session.rollback()
