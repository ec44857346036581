"""
BDD fixtures - a real per-request transaction against a scratch SQLite file.
Steps are synchronous; the app runs inside Starlette's TestClient.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db import session as db_session
from app.db.base import Base
from app.main import app

BDD_DATABASE_URL = "sqlite+aiosqlite:///./test_bdd.db"


async def _reset_schema(engine, create: bool) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        if create:
            await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def bdd_session_maker(monkeypatch):
    # NullPool: setup steps and the TestClient run on different event loops
    engine = create_async_engine(BDD_DATABASE_URL, poolclass=NullPool)
    asyncio.run(_reset_schema(engine, create=True))
    maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    monkeypatch.setattr(db_session, "async_session_maker", maker)
    yield maker
    asyncio.run(_reset_schema(engine, create=False))
    asyncio.run(engine.dispose())


@pytest.fixture
def api(bdd_session_maker):
    """TestClient without lifespan: no Elasticsearch at startup."""
    return TestClient(app)


@pytest.fixture
def response():
    """Store last response for then steps."""
    return {}
