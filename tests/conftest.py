"""
Pytest fixtures - test DB, client, auth, listings (TDD/BDD support).
Challenge: Isolated tests; no broker, Redis or Elasticsearch needed.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.cache import redis_client
from app.db.base import Base
from app.db.models import FoodCategory, FoodItem, FoodStatus, User
from app.db.session import get_db
from app.main import app
from app.queue import tasks

from helpers import auth_for

# File-based SQLite so several sessions can share one database in race tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"


@dataclass
class Party:
    """A test user reduced to what requests need (ids survive session expiry)."""

    id: int
    headers: dict


class FakeRedis:
    """In-memory stand-in for the cache so runs never share state through a real Redis."""

    def __init__(self):
        self.store: dict[str, str] = {}

    async def get(self, key):
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self.store[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    async def ping(self):
        return True


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_client, "_redis", fake)
    return fake


@pytest.fixture(autouse=True)
def queued(monkeypatch) -> dict:
    """Capture Celery publishes instead of talking to a broker."""
    sent = {"index": [], "status": []}
    monkeypatch.setattr(tasks, "enqueue_food_index", lambda doc: sent["index"].append(doc))
    monkeypatch.setattr(
        tasks, "enqueue_status_sync", lambda item_id, status: sent["status"].append((item_id, status))
    )
    return sent


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def client(session: AsyncSession):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def users(session: AsyncSession) -> dict[str, Party]:
    """alice lists food, bob and carol request it."""
    created = {}
    for name in ("alice", "bob", "carol"):
        user = User(email=f"{name}@example.com", full_name=name.title())
        session.add(user)
        created[name] = user
    await session.flush()
    return {name: Party(id=u.id, headers=auth_for(u.id)) for name, u in created.items()}


@pytest.fixture
def make_food(session: AsyncSession):
    """Factory inserting a listing directly; returns its id."""

    async def _make(owner_id: int, **overrides) -> int:
        data = {
            "owner_id": owner_id,
            "title": "Vegetable lasagna",
            "description": "Half a tray, baked this morning",
            "quantity": 4,
            "category": FoodCategory.MEAL,
            "expires_at": datetime.now(timezone.utc) + timedelta(days=1),
            "status": FoodStatus.AVAILABLE,
            "images": [],
        }
        data.update(overrides)
        item = FoodItem(**data)
        session.add(item)
        await session.flush()
        return item.id

    return _make

