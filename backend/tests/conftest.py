"""
Pytest fixtures for test database, cache, client and sample data.

Each test gets its own SQLite file database (aiosqlite) with fresh tables,
and a FakeRedis-backed cache. The HTTP client opens a new session per
request, like the real get_db dependency.
"""

import os
from datetime import timedelta
from decimal import Decimal
from typing import AsyncGenerator

# Settings are read at import time; keep the app off PostgreSQL and Redis
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./sports_events_test.db")
os.environ.setdefault("REDIS_ENABLED", "false")

import pytest
import pytest_asyncio
from fakeredis.aioredis import FakeRedis
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sports_events.api.dependencies import get_cache
from sports_events.db.base import Base, utcnow
from sports_events.db.session import build_engine, get_db
from sports_events.main import app
from sports_events.models import Category, Event, EventStatus, EventType, User, Venue
from sports_events.services.booking_service import BookingService
from sports_events.services.cache_service import ReadThroughCache


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File database so separate sessions (and connections) see each other's commits."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def fake_redis():
    client = FakeRedis(decode_responses=True)
    try:
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest_asyncio.fixture
async def cache(fake_redis) -> ReadThroughCache:
    return ReadThroughCache(fake_redis, namespace="test")


@pytest_asyncio.fixture
async def client(session_factory, cache) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the DB and cache dependencies pointed at the test fixtures."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.state.cache = cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.cache = None


async def _save(session: AsyncSession, obj):
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def category(db_session: AsyncSession) -> Category:
    return await _save(db_session, Category(name="Running", description="Running and marathon events"))


@pytest_asyncio.fixture
async def venue(db_session: AsyncSession) -> Venue:
    return await _save(
        db_session,
        Venue(
            name="Kanteerava Stadium",
            address="Kanteerava Indoor Stadium, Bangalore",
            city="Bangalore",
            state="Karnataka",
            country="India",
            capacity=8000,
        ),
    )


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await _save(
        db_session,
        User(first_name="John", last_name="Doe", email="john.doe@example.com", city="Bangalore"),
    )


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _save(
        db_session,
        User(first_name="Jane", last_name="Smith", email="jane.smith@example.com", city="Mysore"),
    )


@pytest.fixture
def make_event(db_session: AsyncSession, category: Category, venue: Venue):
    """Factory for events; defaults to ACTIVE, registration open, 100 slots, price 500."""

    async def factory(**overrides) -> Event:
        now = utcnow()
        fields = dict(
            title="Bangalore Marathon",
            description="Annual city marathon",
            event_date=now + timedelta(days=30),
            registration_start_date=now - timedelta(days=1),
            registration_end_date=now + timedelta(days=1),
            max_participants=100,
            price=Decimal("500.00"),
            event_type=EventType.MARATHON,
            status=EventStatus.ACTIVE,
            category_id=category.id,
            venue_id=venue.id,
        )
        fields.update(overrides)
        return await _save(db_session, Event(**fields))

    return factory


@pytest_asyncio.fixture
async def open_event(make_event) -> Event:
    return await make_event()


@pytest_asyncio.fixture
async def single_slot_event(make_event) -> Event:
    return await make_event(title="Tiny Race", max_participants=1)


class PerCallService:
    """Runs every service method in its own session, the way each API request does."""

    def __init__(self, session_factory: async_sessionmaker, build):
        self._session_factory = session_factory
        self._build = build

    def __getattr__(self, name):
        async def call(*args, **kwargs):
            async with self._session_factory() as session:
                return await getattr(self._build(session), name)(*args, **kwargs)

        return call


@pytest.fixture
def bookings(session_factory) -> PerCallService:
    return PerCallService(session_factory, BookingService)
