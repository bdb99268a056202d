"""
Async engine and session factory.

One AsyncSession per request. Services commit their own writes; this
dependency only guarantees rollback on error and closing the session.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from sports_events.core.config import get_settings

settings = get_settings()


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine, applying pool settings where the dialect supports them."""
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=False, connect_args={"timeout": 30})

    return create_async_engine(
        url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
