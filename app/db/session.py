"""
Async database session management.
Challenge: A swap touches the ledger, up to two listings and two users in one go;
the request-scoped session is the transaction boundary for all of them.
Design: Commit once after the handler succeeds, roll back on any exception
(including DomainError raised after a partial write).
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.cache.redis_client import STALE_KEYS, cache_delete
from app.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,  # Verify connections before use
    pool_size=10,
    max_overflow=20,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one transaction per request: commit on success, roll back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.debug("Rolling back request transaction: %r", e)
            session.info.pop(STALE_KEYS, None)
            await session.rollback()
            raise
        stale = session.info.pop(STALE_KEYS, None)
        if stale:
            await cache_delete(*stale)


# Type alias for FastAPI dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
