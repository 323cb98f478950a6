"""
Database engine and session management
Async SQLAlchemy over aiosqlite (development) or asyncpg (production)
"""

from typing import AsyncGenerator
import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings
from tvmerch.models.base import Base

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL

    SQLite files get no pool; an in-memory SQLite database is pinned to
    one shared connection so every session sees the same tables.
    """
    if url.startswith("sqlite"):
        if ":memory:" in url or url.rstrip("/").endswith("aiosqlite:"):
            return create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(url, echo=echo, poolclass=NullPool)

    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url_async, echo=settings.DATABASE_ECHO)
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a request-scoped session

    The whole request is one transaction: it commits when the handler
    returns and rolls back if anything raised, so an order and its coupon
    redemption are stored together or not at all.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(bind: AsyncEngine) -> None:
    # Models register themselves on Base.metadata at import
    import tvmerch.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db() -> None:
    """Create missing tables on the configured database"""
    await create_tables(engine)
    logger.info("Database tables created successfully")


async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
