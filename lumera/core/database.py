"""
Async database engine and sessions for the wishlist store

PostgreSQL (asyncpg) in deployments, SQLite (aiosqlite) for local runs and
the test suite.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict
import logging

from .config import settings

logger = logging.getLogger(__name__)

def _engine_options(url: str) -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.DATABASE_ECHO}
    if url.startswith("sqlite"):
        # One connection per session; concurrent wishlist writers queue on the file lock
        options["poolclass"] = NullPool
    else:
        options.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,
        )
    return options

engine = create_async_engine(
    settings.database_url_async,
    **_engine_options(settings.database_url_async)
)

# Rows stay readable after commit so routes can serialise what they just wrote
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session dependency

    Commits when the route returns, rolls back if it raises.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """Same unit of work as ``get_db`` for code outside a request (seeding, tests)"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise

async def init_db() -> None:
    """Create the user, catalog and wishlist tables"""
    from lumera.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Wishlist schema ready")

async def drop_db() -> None:
    from lumera.models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Wishlist schema dropped")

async def close_db() -> None:
    await engine.dispose()
    logger.info("Database connections closed")
