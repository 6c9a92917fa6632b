"""
Database base configuration

Declarative Base, async engine and session factory
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

from community_api.config.settings import settings

# Declarative base
Base = declarative_base()

# Async engine (asyncpg)
async_engine = None
AsyncSessionLocal = None


def get_database_url(async_mode: bool = True) -> str:
    """
    Resolve the database connection URL

    Args:
        async_mode: rewrite postgresql:// to the asyncpg driver

    Returns:
        Database connection URL
    """
    url = settings.DATABASE_URL
    if not url:
        raise RuntimeError("DATABASE_URL is not set")

    # postgresql:// -> postgresql+asyncpg://
    if async_mode and url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

    return url


async def init_db():
    """
    Initialise the database connection

    Creates the async engine and the session factory
    """
    global async_engine, AsyncSessionLocal

    url = get_database_url(async_mode=True)
    engine_kwargs = {"echo": settings.DEBUG}
    if not url.startswith("sqlite"):
        engine_kwargs.update(
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
        )

    async_engine = create_async_engine(url, **engine_kwargs)

    AsyncSessionLocal = sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_tables():
    """Create every mapped table that does not exist yet"""
    if async_engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    # Register all models on Base.metadata
    from community_api.db import models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Dispose the connection pool"""
    global async_engine

    if async_engine:
        await async_engine.dispose()
        async_engine = None


async def get_db():
    """
    Database session for dependency injection

    Commits when the request succeeds, rolls back on any error

    Yields:
        AsyncSession: database session
    """
    if not AsyncSessionLocal:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
