"""
Database session management with async SQLAlchemy 2.0.
Handles connection pooling and session lifecycle.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from typing import AsyncGenerator, Optional

from timesheet_api.core.config import settings
from timesheet_api.core.logging import get_logger

logger = get_logger(__name__)

# Global engine and sessionmaker
engine = None
async_session_maker: Optional[async_sessionmaker[AsyncSession]] = None


def create_engine():
    """Create async SQLAlchemy engine with connection pooling."""
    global engine
    
    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=False,  # Set to True for SQL query logging
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before using
    )
    
    logger.info(
        "Database engine created",
        extra={
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
        },
    )
    
    return engine


def create_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Create async sessionmaker."""
    global async_session_maker
    
    if engine is None:
        create_engine()
    
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    
    logger.info("Sessionmaker created")
    return async_session_maker


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Return the global sessionmaker, creating it on first use."""
    if async_session_maker is None:
        return create_sessionmaker()
    return async_session_maker


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database session.
    One session per request: committed on success, rolled back on error.
    """
    session_maker = get_session_maker()
    
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Initialize database connection."""
    if engine is None:
        create_engine()
    
    if async_session_maker is None:
        create_sessionmaker()
    
    logger.info("Database initialized")


async def close_db() -> None:
    """Close database connections."""
    if engine:
        await engine.dispose()
        logger.info("Database connections closed")
