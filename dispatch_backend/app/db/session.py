"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support for PostgreSQL.
"""

import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from dispatch_backend.app.core.config import settings
from dispatch_backend.app.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

engine_options = {"echo": settings.db_echo, "future": True}
if not settings.database_url.startswith("sqlite"):
    engine_options.update(
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )

# Create async engine
engine = create_async_engine(settings.database_url, **engine_options)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Create declarative base for models
Base = declarative_base()


async def get_db():
    """
    FastAPI dependency for database sessions.

    Yields an async database session and ensures it's properly closed.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def commit_or_raise(db: AsyncSession, operation: str) -> None:
    """
    Commit the current unit of work.

    Integrity violations are re-raised untouched so callers can map them to
    domain conflicts; any other store failure rolls back and becomes a
    PersistenceError carrying the driver message.
    """
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("commit failed during %s: %s", operation, exc)
        raise PersistenceError(operation, str(exc)) from exc


async def flush_or_raise(db: AsyncSession, operation: str) -> None:
    """Flush pending changes with the same error mapping as commit_or_raise."""
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("flush failed during %s: %s", operation, exc)
        raise PersistenceError(operation, str(exc)) from exc
