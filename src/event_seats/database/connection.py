"""Database connection management.

Provides an async database connection using SQLAlchemy.

## Configuration

Database connection is configured via environment variables:
- DATABASE_URL: Full connection string (PostgreSQL via asyncpg in production)
- DATABASE_POOL_SIZE: Connection pool size (default: 5)
- DATABASE_MAX_OVERFLOW: Max overflow connections (default: 10)

In-memory SQLite (``sqlite+aiosqlite:///:memory:``) is supported for tests;
it uses a single shared connection so every session sees the same data.

## Usage

```python
from event_seats.database import connect_db

# Connect once on startup; raises DatabaseConnectionError on failure
database = await connect_db(settings)

# Use in scripts
async with database.session() as session:
    user = await session.get(User, user_id)
```
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from event_seats.config import Settings
from event_seats.database.models import Base
from event_seats.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


class Database:
    """An async engine together with its session factory."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def ping(self) -> None:
        """Round-trip a trivial query to prove the database is reachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Get a database session.

        The session is rolled back if the block raises and is always closed.
        Transactions are not committed automatically - call commit() explicitly.
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """Create all database tables.

        For development/testing only.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all database tables.

        For development/testing only. Use with caution!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

        logger.warning("Database tables dropped")

    async def dispose(self) -> None:
        """Close all pooled connections. Called on application shutdown."""
        logger.info("Closing database connection")
        await self.engine.dispose()


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Pool options suited to the configured backend."""
    options: dict[str, Any] = {"echo": settings.database_echo}

    if settings.database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if ":memory:" in settings.database_url:
            options["poolclass"] = StaticPool
        return options

    options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,  # Verify connections before use
    )
    return options


def create_database(settings: Settings) -> Database:
    """Build a Database without touching the network."""
    engine = create_async_engine(settings.database_url, **_engine_options(settings))
    return Database(engine)


async def connect_db(settings: Settings) -> Database:
    """Open the database connection, making a single attempt.

    Raises:
        DatabaseConnectionError: If the database cannot be reached
    """
    logger.info("Connecting to the database")

    try:
        database = create_database(settings)
    except (SQLAlchemyError, ImportError, ValueError) as e:
        raise DatabaseConnectionError(f"Invalid database configuration: {e}") from e

    try:
        await database.ping()
    except Exception as e:
        # Drivers raise their own exception types on connect, not only DBAPI errors
        await database.dispose()
        raise DatabaseConnectionError(str(e)) from e

    logger.info("Database connection established")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Usage:
    ```python
    @router.get("/{event_id}")
    async def get_event(
        event_id: UUID,
        db: AsyncSession = Depends(get_db_session),
    ):
        return await db.get(Event, event_id)
    ```
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
