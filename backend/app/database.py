"""
Portfolio Backend — Database Handle and Session Management
============================================================

What:  Async SQLAlchemy engine + session factory wrapped in a `Database` handle,
       the declarative `Base`, and the per-request session dependency.
How:   The lifespan handler in main.py creates ONE `Database`, verifies the
       connection, stores it on `app.state.database`, and disposes it on
       shutdown. Requests borrow sessions from it through `get_db_session`.
Who:   main.py (lifecycle), routes (dependency), Alembic (Base metadata).

Connection Pooling:
    pool_size / max_overflow come from settings; pool_pre_ping catches stale
    connections after a database restart; pool_recycle=3600 recycles
    long-lived connections.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from app.config import settings

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Registers every model with one shared metadata object (read by Alembic).
    """
    pass


class Database:
    """
    Owns the engine and session factory for the lifetime of the process.

    Lifecycle:
        1. Database()          — engine created, no connection opened yet
        2. await connect()     — SELECT 1 with retries; raises if unreachable
        3. session()           — one AsyncSession per request
        4. await dispose()     — closes every pooled connection
    """

    def __init__(self, url: Optional[str] = None, engine: Optional[AsyncEngine] = None):
        self.engine = engine or create_async_engine(
            url or settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
        # expire_on_commit=False: returned ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def ping(self) -> None:
        """Run `SELECT 1`; raises on any connectivity problem."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def connect(self) -> None:
        """
        Verify the database is reachable before serving traffic.

        Retries a fixed number of times with a fixed wait (settings
        db_connect_attempts / db_connect_wait). The last error is re-raised so
        startup aborts with the real cause.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(settings.db_connect_attempts),
            wait=wait_fixed(settings.db_connect_wait),
            retry=retry_if_exception_type((OSError, SQLAlchemyError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self.ping()

        url = self.engine.url
        logger.info("Connected to database %s:%s/%s", url.host, url.port, url.database)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session that commits on success and rolls back on any error.

        The session is always closed, returning its connection to the pool.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """Gracefully close all connections in the pool (application shutdown)."""
        await self.engine.dispose()
        logger.info("Database connections closed")


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The handle comes from `request.app.state.database` (set by the lifespan),
    never from module-level state.

    Example usage in a route:
        @router.get("/projects")
        async def list_projects(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
