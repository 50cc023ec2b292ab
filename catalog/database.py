"""
Catalog Backend - Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` object owns the engine and its connection pool. The app
       lifespan creates it at startup, stores it on `app.state.database`
       and disposes it at shutdown. Requests get a session through the
       `get_db_session` dependency, which commits on success and rolls back
       on error.
Who:   Route dependencies (via FastAPI's Depends), the health check, tests.

Connection Pooling (server databases only):
    pool_size=20, max_overflow=10, pool_pre_ping, pool_recycle=3600.
    SQLite URLs use SQLAlchemy's default pool for the dialect.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from catalog.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations.
    """
    pass


class Database:
    """
    Owns the async engine and session factory for one application instance.

    Lifecycle:
        1. Created in the lifespan handler from Settings
        2. ping() logs whether the database is reachable
        3. session() hands out per-request sessions
        4. dispose() closes every pooled connection on shutdown
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        engine_options = {"pool_pre_ping": pool_pre_ping, "echo": echo}
        if not url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )

        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_options)
        # expire_on_commit=False: returned products stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    async def ping(self) -> bool:
        """
        Runs SELECT 1 and reports whether it succeeded.

        Failures are logged, not raised: the server keeps accepting requests
        and each route fails on its own if the database stays unreachable.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error("Database connection failed: %s", str(e))
            return False

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a session that commits on success and rolls back on error.

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
        """Closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Example usage in a route:
        @router.get("/products")
        async def list_products(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
