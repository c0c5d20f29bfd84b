"""Database Session Manager — async engine, sessions with automatic rollback, connectivity check.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - transaction() commits all writes of its block or none of them
    - All SQLAlchemy exceptions and driver-level OSError/timeouts mapped to
      StorageError (core/errors.py)
    - connect() failures mapped to DatabaseConnectionError
    - One manager per run, passed explicitly to every operation (no module singleton)

Design Decisions:
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Pool sizing only applied to server databases; SQLite engines keep their default pool
    - dialect_insert() picks the PostgreSQL or SQLite insert construct so
      ON CONFLICT clauses work against both
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from writepath.core.errors import (
    DatabaseConnectionError, ErrorContext, StorageError,
)

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Owns the async engine and hands out sessions and transactions."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 5,
        echo: bool = False,
    ):
        engine_kwargs: dict = {"echo": echo, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise StorageError(
                "Integrity constraint violated", "commit", _debug(e),
            ) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise StorageError(
                "Connection or operational error", "execute", _debug(e),
            ) from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StorageError(
                "Database driver error", "query", _debug(e),
            ) from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StorageError(
                "Database operation failed", "unknown", _debug(e),
            ) from e
        except (OSError, asyncio.TimeoutError) as e:
            try:
                await session.rollback()
            except (SQLAlchemyError, OSError) as rollback_error:
                logger.warning(f"Rollback after connection loss failed: {rollback_error}")
            logger.error(f"DB connection lost: {e}")
            raise StorageError(
                "Connection lost", "connect", _debug(e),
            ) from e
        finally:
            await session.close()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Session inside BEGIN ... COMMIT; any exception rolls the whole block back."""
        async with self.session() as session:
            async with session.begin():
                yield session

    async def connect(self) -> None:
        """Open one connection and run SELECT 1. Raises DatabaseConnectionError."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"DB connection check failed: {e}")
            raise DatabaseConnectionError(
                type(e).__name__, _debug(e),
            ) from e
        logger.info(
            "Database connection established",
            extra={"operation": "connect"},
        )

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info(
            "Database connection released",
            extra={"operation": "disconnect"},
        )


@asynccontextmanager
async def open_database(
    database_url: str, **kwargs,
) -> AsyncGenerator[DatabaseSessionManager, None]:
    """Create a manager, verify connectivity, always dispose on exit."""
    manager = DatabaseSessionManager(database_url, **kwargs)
    try:
        await manager.connect()
        yield manager
    finally:
        await manager.dispose()


def dialect_insert(db: DatabaseSessionManager, table):
    """Dialect-specific INSERT supporting on_conflict_do_nothing/do_update."""
    if db.dialect_name == "sqlite":
        return sqlite.insert(table)
    return postgresql.insert(table)


def _debug(e: BaseException) -> ErrorContext:
    return ErrorContext(debug_info={"error": str(e)})
