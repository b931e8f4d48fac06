from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import MetaData, event, text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine as _create_async_engine
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T")
logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative models."""


def normalize_postgres_dsn(dsn: str) -> str:
    if dsn.startswith("postgres://"):
        return dsn.replace("postgres://", "postgresql+psycopg://", 1)
    if dsn.startswith("postgresql://"):
        return dsn.replace("postgresql://", "postgresql+psycopg://", 1)
    return dsn


def is_postgres_dsn(dsn: str) -> bool:
    return normalize_postgres_dsn(dsn).startswith("postgresql")


def create_async_engine(dsn: str, *, pool_min_size: int = 2, pool_max_size: int = 10) -> AsyncEngine:
    normalized = normalize_postgres_dsn(dsn)
    options: dict[str, Any] = {"future": True, "pool_pre_ping": True}
    if is_postgres_dsn(normalized):
        if pool_min_size <= 0 or pool_max_size < pool_min_size:
            raise ValueError("pool sizes must satisfy 0 < min <= max")
        options.update(
            pool_size=pool_min_size,
            max_overflow=pool_max_size - pool_min_size,
            pool_recycle=1800,
        )
    engine = _create_async_engine(normalized, **options)
    if is_postgres_dsn(normalized):
        _install_utc_timezone_hook(engine)
    return engine


def _install_utc_timezone_hook(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_utc_timezone(dbapi_connection, connection_record) -> None:  # type: ignore[no-untyped-def]
        del connection_record
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("SET TIME ZONE 'UTC'")
        finally:
            cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


def is_transient_db_error(exc: Exception) -> bool:
    if isinstance(exc, OperationalError):
        return True
    if isinstance(exc, DBAPIError):
        return bool(getattr(exc, "connection_invalidated", False))
    return False


async def create_all_tables(engine: AsyncEngine, metadata: MetaData) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


class AsyncDatabaseManager:
    def __init__(
        self,
        dsn: str,
        *,
        pool_min_size: int = 2,
        pool_max_size: int = 10,
    ) -> None:
        self._dsn = normalize_postgres_dsn(dsn)
        self._pool_min_size = pool_min_size
        self._pool_max_size = pool_max_size
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("database manager is not connected")
        return self._engine

    async def connect(self) -> None:
        if self._engine is None:
            self._engine = create_async_engine(
                self._dsn,
                pool_min_size=self._pool_min_size,
                pool_max_size=self._pool_max_size,
            )
            self._session_factory = create_session_factory(self._engine)
        await self._ping()
        logger.info("database_connected", extra={"dialect": self._engine.dialect.name})

    async def disconnect(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    async def _ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._session_factory is None:
            await self.connect()
        assert self._session_factory is not None
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def run_with_session(
        self,
        fn: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        async with self.session() as session:
            return await fn(session)
