"""
appdb.db.client

The connected database handle.

Responsibilities:
- Build the async engine from settings and open exactly one connection.
- Wrap that connection together with the schema metadata (`Database`).
- Hand out ORM sessions bound to the single connection, one at a time.
- Provide explicit teardown; nothing closes the handle implicitly.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from appdb.db import schema  # noqa: F401  # registers the tables on Base.metadata
from appdb.db.base import Base
from appdb.db.url import normalize_url, redact_url
from appdb.errors import DatabaseConnectionError, DatabaseError
from appdb.observability.logging import get_logger
from appdb.settings import Settings

log = get_logger(__name__)


class Database:
    """
    A live connection plus the schema it is used with.

    Instances come from `connect_database`; constructing one directly assumes
    `connection` is already open.
    """

    def __init__(self, engine: AsyncEngine, connection: AsyncConnection, metadata: MetaData) -> None:
        self._engine = engine
        self._connection = connection
        self._metadata = metadata
        # One connection cannot interleave statements from two sessions.
        self._lock = asyncio.Lock()
        self._holder: asyncio.Task[Any] | None = None
        self._closed = False

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def connection(self) -> AsyncConnection:
        return self._connection

    @property
    def metadata(self) -> MetaData:
        return self._metadata

    @property
    def url(self) -> str:
        return redact_url(self._engine.url)

    @property
    def is_connected(self) -> bool:
        return not self._closed and not self._connection.closed and not self._connection.invalidated

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield an `AsyncSession` running on the shared connection.

        The session owns its transaction: commit explicitly, anything left
        uncommitted is rolled back on exit. Concurrent callers wait their turn;
        opening a second session (or `ping`) from inside one raises
        `DatabaseError` instead of deadlocking.
        """

        async with self._exclusive():
            session = AsyncSession(bind=self._connection, expire_on_commit=False, autoflush=False)
            try:
                yield session
            finally:
                await session.close()

    async def ping(self) -> None:
        """Round-trip a trivial statement; raises whatever the driver raises."""

        async with self.session() as session:
            await session.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """
        Dev/test bootstrap: create the schema's tables if they don't exist.
        Production relies on Alembic migrations.
        """

        async with self._exclusive():
            async with self._connection.begin():
                await self._connection.run_sync(self._metadata.create_all)

    async def close(self) -> None:
        """
        Close the connection and dispose the engine. Idempotent.

        New sessions are refused immediately; a session already running is
        allowed to finish first.
        """

        if self._closed:
            return
        self._check_reentry()
        self._closed = True
        async with self._exclusive(closing=True):
            try:
                await self._connection.close()
            finally:
                await self._engine.dispose()
        log.info("database.closed", url=self.url)

    @asynccontextmanager
    async def _exclusive(self, *, closing: bool = False) -> AsyncIterator[None]:
        self._check_reentry()
        if not closing:
            self._ensure_open()
        async with self._lock:
            # Re-checked: close() may have run while this task was waiting.
            if not closing:
                self._ensure_open()
            self._holder = asyncio.current_task()
            try:
                yield
            finally:
                self._holder = None

    def _check_reentry(self) -> None:
        current = asyncio.current_task()
        if current is not None and self._holder is current:
            raise DatabaseError("the database connection is already in use by this task")

    def _ensure_open(self) -> None:
        if self._closed:
            raise DatabaseConnectionError("database handle is closed", url=self.url)


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the engine for `settings.database_url`.

    NullPool: the engine never keeps spare connections; the one connection the
    handle checks out lives until `Database.close()`.
    """

    connect_args: dict[str, Any] = {}
    if settings.connect_timeout is not None:
        connect_args["timeout"] = settings.connect_timeout

    return create_async_engine(
        normalize_url(settings.database_url),
        poolclass=NullPool,
        echo=settings.echo_sql,
        connect_args=connect_args,
    )


async def connect_database(settings: Settings, *, metadata: MetaData | None = None) -> Database:
    """
    Open the single connection described by `settings` and wrap it.

    Performs one network action (connect) and issues no statements. Every
    failure on the way, from an unparseable URI to a refused login, surfaces as
    `DatabaseConnectionError` with the original error chained.
    """

    url = redact_url(settings.database_url)
    log.info("database.connecting", url=url)

    engine: AsyncEngine | None = None
    try:
        engine = create_engine(settings)
        connection = await engine.connect()
    except Exception as exc:
        log.error("database.connect_failed", url=url, error=type(exc).__name__)
        if engine is not None:
            await engine.dispose()
        # The driver message may echo the raw URI; keep it on the chained cause only.
        raise DatabaseConnectionError(f"could not connect ({type(exc).__name__})", url=url) from exc

    log.info("database.connected", url=url, dialect=engine.dialect.name)
    return Database(engine, connection, metadata if metadata is not None else Base.metadata)


# --- Module Notes -----------------------------------------------------------
# `connect_database` is the explicit form; `appdb.db.registry` layers the
# process-wide shared handle on top of it.
