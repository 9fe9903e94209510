"""
appdb.db.registry

Process-wide shared database handle.

Responsibilities:
- Connect once per process and publish the resulting `Database`.
- Make concurrent first callers share one connection attempt.
- Fail fast on missing configuration, before any network activity.
"""

from __future__ import annotations

import asyncio

from appdb.db.client import Database, connect_database
from appdb.errors import DatabaseNotInitializedError
from appdb.settings import Settings, get_settings

_database: Database | None = None
_pending: asyncio.Task[Database] | None = None


async def init_database(settings: Settings | None = None) -> Database:
    """
    Return the process-wide handle, connecting on first call.

    Settings are resolved before the attempt, so a missing `NEXT_DATABASE_URL`
    raises `DatabaseConfigError` without touching the network. A failed attempt
    is not remembered; the next call tries again.
    """

    global _database, _pending

    if _database is not None:
        return _database

    if _pending is not None and _failed(_pending):
        # Failed while nobody was awaiting it (its only waiter was cancelled).
        _pending = None

    if _pending is None:
        settings = settings if settings is not None else get_settings()
        _pending = asyncio.ensure_future(connect_database(settings))

    task = _pending
    try:
        # Shielded: one cancelled waiter must not abort the attempt for the others.
        database = await asyncio.shield(task)
    except BaseException:
        if task.done() and _pending is task:
            _pending = None
        raise

    if _database is None:
        _database = database
        _pending = None
    return _database


def _failed(task: asyncio.Task[Database]) -> bool:
    if not task.done():
        return False
    return task.cancelled() or task.exception() is not None


def get_database() -> Database:
    if _database is None:
        raise DatabaseNotInitializedError("init_database() has not completed")
    return _database


async def close_database() -> None:
    """Close and unpublish the shared handle; a no-op when none is published."""

    global _database
    database, _database = _database, None
    if database is not None:
        await database.close()


# --- Module Notes -----------------------------------------------------------
# Nothing calls `close_database` implicitly; the HTTP app does so on shutdown,
# other entrypoints own that decision.
