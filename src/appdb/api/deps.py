"""
appdb.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for the shared handle and request-scoped sessions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from appdb.db import Database, get_database


def database_dep() -> Database:
    # Published by the app lifespan (`appdb.api.app.create_app`).
    return get_database()


async def db_session(database: Database = Depends(database_dep)) -> AsyncIterator[AsyncSession]:
    # Request-scoped session; requests queue on the single connection.
    async with database.session() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# A request holding `db_session` holds the single connection until its response
# is sent; keep handlers short.
