"""
alembic.env

Alembic migration environment configuration.

Responsibilities:
- Point autogeneration at `appdb.db.base.Base.metadata`.
- Resolve the target database from `NEXT_DATABASE_URL`, normalized onto the
  async driver the application uses.
- Configure offline/online migration execution (online runs on the async engine).

Notes:
- This module is executed by Alembic, not imported by the application runtime.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from appdb.db import schema  # noqa: F401  # ensure tables are registered on Base.metadata
from appdb.db.base import Base
from appdb.db.url import normalize_url
from appdb.settings import load_settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_database_url() -> str:
    # Same required setting as the runtime; missing config raises DatabaseConfigError.
    url = normalize_url(load_settings().database_url)
    return url.render_as_string(hide_password=False)


def run_migrations_offline() -> None:
    # Offline: emit SQL scripts without a DB connection.
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = async_engine_from_config(
        configuration, prefix="sqlalchemy.", poolclass=pool.NullPool
    )

    async with connectable.connect() as connection:
        await connection.run_sync(_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())


# --- Module Notes -----------------------------------------------------------
# Keep this file aligned with the tables declared in `appdb.db.schema`.
