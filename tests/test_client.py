"""
tests.test_client

The connected handle: what connecting does (and doesn't) do, failure kinds,
sessions over the single connection, teardown.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy import event, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import ArgumentError
from sqlalchemy.pool import Pool

from appdb.db import connect_database
from appdb.db.client import create_engine
from appdb.db.base import Base
from appdb.db.schema import User
from appdb.errors import DatabaseConfigError, DatabaseConnectionError, DatabaseError
from appdb.settings import Settings


@pytest.mark.asyncio
async def test_connect_returns_connected_handle(settings: Settings) -> None:
    database = await connect_database(settings)
    try:
        assert database.is_connected
        assert database.metadata is Base.metadata
        assert {"users", "accounts", "sessions"} <= set(database.metadata.tables)
        assert database.engine.dialect.name == "sqlite"
    finally:
        await database.close()

    assert not database.is_connected


@pytest.mark.asyncio
async def test_connect_opens_one_connection_and_runs_no_statements(settings: Settings) -> None:
    connects: list[object] = []
    statements: list[str] = []

    def on_connect(dbapi_connection, connection_record) -> None:
        connects.append(dbapi_connection)

    def on_execute(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement)

    event.listen(Pool, "connect", on_connect)
    event.listen(Engine, "before_cursor_execute", on_execute)
    try:
        database = await connect_database(settings)
        await database.close()
    finally:
        event.remove(Pool, "connect", on_connect)
        event.remove(Engine, "before_cursor_execute", on_execute)

    assert len(connects) == 1
    assert statements == []


@pytest.mark.asyncio
async def test_malformed_url_is_a_connection_error() -> None:
    settings = Settings(database_url="postgres//app:hunter2@db")

    with pytest.raises(DatabaseConnectionError) as excinfo:
        await connect_database(settings)

    assert not isinstance(excinfo.value, DatabaseConfigError)
    assert isinstance(excinfo.value.__cause__, ArgumentError)
    assert "hunter2" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_numeric_port_is_a_connection_error() -> None:
    settings = Settings(database_url="postgres://app:hunter2@db:notaport/app")

    with pytest.raises(DatabaseConnectionError) as excinfo:
        await connect_database(settings)

    assert isinstance(excinfo.value.__cause__, ValueError)
    assert "hunter2" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_unknown_driver_is_a_connection_error() -> None:
    with pytest.raises(DatabaseConnectionError):
        await connect_database(Settings(database_url="nosuchdb://db/app"))


@pytest.mark.asyncio
async def test_unreachable_database_is_a_connection_error(tmp_path: Path) -> None:
    missing = tmp_path / "no-such-dir" / "app.db"
    settings = Settings(database_url=f"sqlite+aiosqlite:///{missing}")

    with pytest.raises(DatabaseConnectionError) as excinfo:
        await connect_database(settings)

    assert excinfo.value.__cause__ is not None


@pytest.mark.asyncio
async def test_sessions_share_the_single_connection(settings: Settings) -> None:
    database = await connect_database(settings)
    try:
        await database.create_all()

        async with database.session() as session:
            session.add(User(email="ada@example.com", name="Ada"))
            await session.commit()

        async with database.session() as session:
            uncommitted = User(email="rolled-back@example.com")
            session.add(uncommitted)
            await session.flush()

        async with database.session() as session:
            emails = (await session.execute(select(User.email))).scalars().all()

        assert emails == ["ada@example.com"]
    finally:
        await database.close()


@pytest.mark.asyncio
async def test_concurrent_sessions_are_serialized(settings: Settings) -> None:
    database = await connect_database(settings)
    try:
        await asyncio.gather(*(database.ping() for _ in range(5)))
        assert database.is_connected
    finally:
        await database.close()


@pytest.mark.asyncio
async def test_closed_handle_refuses_sessions(settings: Settings) -> None:
    database = await connect_database(settings)
    await database.close()
    await database.close()

    with pytest.raises(DatabaseConnectionError):
        async with database.session():
            pass


@pytest.mark.asyncio
async def test_connect_timeout_reaches_driver() -> None:
    engine = create_engine(Settings(database_url="sqlite+aiosqlite://", connect_timeout=2.5))
    captured: dict[str, object] = {}

    def on_do_connect(dialect, conn_rec, cargs, cparams) -> None:
        captured.update(cparams)

    event.listen(engine.sync_engine, "do_connect", on_do_connect)
    try:
        connection = await engine.connect()
        await connection.close()
    finally:
        await engine.dispose()

    assert captured["timeout"] == 2.5


@pytest.mark.asyncio
async def test_nested_session_raises_instead_of_deadlocking(settings: Settings) -> None:
    database = await connect_database(settings)
    try:
        async with database.session():
            with pytest.raises(DatabaseError, match="already in use"):
                await database.ping()

        await database.ping()
    finally:
        await database.close()


@pytest.mark.asyncio
async def test_close_waits_for_running_session(settings: Settings) -> None:
    database = await connect_database(settings)
    entered = asyncio.Event()
    release = asyncio.Event()

    async def hold_session() -> int:
        async with database.session() as session:
            entered.set()
            await release.wait()
            return (await session.execute(text("SELECT 1"))).scalar_one()

    holder = asyncio.create_task(hold_session())
    await entered.wait()
    closer = asyncio.create_task(database.close())
    await asyncio.sleep(0)

    assert not closer.done()
    with pytest.raises(DatabaseConnectionError):
        async with database.session():
            pass

    release.set()
    assert await holder == 1
    await closer
    assert not database.is_connected


# --- Module Notes -----------------------------------------------------------
# All cases run on in-memory SQLite; the single held connection keeps the
# in-memory database alive for the duration of each test.
