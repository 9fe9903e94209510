"""
appdb.api.app

FastAPI app factory.

Responsibilities:
- Configure logging once per process.
- Connect the shared database handle on startup and close it on shutdown.
- Register routers.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from appdb import __version__
from appdb.api.routers.health import router as health_router
from appdb.db import close_database, init_database
from appdb.observability.logging import configure_logging, get_logger
from appdb.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level, env=settings.env)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # Connection failures propagate and abort startup.
        database = await init_database(settings)
        app.state.database = database
        try:
            if settings.env in ("dev", "test"):
                # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
                await database.create_all()
            yield
        finally:
            await close_database()
            log.info("shutdown")

    app = FastAPI(
        title="appdb",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.include_router(health_router, tags=["health"])
    return app


# --- Module Notes -----------------------------------------------------------
# The shared handle is closed on every exit path once `init_database` succeeded,
# including a failed dev/test schema bootstrap.
