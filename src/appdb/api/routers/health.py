"""
appdb.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) that round-trips through the shared handle.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from appdb.api.deps import database_dep
from appdb.db import Database
from appdb.errors import DatabaseError
from appdb.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(database: Database = Depends(database_dep)) -> dict[str, str]:
    if not database.is_connected:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail="database disconnected")
    try:
        await database.ping()
    except (SQLAlchemyError, DatabaseError) as exc:
        log.warning("readyz.ping_failed", error=type(exc).__name__)
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail="database unreachable") from exc
    return {"status": "ready", "database": database.engine.dialect.name}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
