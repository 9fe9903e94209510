"""
tests.conftest

Shared fixtures.

Responsibilities:
- Keep the process-wide handle and settings cache from leaking across tests.
- Provide settings pointing at an in-memory SQLite database (no server needed).
"""

from __future__ import annotations

import pytest

from appdb.db import registry
from appdb.settings import Settings, get_settings

MEMORY_URL = "sqlite+aiosqlite://"


@pytest.fixture(autouse=True)
def _isolate_process_state(monkeypatch: pytest.MonkeyPatch):
    for name in ("NEXT_DATABASE_URL", "NEXT_ENV", "NEXT_CONNECT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    registry._database = None
    registry._pending = None
    yield
    get_settings.cache_clear()
    registry._database = None
    registry._pending = None


@pytest.fixture
def settings() -> Settings:
    return Settings(env="test", database_url=MEMORY_URL)


# --- Module Notes -----------------------------------------------------------
# Tests that publish the shared handle close it themselves; the reset here only
# guards against leaked module state.
