"""
tests.test_settings

Configuration binding: required URI, env prefix, redaction.
"""

from __future__ import annotations

import pytest

from appdb.errors import DatabaseConfigError
from appdb.settings import Settings, get_settings, load_settings


def test_reads_database_url_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXT_DATABASE_URL", "postgres://app@db.internal:5432/app")
    monkeypatch.setenv("NEXT_CONNECT_TIMEOUT", "2.5")

    settings = load_settings()

    assert settings.database_url == "postgres://app@db.internal:5432/app"
    assert settings.connect_timeout == 2.5
    assert settings.env == "dev"


def test_missing_database_url_is_a_config_error() -> None:
    with pytest.raises(DatabaseConfigError, match="NEXT_DATABASE_URL"):
        load_settings()


def test_blank_database_url_is_a_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXT_DATABASE_URL", "   ")

    with pytest.raises(DatabaseConfigError):
        load_settings()


def test_repr_hides_credentials() -> None:
    settings = Settings(database_url="postgresql://app:hunter2@db/app")

    assert "hunter2" not in repr(settings)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXT_DATABASE_URL", "sqlite+aiosqlite://")

    assert get_settings() is get_settings()


# --- Module Notes -----------------------------------------------------------
# Env vars are cleared per test by `conftest._isolate_process_state`.
