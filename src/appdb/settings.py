"""
appdb.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings (prefix `NEXT_`).
- Require `NEXT_DATABASE_URL`; there is no default connection target.
- Hide the connection URI (it carries credentials) from repr/logging.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from appdb.errors import DatabaseConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NEXT_", case_sensitive=False)

    # Required: absence must fail startup rather than fall back to a local DB.
    database_url: str = Field(min_length=1, repr=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "appdb"
    log_level: str = "INFO"

    # Emit SQL through SQLAlchemy's logger (noisy; dev only).
    echo_sql: bool = False
    # Seconds; handed to the driver as its connect timeout. None keeps the driver default.
    connect_timeout: float | None = Field(default=None, gt=0)

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    @field_validator("database_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("database_url must not be blank")
        return value


def load_settings(**overrides: object) -> Settings:
    """
    Build settings from the environment, turning validation failures into a
    descriptive `DatabaseConfigError`.
    """

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        missing = ", ".join(f"NEXT_{f.upper()}" for f in fields) or "settings"
        raise DatabaseConfigError(f"invalid or missing configuration: {missing}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return load_settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly; `get_settings.cache_clear()` resets the cache.
