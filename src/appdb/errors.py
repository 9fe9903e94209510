"""
appdb.errors

Error taxonomy for database handle initialization.

Responsibilities:
- Separate configuration problems (nothing to connect to) from connection
  problems (something to connect to, but the attempt failed).
- Keep the underlying driver/SQLAlchemy error reachable via `__cause__`.
"""

from __future__ import annotations


class DatabaseError(Exception):
    """Base class for all errors raised by `appdb`."""


class DatabaseConfigError(DatabaseError):
    """Required database configuration is missing or invalid."""


class DatabaseConnectionError(DatabaseError):
    """
    Establishing the database connection failed.

    Covers malformed URIs, unknown drivers, unreachable hosts and
    authentication failures alike; the driver error is chained as the cause.
    """

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(f"{message} ({url})")
        # Always the redacted rendering; never carries a password.
        self.url = url


class DatabaseNotInitializedError(DatabaseError):
    """The process-wide handle was requested before `init_database()` completed."""


# --- Module Notes -----------------------------------------------------------
# Callers that only care "did startup fail because of the DB" can catch
# `DatabaseError`; everything finer-grained is a subclass.
