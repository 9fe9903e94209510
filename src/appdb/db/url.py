"""
appdb.db.url

Connection-URI handling.

Responsibilities:
- Map driverless URIs (as written for other runtimes, e.g. `postgres://`)
  onto the async drivers this package ships with.
- Render URIs for logs and error messages with the password hidden.
"""

from __future__ import annotations

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

# Backend name -> async driver used when the URI does not name one.
ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def normalize_url(raw: str | URL) -> URL:
    """
    Parse `raw` and pick an async driver for it.

    Raises `sqlalchemy.exc.ArgumentError` when `raw` is not a parseable URI.
    URIs that already name a driver (`postgresql+psycopg://...`) are kept as-is.
    """

    url = make_url(raw)
    if "+" in url.drivername:
        return url

    drivername = ASYNC_DRIVERS.get(url.drivername)
    if drivername is None:
        return url
    url = url.set(drivername=drivername)

    # libpq-style `sslmode` is spelled `ssl` by asyncpg.
    if drivername == "postgresql+asyncpg" and "sslmode" in url.query:
        sslmode = url.query["sslmode"]
        url = url.difference_update_query(["sslmode"]).update_query_dict({"ssl": sslmode})
    return url


def redact_url(raw: str | URL) -> str:
    try:
        return make_url(raw).render_as_string(hide_password=True)
    # make_url raises ValueError (not ArgumentError) for e.g. a non-numeric port.
    except (ArgumentError, ValueError):
        return "<unparseable url>"


# --- Module Notes -----------------------------------------------------------
# Anything that logs or raises with a URI goes through `redact_url` first.
