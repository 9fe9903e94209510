"""
appdb.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide the schema, the connected `Database` handle and the process-wide
  accessor around it.
"""

from appdb.db.client import Database, connect_database
from appdb.db.registry import close_database, get_database, init_database

__all__ = [
    "Database",
    "close_database",
    "connect_database",
    "get_database",
    "init_database",
]


# --- Module Notes -----------------------------------------------------------
# Callers import from `appdb.db`; submodules are an implementation detail.
