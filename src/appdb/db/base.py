"""
appdb.db.base

SQLAlchemy declarative base.

Responsibilities:
- Provide the shared DeclarativeBase whose `metadata` is the schema description
  handed to `Database`.
- Pin constraint naming so Alembic autogenerate produces stable names.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# --- Module Notes -----------------------------------------------------------
# Changing NAMING_CONVENTION renames constraints; ship it with an Alembic migration.
