"""Database dialect handling.

tripatch relies on dialect-specific SQL for its conflict-aware writes
(``INSERT ... ON CONFLICT``) and for row locking. This module names the
supported backends and hands out the matching ``insert`` construct so adapters
never branch on raw dialect strings.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.engine import Connection, Engine


class UnsupportedDialect(Exception):
    """Raised when an unsupported database dialect is encountered."""


class DialectName(str, Enum):
    """Supported SQLAlchemy dialect names.

    Attributes:
        POSTGRES: PostgreSQL dialect (``"postgresql"``); real row locks.
        SQLITE:   SQLite dialect (``"sqlite"``); database-level write lock.
    """

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Normalize a dialect or driver-qualified name.

        Accepts common aliases such as 'postgres', 'postgresql+psycopg',
        'sqlite' and 'sqlite+pysqlite'.

        Raises:
            UnsupportedDialect: if the dialect is not recognized or supported.
        """
        base = (dialect_str or "").strip().lower().split("+", 1)[0]
        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base == cls.SQLITE.value:
            return cls.SQLITE
        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """Extract the dialect from a SQLAlchemy Engine or Connection.

        Raises:
            UnsupportedDialect: if the object has no dialect or it is unsupported.
        """
        try:
            name = obj.dialect.name
        except AttributeError as e:
            raise UnsupportedDialect(
                f"Object {type(obj).__name__} does not expose .dialect.name"
            ) from e
        return cls.from_string(name)

    @property
    def supports_row_locks(self) -> bool:
        """True if ``SELECT ... FOR UPDATE`` locks individual rows."""
        return self is DialectName.POSTGRES

    def insert(self, table: Table):
        """Return this dialect's ``insert`` construct (with ``on_conflict_*``)."""
        if self is DialectName.POSTGRES:
            return pg_insert(table)
        return sqlite_insert(table)
