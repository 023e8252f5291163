"""Database engine factory and helpers.

This module centralizes creation of SQLAlchemy Engines so every connection in
the pool is configured the same way:

- **Pool**: bounded ``QueuePool`` (``pool_size`` + ``max_overflow``); acquiring
  a connection blocks up to ``pool_timeout`` seconds when exhausted.
- **SQLite**: connection PRAGMAs enforce foreign keys, enable WAL and make
  concurrent writers wait (``busy_timeout``) instead of failing immediately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}
SQLITE_MEMORY_DATABASES = {None, "", ":memory:"}

SQLITE_BUSY_TIMEOUT_MS = 30_000


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite."""
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def is_sqlite_memory(url: str | URL) -> bool:
    """Return True for an in-memory SQLite URL (single connection per thread)."""
    u = make_url(str(url))
    return is_sqlite(u) and u.database in SQLITE_MEMORY_DATABASES


def make_engine(
    url: str | URL,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: float | None = None,
) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    Pool arguments are ignored for in-memory SQLite, which SQLAlchemy serves
    from a per-thread singleton pool. For SQLite the following PRAGMAs are
    applied on connect:
        - ``busy_timeout`` (writers queue on the database lock)
        - ``foreign_keys=ON``
        - ``journal_mode=WAL``
        - ``synchronous=NORMAL``

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.
        pool_size: Connections kept open in the pool.
        max_overflow: Extra connections allowed beyond `pool_size`.
        pool_timeout: Seconds to wait for a free connection.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """
    kwargs: dict[str, Any] = {}
    if not is_sqlite_memory(url):
        pool_options = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
        }
        kwargs.update({k: v for k, v in pool_options.items() if v is not None})

    engine = create_engine(url, echo=echo, pool_pre_ping=True, **kwargs)

    if is_sqlite(url):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            # busy_timeout first so the remaining PRAGMAs wait out a held lock
            cur.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.close()

    return engine
