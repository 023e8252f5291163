"""SQLite fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from alembic import command
from sqlalchemy.engine import URL

from tripatch import config
from tripatch.adapters.db.engine import make_engine
from tripatch.adapters.db.metadata import metadata

# importing the schema registers the records table on `metadata`
from tripatch.adapters.records import schema as _schema  # noqa: F401 # pylint: disable=unused-import

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=redefined-outer-name


@pytest.fixture
def sqlite_engine_memory() -> Iterator[Engine]:
    """In-memory SQLite engine with tables from `metadata.create_all()`.

    Single connection per thread; not suitable for concurrency tests.
    """
    test_engine = make_engine("sqlite+pysqlite:///:memory:")
    metadata.create_all(test_engine)
    yield test_engine
    metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def sqlite_url(tmp_path: Path) -> str:
    """URL of a temp-file SQLite database migrated to Alembic head."""
    url = str(URL.create("sqlite+pysqlite", database=str(tmp_path / "test.db")))
    command.upgrade(config.build_alembic_config(url), "head")
    return url


@pytest.fixture
def sqlite_engine_file(sqlite_url: str) -> Iterator[Engine]:
    """File-backed SQLite engine migrated via Alembic (per test).

    A file (not :memory:) lets every pooled connection, and therefore every
    thread, see the same database. Each test gets its own file, so nothing is
    cleaned up besides disposing the engine.
    """
    test_engine = make_engine(sqlite_url)
    try:
        yield test_engine
    finally:
        test_engine.dispose()
