"""SQLAlchemy-backed Unit of Work for tripatch.

Each unit checks one connection out of the engine's pool on enter, binds a
SqlAlchemyRecordStore to it, and returns the connection to the pool on exit
whether the work committed, failed or was abandoned. Uncommitted work is
rolled back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from tripatch.adapters.records import SqlAlchemyRecordStore
from tripatch.interfaces.errors import StorageUnavailableError
from tripatch.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.connection: Connection

    def __enter__(self):
        try:
            self.connection = self.engine.connect()
        except PoolTimeoutError as e:
            raise StorageUnavailableError(f"connection pool exhausted: {e}") from e
        except DBAPIError as e:
            raise StorageUnavailableError(str(e)) from e
        self.records = SqlAlchemyRecordStore(self.connection)
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()  # back to the pool (or discarded if invalid)

    def commit(self):
        try:
            self.connection.commit()
        except DBAPIError as e:
            raise StorageUnavailableError(str(e)) from e

    def rollback(self):
        self.connection.rollback()
