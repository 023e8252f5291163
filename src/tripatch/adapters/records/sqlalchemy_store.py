"""Implementation of RecordStore using SQLAlchemy Core.

Supports PostgreSQL and SQLite. All statements run on the connection (and
therefore inside the transaction) of the owning unit of work. Driver errors
are mapped to `StorageUnavailableError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError

from tripatch.adapters.db.dialects import DialectName
from tripatch.interfaces.errors import StorageUnavailableError
from tripatch.interfaces.record_store import RecordStore
from tripatch.interfaces.records import UPDATABLE_FIELDS, Record

from .schema import records

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult
    from sqlalchemy.sql import Executable


class SqlAlchemyRecordStore(RecordStore):
    """RecordStore implementation that supports both Postgres and SQLite."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.dialect = DialectName.from_sqlalchemy(connection)

    # --- reads ---

    def get(self, internal_id: int) -> Record | None:
        stmt = select(records).where(records.c.internal_id == internal_id)
        return self._one_or_none(self._execute(stmt))

    def get_for_update(self, internal_id: int) -> Record | None:
        stmt = select(records).where(records.c.internal_id == internal_id)
        if self.dialect.supports_row_locks:
            stmt = stmt.with_for_update()
        else:
            self._acquire_write_lock(internal_id)
        return self._one_or_none(self._execute(stmt))

    # --- writes ---

    def insert(self, record: Record) -> Record | None:
        # no-throw insert: a conflicting key returns no row
        stmt = (
            self.dialect.insert(records)
            .values(internal_id=record.internal_id, **record.fields())
            .on_conflict_do_nothing(index_elements=[records.c.internal_id])
            .returning(*records.c)
        )
        return self._one_or_none(self._execute(stmt))

    def update(self, record: Record) -> Record:
        stmt = (
            update(records)
            .where(records.c.internal_id == record.internal_id)
            .values(**record.fields())
            .returning(*records.c)
        )
        if (persisted := self._one_or_none(self._execute(stmt))) is None:
            raise StorageUnavailableError(
                f"update of record {record.internal_id} matched no row"
            )
        return persisted

    def upsert(
        self, record: Record, assignments: Mapping[str, str | None]
    ) -> Record:
        unknown = set(assignments) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"not updatable: {sorted(unknown)}")

        stmt = self.dialect.insert(records).values(
            internal_id=record.internal_id, **record.fields()
        )
        set_: dict[str, Any] = dict(assignments)
        if not set_:
            # Nothing to change, but DO UPDATE (unlike DO NOTHING) returns the row.
            set_ = {"internal_id": stmt.excluded.internal_id}
        stmt = stmt.on_conflict_do_update(
            index_elements=[records.c.internal_id], set_=set_
        ).returning(*records.c)

        if (persisted := self._one_or_none(self._execute(stmt))) is None:
            raise StorageUnavailableError(  # pragma: no cover
                f"upsert of record {record.internal_id} returned no row"
            )
        return persisted

    # --- internals ---

    def _acquire_write_lock(self, internal_id: int) -> None:
        """Take SQLite's database write lock before reading.

        SQLite has no row locks and ignores ``FOR UPDATE``. A no-op UPDATE
        opens the write transaction up front, so a concurrent writer waits
        (``busy_timeout``) until this transaction ends instead of reading a
        row that is about to change.
        """
        self._execute(
            update(records)
            .where(records.c.internal_id == internal_id)
            .values(internal_id=records.c.internal_id)
        )

    def _execute(self, stmt: Executable) -> CursorResult:
        try:
            return self.connection.execute(stmt)
        except DBAPIError as e:  # OperationalError, IntegrityError, etc.
            raise StorageUnavailableError(str(e)) from e

    @staticmethod
    def _one_or_none(result: CursorResult) -> Record | None:
        if (row := result.mappings().fetchone()) is None:
            return None
        return Record(**row)
