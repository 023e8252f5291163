"""Interface for the record store.

Defines the `RecordStore` port: a key-addressed table of records read and
written through the connection of the enclosing unit of work. Implementations
run inside the caller's transaction and never commit on their own.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping

from .records import Record


class RecordStore(abc.ABC):
    """Key-addressed record table with row locking and conflict-aware writes."""

    @abc.abstractmethod
    def get(self, internal_id: int) -> Record | None:
        """Read a record without locking it.

        Args:
            internal_id: The merge key of the record.

        Returns:
            The record if found, otherwise ``None``.
        """

    @abc.abstractmethod
    def get_for_update(self, internal_id: int) -> Record | None:
        """Read a record and hold an exclusive lock on it until the transaction ends.

        Other transactions attempting to lock or write the same row block until
        this transaction commits or rolls back. Rows for other keys are not
        affected.

        Args:
            internal_id: The merge key of the record.

        Returns:
            The locked record if found, otherwise ``None``.
        """

    @abc.abstractmethod
    def insert(self, record: Record) -> Record | None:
        """Insert a new record unless one already exists for its key.

        Args:
            record: The record to insert (its `id` is ignored).

        Returns:
            The persisted record with its store-assigned `id`, or ``None`` if a
            record with the same `internal_id` already exists (no-throw insert).
        """

    @abc.abstractmethod
    def update(self, record: Record) -> Record:
        """Overwrite every updatable field of an existing record.

        Args:
            record: The fully-resolved record.

        Returns:
            The persisted record.
        """

    @abc.abstractmethod
    def upsert(
        self, record: Record, assignments: Mapping[str, str | None]
    ) -> Record:
        """Insert `record`, or on key conflict assign only `assignments`.

        Executed as a single atomic statement. Columns not named in
        `assignments` keep their stored value on conflict.

        Args:
            record: The row to insert when no record exists.
            assignments: Resolved column values to write when one does exist.

        Returns:
            The persisted record.
        """
