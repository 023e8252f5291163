"""Unit of Work interface for tripatch.

Defines the AbstractUnitOfWork contract: a context-managed unit of work
holding one pooled connection and one transaction, with a RecordStore bound
to it and abstract commit/rollback methods.
"""

from __future__ import annotations

import abc

from .record_store import RecordStore


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work."""

    records: RecordStore

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations acquire their connection here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit; committed work is unaffected.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction."""

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
