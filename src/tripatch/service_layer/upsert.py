"""Merge-upsert engines.

An `UpsertEngine` persists the result of `merge` exactly once per request and
returns the persisted record. Two interchangeable strategies share that
contract:

- `LockingUpsertEngine` (``lock``): lock the row, merge against it in Python,
  then update or insert inside one transaction.
- `AtomicUpsertEngine` (``atomic``): one ``INSERT ... ON CONFLICT DO UPDATE``
  statement. Tri-state resolution still runs here first: only columns whose
  field is not ``MISSING`` are assigned on conflict, so an explicit null
  clears the column while a missing field keeps the stored value.

Each call opens its own unit of work, so concurrent requests use independent
pooled connections. Requests for the same key are serialized by the store
(row lock or conflict resolution); requests for different keys never block
each other.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable
from enum import Enum
from typing import ClassVar

from tripatch.interfaces.errors import (
    KeyRequiredError,
    MalformedFieldError,
    RecordNotFoundError,
    StorageUnavailableError,
)
from tripatch.interfaces.patch import is_missing
from tripatch.interfaces.records import Record, UpdateRequest
from tripatch.interfaces.unit_of_work import AbstractUnitOfWork

from .merge import merge

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class UpsertStrategy(str, Enum):
    """Enumeration of the available merge-upsert strategies.

    Attributes:
        LOCK:   Pessimistic row lock + explicit merge (``"lock"``).
        ATOMIC: Single conditional upsert statement (``"atomic"``).
    """

    LOCK = "lock"
    ATOMIC = "atomic"

    @classmethod
    def from_string(cls, value: str) -> UpsertStrategy:
        """Normalize and convert a strategy name to UpsertStrategy.

        Raises:
            ValueError: if the name is not a known strategy.
        """
        raw = (value or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        raise ValueError(f"Unknown upsert strategy: {value!r}")


def require_key(internal_id: object) -> int:
    """Validate the merge key before any store access.

    Raises:
        KeyRequiredError: If `internal_id` is None.
        MalformedFieldError: If `internal_id` is not an integer.
    """
    if internal_id is None:
        raise KeyRequiredError
    if isinstance(internal_id, bool) or not isinstance(internal_id, int):
        raise MalformedFieldError("internal_id", int, internal_id)
    return internal_id


class UpsertEngine(abc.ABC):
    """Contract shared by all merge-upsert strategies.

    Args:
        uow_factory: Callable returning a fresh unit of work per request.
    """

    strategy: ClassVar[UpsertStrategy]

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    def fetch(self, internal_id: int) -> Record:
        """Read the record for `internal_id` without merging.

        Raises:
            KeyRequiredError: If no key was supplied.
            RecordNotFoundError: If no record exists for the key.
            StorageUnavailableError: On connection or statement failure.
        """
        key = require_key(internal_id)
        with self.uow_factory() as uow:
            record = uow.records.get(key)
        if record is None:
            raise RecordNotFoundError(key)
        return record

    def merge_upsert(self, internal_id: int, request: UpdateRequest) -> Record:
        """Merge `request` into the record for `internal_id` and persist it.

        Args:
            internal_id: The merge key.
            request: The decoded partial update.

        Returns:
            The persisted record after the merge.

        Raises:
            KeyRequiredError: If no key was supplied.
            StorageUnavailableError: On connection or statement failure. Nothing
                is persisted in that case.
        """
        key = require_key(internal_id)
        with self.uow_factory() as uow:
            record = self._merge_upsert(uow, key, request)
            uow.commit()
        logger.debug(
            "Merge-upsert (%s) committed record %s: %s",
            self.strategy.value,
            key,
            record.fields(),
        )
        return record

    @abc.abstractmethod
    def _merge_upsert(
        self, uow: AbstractUnitOfWork, internal_id: int, request: UpdateRequest
    ) -> Record:
        """Perform the strategy-specific reads and writes inside `uow`."""


class LockingUpsertEngine(UpsertEngine):
    """Strategy A: pessimistic row lock + explicit merge."""

    strategy = UpsertStrategy.LOCK

    def _merge_upsert(
        self, uow: AbstractUnitOfWork, internal_id: int, request: UpdateRequest
    ) -> Record:
        if (existing := uow.records.get_for_update(internal_id)) is None:
            if created := uow.records.insert(merge(internal_id, None, request)):
                return created

            # A concurrent request created the row first; merge against it.
            logger.debug("Record %s created concurrently; re-locking", internal_id)
            if (existing := uow.records.get_for_update(internal_id)) is None:
                msg = f"insert of record {internal_id} conflicted but no row found"  # pragma: no cover
                raise StorageUnavailableError(msg)  # pragma: no cover

        return uow.records.update(merge(internal_id, existing, request))


class AtomicUpsertEngine(UpsertEngine):
    """Strategy B: single ``INSERT ... ON CONFLICT DO UPDATE`` statement."""

    strategy = UpsertStrategy.ATOMIC

    def _merge_upsert(
        self, uow: AbstractUnitOfWork, internal_id: int, request: UpdateRequest
    ) -> Record:
        # Row to insert for an unseen key: missing fields default to null.
        created = merge(internal_id, None, request)

        # Values to assign for an existing key. Present and explicit-null fields
        # resolve independently of the stored value; missing fields are left out
        # so the statement keeps the stored column.
        assignments = {
            name: getattr(created, name)
            for name, field in request.fields().items()
            if not is_missing(field)
        }
        return uow.records.upsert(created, assignments)


ENGINES: dict[UpsertStrategy, type[UpsertEngine]] = {
    UpsertStrategy.LOCK: LockingUpsertEngine,
    UpsertStrategy.ATOMIC: AtomicUpsertEngine,
}


def make_upsert_engine(
    strategy: UpsertStrategy, uow_factory: UnitOfWorkFactory
) -> UpsertEngine:
    """Build the engine for the configured strategy."""
    return ENGINES[strategy](uow_factory)
