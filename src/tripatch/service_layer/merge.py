"""Merge resolution for partial updates.

`merge` computes the next state of a record from its current state (or its
absence) and an `UpdateRequest`. It is pure: no I/O, no locking.

Per field:
  - ``Present(v)``      -> ``v``
  - ``EXPLICIT_NULL``   -> ``None``
  - ``MISSING``         -> stored value on update, ``None`` on create
"""

from __future__ import annotations

from tripatch.interfaces.patch import resolve
from tripatch.interfaces.records import Record, UpdateRequest


def merge(internal_id: int, existing: Record | None, request: UpdateRequest) -> Record:
    """Resolve `request` against `existing` and return the merged record.

    Args:
        internal_id: The merge key. Never subject to merge.
        existing: The stored record, or None if the key is unseen.
        request: The decoded partial update.

    Returns:
        The merged record. Its `id` is the stored one, or None on create.

    Raises:
        ValueError: If `existing` belongs to a different key.
    """
    if existing is not None and existing.internal_id != internal_id:
        raise ValueError(
            f"cannot merge record {existing.internal_id} into key {internal_id}"
        )

    exists = existing is not None
    current = existing.fields() if existing is not None else {}
    merged = {
        name: resolve(field, current.get(name), exists=exists)
        for name, field in request.fields().items()
    }
    return Record(
        internal_id=internal_id,
        id=existing.id if existing is not None else None,
        **merged,
    )
