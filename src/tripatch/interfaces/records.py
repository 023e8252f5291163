"""Record read model and the partial-update write model.

Conventions:
  - `internal_id` is the caller-assigned merge key; unique and immutable.
  - `id` is assigned by the store on creation and never supplied by callers.
  - Stored fields are a value or null. "Missing" only exists on requests.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .errors import MalformedPayloadError, UnknownFieldError
from .patch import MISSING, PatchField, decode_field

#: Updatable columns, in table order. Drives decoding, merging and SQL.
UPDATABLE_FIELDS: tuple[str, ...] = ("one", "two")


# --- Read Model ---


@dataclass(frozen=True, slots=True)
class Record:
    """Immutable snapshot of a persisted record.

    Notes:
      - `id` is None before persistence and assigned by the store.
    """

    internal_id: int
    one: str | None = None
    two: str | None = None
    id: int | None = None

    def fields(self) -> dict[str, str | None]:
        """Return the updatable field values keyed by column name."""
        return {name: getattr(self, name) for name in UPDATABLE_FIELDS}

    def to_dict(self) -> dict[str, Any]:
        """Return the caller-visible representation (without `id`)."""
        return {"internal_id": self.internal_id, **self.fields()}


# --- Write Model ---


@dataclass(frozen=True, slots=True)
class UpdateRequest:
    """Immutable partial update for one record; one tri-state per column."""

    one: PatchField[str] = MISSING
    two: PatchField[str] = MISSING

    @classmethod
    def from_payload(
        cls, payload: Mapping[str, Any], *, strict: bool = False
    ) -> UpdateRequest:
        """Decode a wire payload into an UpdateRequest.

        Args:
            payload: The decoded JSON object.
            strict: When True, unrecognized keys are rejected instead of ignored.

        Returns:
            The decoded request.

        Raises:
            MalformedPayloadError: If `payload` is not a mapping.
            MalformedFieldError: On the first field that fails to decode; the
                whole request is rejected.
            UnknownFieldError: In strict mode, if unrecognized keys are present.
        """
        if not isinstance(payload, Mapping):
            raise MalformedPayloadError(payload)
        if strict and (unknown := set(payload) - set(UPDATABLE_FIELDS)):
            raise UnknownFieldError(unknown)
        return cls(
            **{name: decode_field(payload, name, str) for name in UPDATABLE_FIELDS}
        )

    def fields(self) -> dict[str, PatchField[str]]:
        """Return the tri-state values keyed by column name."""
        return {name: getattr(self, name) for name in UPDATABLE_FIELDS}
