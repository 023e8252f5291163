"""Errors raised by tripatch.

Request errors are raised while validating an incoming partial update and
never reach the storage layer. Storage errors are raised by adapters and
propagate unchanged to the caller; tripatch never retries.
"""

from __future__ import annotations

from collections.abc import Iterable


class TripatchError(Exception):
    """Base class for all tripatch errors."""


# --- Request validation ---


class RequestError(TripatchError):
    """Base class for errors that reject a request before any store access."""


class MalformedPayloadError(RequestError):
    """Raised when the wire payload is not a map-like object."""

    def __init__(self, received: object) -> None:
        super().__init__(
            f"Payload must be an object, got {type(received).__name__}"
        )
        self.received = received


class MalformedFieldError(RequestError):
    """Raised when a supplied field does not decode to its expected type.

    Attributes:
        field (str): The offending field name.
        expected (str): Name of the expected type.
        received (str): Name of the type actually supplied.
    """

    def __init__(self, field: str, expected: type, received: object) -> None:
        self.field = field
        self.expected = expected.__name__
        self.received = type(received).__name__
        super().__init__(
            f"Field '{field}' must be {self.expected} or null, got {self.received}"
        )


class UnknownFieldError(RequestError):
    """Raised in strict mode when the payload carries unrecognized keys."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(sorted(fields, key=str))
        super().__init__(f"Unknown field(s): {', '.join(map(str, self.fields))}")


class KeyRequiredError(RequestError):
    """Raised when no merge key (``internal_id``) was supplied."""

    def __init__(self) -> None:
        super().__init__("internal_id is required")


# --- Reads ---


class RecordNotFoundError(TripatchError):
    """Raised when a pure read finds no record for the given key."""

    def __init__(self, internal_id: int) -> None:
        super().__init__(f"Record ({internal_id}) not found")
        self.internal_id = internal_id


# --- Storage ---


class StorageUnavailableError(TripatchError):
    """Connection, pool or transaction failure; callers may retry.

    No partial state survives the failed transaction or statement.
    """
