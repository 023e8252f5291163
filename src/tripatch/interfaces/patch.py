"""Tri-state fields for partial updates.

A field of type ``PatchField[T]`` takes exactly one of three states:

* ``Present(value)`` — the field is explicitly set to a concrete value.
* ``EXPLICIT_NULL`` — the field is explicitly cleared.
* ``MISSING`` — the field was not mentioned; the caller expresses no intent.

``MISSING`` and ``EXPLICIT_NULL`` are told apart by whether the key appeared in
the request at all, never by its value. Decoding inspects key presence before
looking at the value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import MalformedFieldError

T = TypeVar("T")


def _get_missing() -> "_MissingType":
    # Factory used by pickle to retrieve the one true instance.
    return MISSING


def _get_explicit_null() -> "_ExplicitNullType":
    return EXPLICIT_NULL


@dataclass(frozen=True)
class _MissingType:
    """Sentinel for a field whose key was absent from the request."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):  # keep singleton on pickle
        return (_get_missing, ())


@dataclass(frozen=True)
class _ExplicitNullType:
    """Sentinel for a field supplied as null (clear the stored value)."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "EXPLICIT_NULL"

    def __reduce__(self):
        return (_get_explicit_null, ())


MISSING = _MissingType()
EXPLICIT_NULL = _ExplicitNullType()


@dataclass(frozen=True, slots=True)
class Present(Generic[T]):
    """A field supplied with a concrete, non-null value."""

    value: T

    def __post_init__(self) -> None:
        if self.value is None:
            raise ValueError("Present() requires a non-null value; use EXPLICIT_NULL")


type PatchField[T] = Present[T] | _ExplicitNullType | _MissingType


def decode_field(
    payload: Mapping[str, Any], name: str, expected_type: type[T]
) -> PatchField[T]:
    """Decode one field of a loosely-typed payload into a tri-state value.

    Args:
        payload: The decoded wire payload.
        name: The field (key) to decode.
        expected_type: The type a non-null value must have.

    Returns:
        ``MISSING`` if the key is absent, ``EXPLICIT_NULL`` if it maps to
        ``None``, otherwise ``Present(value)``.

    Raises:
        MalformedFieldError: If the key is present, non-null, and not an
            instance of `expected_type`.
    """
    if name not in payload:
        return MISSING
    value = payload[name]
    if value is None:
        return EXPLICIT_NULL
    # bool is an int subclass but never a valid int/str payload value
    if isinstance(value, bool) and expected_type is not bool:
        raise MalformedFieldError(name, expected_type, value)
    if not isinstance(value, expected_type):
        raise MalformedFieldError(name, expected_type, value)
    return Present(value)


def resolve(field: PatchField[T], current: T | None, *, exists: bool) -> T | None:
    """Resolve a tri-state value against the currently stored value.

    Args:
        field: The incoming tri-state value.
        current: The stored value (ignored when `exists` is False).
        exists: Whether a stored record exists.

    Returns:
        The resolved value according to these rules:
        If field is ``Present(v)``, return ``v``.
        If field is ``EXPLICIT_NULL``, return None.
        If field is ``MISSING``, return `current` when the record exists,
        otherwise None (missing on create behaves like explicit null).
    """
    if isinstance(field, Present):
        return field.value
    if isinstance(field, _ExplicitNullType):
        return None
    return current if exists else None


def is_missing(field: PatchField[Any]) -> bool:
    """Return True if the field was absent from the request."""
    return isinstance(field, _MissingType)
