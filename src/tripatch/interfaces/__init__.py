"""tripatch interfaces: domain types, errors and ports."""

from .errors import (
    KeyRequiredError,
    MalformedFieldError,
    MalformedPayloadError,
    RecordNotFoundError,
    RequestError,
    StorageUnavailableError,
    TripatchError,
    UnknownFieldError,
)
from .patch import EXPLICIT_NULL, MISSING, PatchField, Present, decode_field, resolve
from .records import UPDATABLE_FIELDS, Record, UpdateRequest

__all__ = [
    "EXPLICIT_NULL",
    "MISSING",
    "UPDATABLE_FIELDS",
    "KeyRequiredError",
    "MalformedFieldError",
    "MalformedPayloadError",
    "PatchField",
    "Present",
    "Record",
    "RecordNotFoundError",
    "RequestError",
    "StorageUnavailableError",
    "TripatchError",
    "UnknownFieldError",
    "UpdateRequest",
    "decode_field",
    "resolve",
]
