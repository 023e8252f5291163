"""Unit tests for the tripatch error hierarchy."""

import pytest

from tripatch.interfaces.errors import (
    KeyRequiredError,
    MalformedFieldError,
    MalformedPayloadError,
    RecordNotFoundError,
    RequestError,
    StorageUnavailableError,
    TripatchError,
    UnknownFieldError,
)


@pytest.mark.parametrize(
    "error",
    [
        KeyRequiredError(),
        MalformedFieldError("one", str, 1),
        MalformedPayloadError([]),
        UnknownFieldError(["x"]),
    ],
)
def test_request_errors(error):
    assert isinstance(error, RequestError)
    assert isinstance(error, TripatchError)


@pytest.mark.parametrize(
    "error", [RecordNotFoundError(1), StorageUnavailableError("down")]
)
def test_non_request_errors(error):
    assert isinstance(error, TripatchError)
    assert not isinstance(error, RequestError)


def test_messages():
    assert str(KeyRequiredError()) == "internal_id is required"
    assert str(MalformedPayloadError([])) == "Payload must be an object, got list"
    assert str(RecordNotFoundError(42)) == "Record (42) not found"
    assert RecordNotFoundError(42).internal_id == 42
