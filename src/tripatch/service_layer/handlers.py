"""Service layer handlers.

Entry points for transports: decode a wire payload, then hand the decoded
request to the configured upsert engine. Decoding failures are raised here
and never reach the engine.
"""

import logging
from collections.abc import Mapping
from typing import Any

from tripatch.interfaces.errors import RequestError
from tripatch.interfaces.records import Record, UpdateRequest

from .upsert import UpsertEngine, require_key

logger = logging.getLogger(__name__)


def patch_record(
    engine: UpsertEngine,
    internal_id: int,
    payload: Mapping[str, Any],
    *,
    strict: bool = False,
) -> Record:
    """Apply a partial update payload to the record for `internal_id`.

    Raises:
        RequestError: If the key is missing or the payload does not decode.
        StorageUnavailableError: On storage failure.
    """
    try:
        key = require_key(internal_id)
        request = UpdateRequest.from_payload(payload, strict=strict)
    except RequestError as e:
        logger.info("Rejected patch for record %s: %s", internal_id, e)
        raise

    logger.debug("Patching record %s with %s", key, request)
    record = engine.merge_upsert(key, request)
    logger.info("Record %s patched", key)
    return record


def get_record(engine: UpsertEngine, internal_id: int) -> Record:
    """Fetch the record for `internal_id`."""
    return engine.fetch(internal_id)
