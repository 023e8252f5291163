"""tripatch records CLI.

``patch`` merge-upserts a JSON partial update; ``show`` reads a record back.
Both print the record as a JSON object on stdout. Omitting a key leaves the
stored value untouched, while ``null`` clears it.

Examples
    $ tripatch records patch 42 '{"one": "a"}'
    {"internal_id": 42, "one": "a", "two": null}
    $ echo '{"two": "b"}' | tripatch records patch 42 -
    {"internal_id": 42, "one": "a", "two": "b"}
    $ tripatch records show 42
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import click
import click_extra as clickx

from tripatch import config
from tripatch.bootstrap import AppContainer, bootstrap
from tripatch.interfaces.errors import StorageUnavailableError, TripatchError
from tripatch.interfaces.records import Record
from tripatch.service_layer import handlers
from tripatch.service_layer.upsert import UpsertStrategy

from .db import MISSING_DB_URL_MSG

logger = logging.getLogger(__name__)

STORAGE_UNAVAILABLE_MSG = "Storage unavailable; nothing was written. Retry later."

STRATEGY_CHOICES = [s.value for s in UpsertStrategy]


@contextmanager
def _application(
    strategy: str | None = None, strict: bool | None = None
) -> Iterator[AppContainer]:
    """Build the application and translate tripatch errors for Click."""
    try:
        container = bootstrap(
            strategy=UpsertStrategy.from_string(strategy) if strategy else None,
            strict_payload=strict,
        )
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    except config.InvalidSettingError as e:
        raise click.ClickException(str(e)) from e

    try:
        yield container
    except StorageUnavailableError as e:
        logger.error("Storage unavailable: %s", e)
        raise click.ClickException(STORAGE_UNAVAILABLE_MSG) from e
    except TripatchError as e:
        raise click.ClickException(str(e)) from e
    finally:
        container.dispose()


def _load_payload(raw: str) -> Any:
    """Parse PAYLOAD as JSON; ``-`` reads it from stdin."""
    if raw == "-":
        raw = click.get_text_stream("stdin").read()
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="PAYLOAD") from e


def _echo_record(record: Record) -> None:
    click.echo(json.dumps(record.to_dict()))


@click.group(cls=clickx.ExtraGroup)
def records() -> None:
    """Patch and read records."""


@records.command()
@click.argument("internal_id", type=int)
@click.argument("payload", type=str)
@click.option(
    "--strategy",
    type=click.Choice(STRATEGY_CHOICES, case_sensitive=False),
    default=None,
    help="Upsert strategy (overrides TRIPATCH_UPSERT_STRATEGY; default: lock).",
)
@click.option(
    "--strict/--lenient",
    "strict",
    default=config.get_strict_payload,
    help=(
        "Reject payload keys other than the updatable fields "
        "(default from TRIPATCH_STRICT_PAYLOAD; lenient ignores them)."
    ),
)
def patch(internal_id: int, payload: str, strategy: str | None, strict: bool) -> None:
    """Merge PAYLOAD (a JSON object, or - for stdin) into record INTERNAL_ID."""
    data = _load_payload(payload)
    with _application(strategy=strategy, strict=strict) as app:
        record = handlers.patch_record(
            app.upsert_engine, internal_id, data, strict=app.strict_payload
        )
    _echo_record(record)


@records.command()
@click.argument("internal_id", type=int)
def show(internal_id: int) -> None:
    """Print record INTERNAL_ID."""
    with _application() as app:
        record = handlers.get_record(app.upsert_engine, internal_id)
    _echo_record(record)
