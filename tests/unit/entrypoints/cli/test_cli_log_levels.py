"""Unit tests for the CLI logger-level parser."""

import logging

import click
import pytest

from tripatch.entrypoints.cli.helpers.log_level_parser import (
    DEFAULT_LIB_LEVELS,
    parse_log_level,
)


def test_empty_uses_defaults():
    assert parse_log_level(None, None, ()) == DEFAULT_LIB_LEVELS  # type: ignore[arg-type]


def test_later_items_override_earlier_ones():
    value = ("sqlalchemy=INFO", "alembic=ERROR", "sqlalchemy=WARNING")
    out = parse_log_level(None, None, value)  # type: ignore[arg-type]
    assert out["sqlalchemy"] == logging.WARNING
    assert out["alembic"] == logging.ERROR


def test_envvar_string_with_commas_and_spaces():
    out = parse_log_level(None, None, "sqlalchemy.engine=info,  tripatch=DEBUG alembic=ERROR")  # type: ignore[arg-type]
    assert out["sqlalchemy.engine"] == logging.INFO
    assert out["tripatch"] == logging.DEBUG
    assert out["alembic"] == logging.ERROR


@pytest.mark.parametrize("bad", ["sqlalchemy", "=INFO", "sqlalchemy=LOUD"])
def test_malformed_items_raise_bad_parameter(bad):
    with pytest.raises(click.BadParameter):
        parse_log_level(None, None, (bad,))  # type: ignore[arg-type]
