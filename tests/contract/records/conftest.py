"""Fixtures for record store and merge-upsert contract tests.

Every test here runs against each real backend: a migrated SQLite file and
(when Docker is available) PostgreSQL 17.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tripatch.bootstrap import build_uow_factory
from tripatch.service_layer.upsert import UpsertStrategy, make_upsert_engine

from tests.conftest import ENGINE_FIXTURES

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from tripatch.service_layer.upsert import UnitOfWorkFactory, UpsertEngine

# pylint: disable=redefined-outer-name


@pytest.fixture(params=ENGINE_FIXTURES)
def db_engine(request: pytest.FixtureRequest) -> Engine:
    """Each backend's engine, looked up lazily so SQLite runs without Docker."""
    return request.getfixturevalue(request.param)


@pytest.fixture
def uow_factory(db_engine: Engine) -> UnitOfWorkFactory:
    return build_uow_factory(db_engine)


@pytest.fixture(params=list(UpsertStrategy), ids=lambda s: s.value)
def upsert_engine(
    request: pytest.FixtureRequest, uow_factory: UnitOfWorkFactory
) -> UpsertEngine:
    """Each upsert strategy, bound to the backend under test."""
    return make_upsert_engine(request.param, uow_factory)
