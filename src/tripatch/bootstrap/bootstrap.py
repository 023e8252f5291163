"""Wire the upsert engine to its SQLAlchemy unit of work."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

from tripatch import __version__, config
from tripatch.adapters.db.engine import make_engine
from tripatch.adapters.unit_of_work import SqlAlchemyUnitOfWork
from tripatch.logging import log_startup
from tripatch.service_layer.upsert import (
    UnitOfWorkFactory,
    UpsertEngine,
    UpsertStrategy,
    make_upsert_engine,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """Application wiring handed to entrypoints."""

    db_engine: Engine
    upsert_engine: UpsertEngine
    strict_payload: bool

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.db_engine.dispose()


def build_uow_factory(db_engine: Engine) -> UnitOfWorkFactory:
    """Return a factory producing one unit of work (one connection) per request."""
    return partial(SqlAlchemyUnitOfWork, db_engine)


def bootstrap(
    url: str | None = None,
    *,
    strategy: UpsertStrategy | None = None,
    strict_payload: bool | None = None,
    pool: config.PoolSettings | None = None,
) -> AppContainer:
    """Build the application from arguments, falling back to the environment.

    Raises:
        DatabaseUrlNotSetError: If no URL is given and TRIPATCH_DB_URL is unset.
        InvalidSettingError: If an environment setting is invalid.
    """
    url = url or config.get_db_url()
    strategy = strategy or config.get_upsert_strategy()
    if strict_payload is None:
        strict_payload = config.get_strict_payload()
    pool = pool or config.get_pool_settings()

    db_engine = make_engine(url, **pool.as_engine_kwargs())
    upsert_engine = make_upsert_engine(strategy, build_uow_factory(db_engine))
    log_startup(
        logger,
        app_version=__version__,
        backend=db_engine.dialect.name,
        strategy=strategy,
        strict=strict_payload,
        pool=pool,
    )
    return AppContainer(
        db_engine=db_engine,
        upsert_engine=upsert_engine,
        strict_payload=strict_payload,
    )
