"""Configuration utilities for tripatch.

Settings come from the environment:

- ``TRIPATCH_DB_URL`` — SQLAlchemy database URL (required).
- ``TRIPATCH_UPSERT_STRATEGY`` — ``lock`` (default) or ``atomic``.
- ``TRIPATCH_STRICT_PAYLOAD`` — reject unknown payload keys when truthy.
- ``TRIPATCH_POOL_SIZE`` / ``TRIPATCH_MAX_OVERFLOW`` / ``TRIPATCH_POOL_TIMEOUT``
  — connection pool bounds.
"""

import os
import sys
from dataclasses import dataclass
from importlib.resources import files
from typing import Any, TextIO

from alembic.config import Config

from tripatch.service_layer.upsert import UpsertStrategy

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate

DB_URL_ENV = "TRIPATCH_DB_URL"
UPSERT_STRATEGY_ENV = "TRIPATCH_UPSERT_STRATEGY"
STRICT_PAYLOAD_ENV = "TRIPATCH_STRICT_PAYLOAD"
POOL_SIZE_ENV = "TRIPATCH_POOL_SIZE"
MAX_OVERFLOW_ENV = "TRIPATCH_MAX_OVERFLOW"
POOL_TIMEOUT_ENV = "TRIPATCH_POOL_TIMEOUT"

TRUTHY = {"1", "true", "yes", "on"}


class DatabaseUrlNotSetError(Exception):
    """Raised when the TRIPATCH_DB_URL environment variable is not set."""


class InvalidSettingError(ValueError):
    """Raised when an environment setting has an invalid value."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"{name}={value!r}: {reason}")
        self.name = name
        self.value = value


@dataclass(frozen=True, slots=True)
class PoolSettings:
    """Connection pool bounds passed to `make_engine`."""

    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: float = 30.0

    def as_engine_kwargs(self) -> dict[str, Any]:
        """Return keyword arguments for `tripatch.adapters.db.engine.make_engine`."""
        return {
            "pool_size": self.pool_size,
            "max_overflow": self.max_overflow,
            "pool_timeout": self.pool_timeout,
        }


def get_db_url() -> str:
    """Get the database URL from the environment.

    Raises:
        DatabaseUrlNotSetError: If `TRIPATCH_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def get_upsert_strategy() -> UpsertStrategy:
    """Get the configured upsert strategy (default: ``lock``).

    Raises:
        InvalidSettingError: If the value names no known strategy.
    """
    if not (raw := os.environ.get(UPSERT_STRATEGY_ENV)):
        return UpsertStrategy.LOCK
    try:
        return UpsertStrategy.from_string(raw)
    except ValueError as e:
        choices = ", ".join(s.value for s in UpsertStrategy)
        raise InvalidSettingError(
            UPSERT_STRATEGY_ENV, raw, f"expected one of {choices}"
        ) from e


def get_strict_payload() -> bool:
    """Return True if unknown payload keys should be rejected."""
    return os.environ.get(STRICT_PAYLOAD_ENV, "").strip().lower() in TRUTHY


def _get_number(name: str, default: float, cast: type, minimum: float) -> Any:
    if not (raw := os.environ.get(name)):
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise InvalidSettingError(name, raw, f"expected {cast.__name__}") from e
    if value < minimum:
        raise InvalidSettingError(name, raw, f"must be >= {minimum}")
    return value


def get_pool_settings() -> PoolSettings:
    """Get connection pool bounds from the environment.

    Raises:
        InvalidSettingError: If a value is not a number or is out of range.
    """
    defaults = PoolSettings()
    return PoolSettings(
        pool_size=_get_number(POOL_SIZE_ENV, defaults.pool_size, int, 1),
        max_overflow=_get_number(MAX_OVERFLOW_ENV, defaults.max_overflow, int, 0),
        pool_timeout=_get_number(POOL_TIMEOUT_ENV, defaults.pool_timeout, float, 0),
    )


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for tripatch's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → tripatch's packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL. Can be `None` only in contexts where
            Alembic won't need to connect to the DB (e.g., `heads`).
        stdout: Text stream Alembic will write status lines to.

    Returns:
        An `alembic.config.Config` pointing to tripatch's migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("tripatch.adapters.db.alembic")),
    )
    return cfg
