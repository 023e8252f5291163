"""Logging for tripatch.

The CLI routes every record through the root logger to two handlers:

- a Rich console handler on stderr, since stdout carries the JSON records;
- a "flight recorder", a `MemoryHandler` that keeps the last N records at
  DEBUG and writes them to a file once a WARNING arrives. A request that hits
  unavailable storage logs at ERROR, so the file then holds the statements
  and pool activity leading up to it.

Library records get a short console tag. SQLAlchemy's engine and pool loggers
are tagged ``[sql]`` and ``[pool]``: raise them with ``-L`` when chasing lock
waits or pool exhaustion.

`log_startup` is called once the application is wired and reports how
requests will be served (strategy, strict decoding, pool bounds, backend).
"""

from __future__ import annotations

import logging
import platform
import sys
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

    from tripatch.config import PoolSettings
    from tripatch.service_layer.upsert import UpsertStrategy

PROJECT_LOGGER = "tripatch"

LIBRARY_TAGS = {
    "sqlalchemy.engine": "[sql]",
    "sqlalchemy.pool": "[pool]",
}

DEFAULT_LEVEL = logging.WARNING

CONSOLE_FORMAT = "%(tag)s %(message)s"
DEBUG_CONSOLE_FORMAT = "%(asctime)s %(name)s: %(message)s"
RECORDER_FORMAT = (
    "[%(asctime)s] [%(process)d:%(threadName)s] "
    "%(levelname)s %(name)s:%(lineno)d: %(message)s"
)


def _under(name: str, prefix: str) -> bool:
    return name == prefix or name.startswith(prefix + ".")


def console_level(verbose: int = 0, quiet: int = 0) -> int:
    """Move one level away from WARNING per -v (down) or -q (up).

    The result is clamped to DEBUG..CRITICAL.
    """
    level = DEFAULT_LEVEL - 10 * verbose + 10 * quiet
    return max(logging.DEBUG, min(logging.CRITICAL, level))


class LibraryTagFilter(logging.Filter):
    """Set ``record.tag`` for the console format. Never drops a record.

    tripatch records get no tag. Known SQLAlchemy loggers get their entry in
    `LIBRARY_TAGS`; anything else is tagged with its top-level package,
    e.g. "[alembic]".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if _under(name, PROJECT_LOGGER):
            record.tag = ""
            return True
        for prefix, tag in LIBRARY_TAGS.items():
            if _under(name, prefix):
                record.tag = tag
                return True
        record.tag = f"[{name.split('.')[0]}]"
        return True


def console_handler(
    level: int = DEFAULT_LEVEL, *, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return a RichHandler writing to stderr.

    Debug mode forces DEBUG and shows timestamps, logger names and source
    paths instead of library tags.
    """
    console = Console(color_system="auto" if color else None, stderr=True)
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter(DEBUG_CONSOLE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler.addFilter(LibraryTagFilter())
    return handler


def flight_recorder(
    path: Path, *, capacity: int = 2000, flush_on_close: bool = False
) -> MemoryHandler:
    """Buffer up to `capacity` records and dump them to `path` on WARNING+.

    The file is opened lazily, so nothing is created for a quiet run unless
    `flush_on_close` is set.
    """
    target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    target.setLevel(logging.DEBUG)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity=capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=flush_on_close,
    )


@dataclass(frozen=True)
class LoggingSetup:
    """Logging choices made on the command line.

    A `log_path` of None turns the flight recorder off.
    """

    level: int = DEFAULT_LEVEL
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    recorder_capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    def install(self) -> list[logging.Handler]:
        """Replace the root logger's handlers and apply per-logger levels."""
        handlers: list[logging.Handler] = [
            console_handler(self.level, debug_mode=self.debug, color=self.color)
        ]
        if self.log_path is not None:
            handlers.append(
                flight_recorder(
                    self.log_path,
                    capacity=self.recorder_capacity,
                    flush_on_close=self.force_flush,
                )
            )
        # root passes everything; each handler applies its own level
        logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
        for name, level in self.logger_levels.items():
            logging.getLogger(name).setLevel(level)
        return handlers

    def describe(self, logger: Logger) -> None:
        logger.debug(
            "Console level: %s%s",
            logging.getLevelName(self.level),
            " (debug mode)" if self.debug else "",
        )
        logger.debug("Flight recorder: %s", self.log_path or "off")
        logger.debug(
            "Per-logger levels: %s",
            {name: logging.getLevelName(lvl) for name, lvl in self.logger_levels.items()},
        )


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    backend: str,
    strategy: UpsertStrategy,
    strict: bool,
    pool: PoolSettings,
) -> None:
    """Log how requests will be served, plus runtime versions, at DEBUG."""
    logger.debug(
        "tripatch %s on %s: strategy=%s, strict=%s, pool=%d+%d (timeout %gs)",
        app_version,
        backend,
        strategy.value,
        "on" if strict else "off",
        pool.pool_size,
        pool.max_overflow,
        pool.pool_timeout,
    )
    logger.debug(
        "Python %s on %s %s; SQLAlchemy %s; Alembic %s",
        sys.version.split()[0],
        platform.system(),
        platform.release(),
        sqlalchemy.__version__,
        alembic.__version__,
    )
