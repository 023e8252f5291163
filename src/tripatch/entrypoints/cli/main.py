"""The ``tripatch`` command.

The root group only sets up logging (see `tripatch.logging`); the work is
done by its subgroups:

- ``tripatch db`` provisions and inspects the ``records`` schema;
- ``tripatch records`` merge-upserts partial updates and reads records back.

stdout carries command output only, so ``tripatch records show 1 | jq`` works
at any verbosity.
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from tripatch import __version__
from tripatch.logging import LoggingSetup, console_level

from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .records import records as records_group

logger = logging.getLogger(__name__)


HELP = """Apply partial updates to records keyed by internal_id.

    Each field of an update is set to a value, cleared with an explicit
    null, or left untouched by omitting it. A record is created the first
    time its internal_id is written; run 'tripatch db upgrade' once first.
    """

EPILOG = "\b\n" + "\n".join(
    [
        click.style("Environment:", fg="blue", bold=True, underline=True),
        "  TRIPATCH_DB_URL           database URL (required)",
        "  TRIPATCH_UPSERT_STRATEGY  lock (default) or atomic",
        "  TRIPATCH_STRICT_PAYLOAD   reject unknown payload keys when truthy",
        "  TRIPATCH_POOL_SIZE, TRIPATCH_MAX_OVERFLOW, TRIPATCH_POOL_TIMEOUT",
        "                            connection pool bounds (5, 10, 30s)",
    ]
)


def _default_log_path() -> Path:
    return Path(user_log_dir("tripatch", appauthor=False, ensure_exists=True)) / "latest.log"


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    default=0,
    help="Log more: -v for INFO, -vv for DEBUG (default WARNING).",
)
@click.option(
    "--quiet",
    "-q",
    count=True,
    default=0,
    help="Log less: -q for ERROR, -qq for CRITICAL only.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Log everything at DEBUG with timestamps, logger names and source lines.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=_default_log_path,
    envvar="TRIPATCH_LOG_PATH",
    show_default="<user log dir>/latest.log",
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder-capacity",
    "recorder_capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="TRIPATCH_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Number of log records the flight recorder keeps.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    show_envvar=True,
    help=(
        "Keep recent DEBUG records in memory, regardless of -v/-q, and write "
        "them to --log-path when a warning or error is logged, e.g. when "
        "storage is unavailable."
    ),
)
@click.option(
    "--force-flush/--no-force-flush",
    default=False,
    show_default=True,
    show_envvar=True,
    help="Also write the flight recorder buffer to --log-path on exit.",
)
@click.option(
    "-L",
    "--logger-level",
    "levels",
    multiple=True,
    callback=parse_log_level,
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
    help=(
        "Minimum level for one logger, as NAME=LEVEL. Repeatable, e.g. "
        "-L sqlalchemy.engine=INFO to see the upsert statements or "
        "-L sqlalchemy.pool=DEBUG to watch connection checkouts."
    ),
)
@clickx.pass_context
def tripatch(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose: int,
    quiet: int,
    debug: bool,
    log_path: Path,
    recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    levels: dict[str, int],
) -> None:
    """Apply partial updates to records keyed by internal_id."""
    setup = LoggingSetup(
        level=console_level(verbose, quiet),
        debug=debug,
        color=ctx.color is not False,
        log_path=log_path if flight_recorder else None,
        recorder_capacity=recorder_capacity,
        force_flush=force_flush,
        logger_levels=levels,
    )
    setup.install()
    setup.describe(logger)
    ctx.call_on_close(logging.shutdown)


tripatch.add_command(db_group)
tripatch.add_command(records_group)
