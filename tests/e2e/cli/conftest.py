"""Fixtures for end-to-end CLI tests.

Provides a test-only `log-demo` command that emits log messages on a project
and a third-party logger, a CliRunner whose flight recorder writes under the
test's temp dir, and a migrated SQLite database exposed via TRIPATCH_DB_URL.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from tripatch.entrypoints.cli.main import tripatch

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit DEBUG..CRITICAL on 'tripatch.demo' plus some third-party noise."""
    logger = logging.getLogger("tripatch.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and any section registries it keeps."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command on `tripatch` for the duration of a test."""
    tripatch.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(tripatch, "log-demo")


@pytest.fixture
def log_path(tmp_path):
    return tmp_path / "flight_recorder.log"


@pytest.fixture
def runner(log_path):
    """CliRunner whose default flight-recorder path lives under tmp_path."""
    return CliRunner(env={"TRIPATCH_LOG_PATH": str(log_path)})


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def db_env(sqlite_url, monkeypatch):
    """Point TRIPATCH_DB_URL at a migrated SQLite file; clear other settings."""
    monkeypatch.setenv("TRIPATCH_DB_URL", sqlite_url)
    monkeypatch.delenv("TRIPATCH_UPSERT_STRATEGY", raising=False)
    monkeypatch.delenv("TRIPATCH_STRICT_PAYLOAD", raising=False)
    return sqlite_url
