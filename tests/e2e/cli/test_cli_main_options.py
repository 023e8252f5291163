"""End-to-end tests for the top-level `tripatch` command's logging options."""

import re

from tripatch import __version__
from tripatch.entrypoints.cli.main import tripatch

# pylint: disable=unused-argument


def assert_in_output(pattern: str, output: str) -> None:
    if not re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' not found in output:\n{output}")


def assert_not_in_output(pattern: str, output: str) -> None:
    if re.search(pattern, output, re.MULTILINE):
        raise AssertionError(f"Pattern '{pattern}' found in output:\n{output}")


def test_version(runner):
    result = runner.invoke(tripatch, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_groups(runner):
    result = runner.invoke(tripatch, ["--help"])
    assert result.exit_code == 0
    assert_in_output(r"\bdb\b", result.output)
    assert_in_output(r"\brecords\b", result.output)


def test_default_shows_warning(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["log-demo"])
    assert result.exit_code == 0
    assert_in_output("This is a warning-level test message.", result.output)
    assert_not_in_output("This is an info-level test message.", result.output)


def test_verbose_shows_info(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["-v", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("This is an info-level test message.", result.output)
    assert_not_in_output("This is a debug-level test message.", result.output)


def test_vv_shows_debug(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["-vv", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("This is a debug-level test message.", result.output)


def test_quiet_suppresses_warning(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["-q", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("This is an error-level test message.", result.output)
    assert_not_in_output("This is a warning-level test message.", result.output)


def test_qq_leaves_only_critical(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["-qq", "log-demo"])
    assert result.exit_code == 0
    assert_in_output("This is a critical-level test message.", result.output)
    assert_not_in_output("This is an error-level test message.", result.output)


def test_third_party_records_are_prefixed(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["log-demo"])
    assert_in_output(r"\[some\] This is a warning-level third-party", result.output)


def test_logger_level_silences_debug(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["-vv", "-L", "some.thirdparty=INFO", "log-demo"])
    assert result.exit_code == 0
    assert_not_in_output(
        "This is a debug-level third-party test message.", result.output
    )
    assert_in_output("This is an info-level third-party test message.", result.output)


def test_invalid_logger_level_is_a_usage_error(runner, fs):
    result = runner.invoke(tripatch, ["-L", "sqlalchemy=LOUD", "db", "heads"])
    assert result.exit_code == 2
    assert "Invalid log level" in result.output


def test_debug_mode_shows_paths(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["--debug", "log-demo"])
    assert result.exit_code == 0
    assert_in_output(r"conftest\.py:\d+\b", result.output)


def test_debug_mode_is_off_by_default(registered_log_demo, runner, fs):
    result = runner.invoke(tripatch, ["log-demo"])
    assert result.exit_code == 0
    assert_not_in_output(r"conftest\.py:\d+\b", result.output)


def test_flight_recorder_flush_on_warning(registered_log_demo, runner, log_path):
    result = runner.invoke(tripatch, ["-L", "some.thirdparty=INFO", "log-demo"])
    assert result.exit_code == 0
    content = log_path.read_text(encoding="utf-8")
    # buffered DEBUG lines are written once a WARNING arrives
    assert_in_output("This is a debug-level test message.", content)
    assert_in_output("This is a warning-level test message.", content)
    assert_in_output("This is an info-level third-party test message.", content)
    assert_not_in_output("This is a debug-level third-party test message.", content)
    # nothing after the last WARNING+ is flushed without --force-flush
    assert_not_in_output("This is a final debug-level test message.", content)


def test_force_flush_writes_tail(registered_log_demo, runner, log_path):
    result = runner.invoke(tripatch, ["--force-flush", "log-demo"])
    assert result.exit_code == 0
    content = log_path.read_text(encoding="utf-8")
    assert_in_output("This is a final debug-level test message.", content)


def test_flight_recorder_can_be_disabled(registered_log_demo, runner, log_path):
    result = runner.invoke(tripatch, ["--no-flight-recorder", "log-demo"])
    assert result.exit_code == 0
    assert not log_path.exists()
