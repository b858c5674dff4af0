"""Tests for the local shell runner."""

import logging
import subprocess
from unittest.mock import MagicMock, patch

from psql_audit.command import build_psql_command
from psql_audit.config import ConnectionParams
from psql_audit.runner import TIMEOUT_EXIT_STATUS, SubprocessRunner


def test_runner_returns_exit_status_and_streams():
    """Exit status, stdout and stderr are passed through unchanged."""
    completed = MagicMock(returncode=3, stdout="out\n", stderr="err\n")

    with patch("psql_audit.runner.subprocess.run", return_value=completed) as mock_run:
        outcome = SubprocessRunner().run("psql -c 'SELECT 1'")

    assert (outcome.exit_status, outcome.stdout, outcome.stderr) == (3, "out\n", "err\n")
    mock_run.assert_called_once_with(
        "psql -c 'SELECT 1'",
        shell=True,
        capture_output=True,
        text=True,
        errors="replace",
        timeout=None,
    )


def test_runner_passes_timeout():
    """A configured timeout is handed to subprocess.run."""
    completed = MagicMock(returncode=0, stdout="", stderr="")

    with patch("psql_audit.runner.subprocess.run", return_value=completed) as mock_run:
        SubprocessRunner(timeout=2.5).run("true")

    assert mock_run.call_args.kwargs["timeout"] == 2.5


def test_runner_timeout_becomes_failed_outcome():
    """A timeout is reported as a non-zero outcome instead of raising."""
    timeout = subprocess.TimeoutExpired(cmd="psql", timeout=1, output=b"partial")

    with patch("psql_audit.runner.subprocess.run", side_effect=timeout):
        outcome = SubprocessRunner(timeout=1).run("psql")

    assert outcome.exit_status == TIMEOUT_EXIT_STATUS
    assert outcome.stdout == "partial"
    assert "timed out" in outcome.stderr


def test_runner_never_logs_password(caplog):
    """Commands are logged only in redacted form."""
    command = build_psql_command(ConnectionParams(password="hunter2"), "SELECT 1")
    completed = MagicMock(returncode=0, stdout="1\n", stderr="")

    with caplog.at_level(logging.DEBUG, logger="psql_audit.runner"):
        with patch("psql_audit.runner.subprocess.run", return_value=completed):
            SubprocessRunner().run(command)

    assert "PGPASSWORD='REDACTED'" in caplog.text
    assert "hunter2" not in caplog.text


def test_runner_executes_real_shell():
    """The command goes through a real shell and its output is captured."""
    outcome = SubprocessRunner().run("printf 'alice\\nbob\\n'; echo oops >&2; exit 0")

    assert outcome.exit_status == 0
    assert outcome.stdout == "alice\nbob\n"
    assert outcome.stderr == "oops\n"


def test_runner_tolerates_undecodable_output():
    """Bytes that are not valid in the locale encoding are replaced, not raised."""
    outcome = SubprocessRunner().run("printf 'caf\\351\\n'; printf 'bad\\377\\n' >&2")

    assert outcome.exit_status == 0
    assert outcome.stdout.startswith("caf")
    assert outcome.stderr.startswith("bad")
