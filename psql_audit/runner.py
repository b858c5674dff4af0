"""Local shell execution for psql commands."""

from __future__ import annotations

import logging
import subprocess
from typing import Optional, Union

from psql_audit.command import redact_command
from psql_audit.types import ExecutionOutcome

logger = logging.getLogger(__name__)

# Shell convention for a command killed by `timeout(1)`.
TIMEOUT_EXIT_STATUS = 124


class SubprocessRunner:
    """Run commands through the local shell.

    No timeout is applied unless one is given.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, command: str) -> ExecutionOutcome:
        # Never log the raw command (it carries PGPASSWORD).
        logger.debug("Running command: %s", redact_command(command))

        try:
            completed = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.warning(f"Command timed out after {self.timeout}s")
            return ExecutionOutcome(
                exit_status=TIMEOUT_EXIT_STATUS,
                stdout=_to_text(exc.stdout),
                stderr=f"command timed out after {self.timeout} seconds",
            )

        logger.debug(f"Command exited with status {completed.returncode}")
        return ExecutionOutcome(
            exit_status=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


def _to_text(value: Union[str, bytes, None]) -> str:
    # TimeoutExpired may carry bytes even when text=True was requested.
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
