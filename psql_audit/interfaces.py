from __future__ import annotations

from typing import Protocol

from psql_audit.types import ExecutionOutcome


class CommandRunner(Protocol):
    """Runs one shell command line and reports its exit status and output."""

    def run(self, command: str) -> ExecutionOutcome:
        raise NotImplementedError
