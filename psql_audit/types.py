from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExecutionOutcome:
    """Raw result of one external-process invocation."""

    exit_status: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class Classification:
    succeeded: bool
    output: str  # stdout and stderr, newline-joined
    reason: Optional[str] = None  # rule that marked the outcome as failed


@dataclass(frozen=True)
class QueryResult:
    """Trimmed stdout of a successful query plus a human-readable description.

    `output` is what assertions compare against. `lines()` is the one-row-per-line
    view produced by `psql -A -t`.
    """

    output: str
    description: str

    def lines(self) -> list[str]:
        if not self.output:
            return []
        return self.output.split("\n")

    def rows(self, separator: str = "|") -> list[tuple[str, ...]]:
        """Split each line on the unaligned-output field separator."""
        return [tuple(line.split(separator)) for line in self.lines()]

    def __str__(self) -> str:
        return self.description
