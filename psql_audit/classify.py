"""Outcome classification for psql invocations.

psql exits 0 for some SQL-level errors, so the exit status alone is not enough.
The combined stdout/stderr text is inspected as well. This is a heuristic with a
fixed rule list:

1. non-zero exit status
2. a connection-failure pattern anywhere in the combined text (case-sensitive)
3. a line starting with "error:" (case-insensitive)

Any match means failure.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Pattern, Union

from psql_audit.types import Classification, ExecutionOutcome

PatternLike = Union[str, Pattern[str]]

# libpq wording, e.g. "psql: error: could not connect to server: Connection refused"
DEFAULT_CONNECTION_FAILURE_PATTERNS: tuple[Pattern[str], ...] = (re.compile(r"could not connect to .*"),)

_ERROR_LINE = re.compile(r"^error:", re.MULTILINE)


def combine_output(stdout: str, stderr: str) -> str:
    return stdout + "\n" + stderr


def compile_patterns(patterns: Iterable[PatternLike]) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(p) if isinstance(p, str) else p for p in patterns)


def classify_outcome(
    outcome: ExecutionOutcome,
    connection_patterns: Optional[Iterable[PatternLike]] = None,
) -> Classification:
    """Decide whether a psql outcome is safe to assert against.

    Args:
        outcome: Exit status, stdout and stderr of the invocation
        connection_patterns: Connection-failure patterns; defaults to
            DEFAULT_CONNECTION_FAILURE_PATTERNS

    Returns:
        Classification with the combined output and, on failure, the rule that fired
    """
    patterns = (
        DEFAULT_CONNECTION_FAILURE_PATTERNS if connection_patterns is None else compile_patterns(connection_patterns)
    )
    combined = combine_output(outcome.stdout, outcome.stderr)

    if outcome.exit_status != 0:
        return Classification(False, combined, f"exit status {outcome.exit_status}")

    for pattern in patterns:
        if pattern.search(combined):
            return Classification(False, combined, "connection failure")

    if _ERROR_LINE.search(combined.lower()):
        return Classification(False, combined, "error output")

    return Classification(True, combined)
