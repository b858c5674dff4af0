"""Error classification for PostgreSQL session failures.

Every error is fatal to the calling assertion. Nothing here is retried.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    CONNECTION = "connection"
    EXECUTION = "execution"


class PostgresSessionError(Exception):
    """Base exception for postgres session errors."""

    kind: ErrorKind = ErrorKind.EXECUTION

    def __init__(self, message: str, output: Optional[str] = None):
        super().__init__(message)
        self.output = output


class ConfigurationError(PostgresSessionError):
    """Missing user or password. Raised before any process is spawned."""

    kind = ErrorKind.CONFIGURATION


class ExecutionFailure(PostgresSessionError):
    """A query whose outcome was classified as failed.

    `output` holds the combined stdout/stderr text for diagnosis.
    """

    kind = ErrorKind.EXECUTION


class ConnectionFailure(ExecutionFailure):
    """The session's probe query failed; the session is unusable."""

    kind = ErrorKind.CONNECTION
