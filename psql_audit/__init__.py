"""PostgreSQL audit checks through the `psql` client.

Building blocks:

- config: connection parameters, defaults and credential validation
- command: psql command construction and password redaction
- classify: success/failure classification of psql output
- runner: local shell execution
- session: PostgresSession, the query facade used by audit checks
"""

from psql_audit.classify import DEFAULT_CONNECTION_FAILURE_PATTERNS, classify_outcome
from psql_audit.command import REDACT_PATTERN, RedactingFilter, build_psql_command, redact_command
from psql_audit.config import ConnectionParams, database_from_url
from psql_audit.errors import (
    ConfigurationError,
    ConnectionFailure,
    ErrorKind,
    ExecutionFailure,
    PostgresSessionError,
)
from psql_audit.interfaces import CommandRunner
from psql_audit.runner import SubprocessRunner
from psql_audit.session import PostgresSession, QueryOutcome
from psql_audit.types import Classification, ExecutionOutcome, QueryResult

__all__ = [
    # Types
    "Classification",
    "ExecutionOutcome",
    "QueryResult",
    "QueryOutcome",
    # Exceptions
    "PostgresSessionError",
    "ConfigurationError",
    "ExecutionFailure",
    "ConnectionFailure",
    "ErrorKind",
    # Config
    "ConnectionParams",
    "database_from_url",
    # Command
    "REDACT_PATTERN",
    "RedactingFilter",
    "build_psql_command",
    "redact_command",
    # Classification
    "DEFAULT_CONNECTION_FAILURE_PATTERNS",
    "classify_outcome",
    # Execution
    "CommandRunner",
    "SubprocessRunner",
    "PostgresSession",
]
