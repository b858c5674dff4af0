"""PostgreSQL query session backed by the `psql` client.

Each query is a fresh `psql` process. The session validates its credentials once,
at construction, with a cheap probe query. If the probe fails the session is
permanently failed and every later query fails fast without spawning a process.

Example:
    sql = PostgresSession("postgres", "secret", "db.internal", 5432)
    result = sql.query("SELECT usename FROM pg_shadow WHERE passwd IS NULL;")
    assert result.output == ""
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from psql_audit.classify import PatternLike, classify_outcome
from psql_audit.command import build_psql_command
from psql_audit.config import ConnectionParams
from psql_audit.errors import ConnectionFailure, ExecutionFailure, PostgresSessionError
from psql_audit.interfaces import CommandRunner
from psql_audit.runner import SubprocessRunner
from psql_audit.types import QueryResult

logger = logging.getLogger(__name__)

# Lists roles; needs no target database and touches no user tables.
PROBE_QUERY = r"\du"


@dataclass(frozen=True)
class QueryOutcome:
    """Either a QueryResult or the error that prevented one."""

    result: Optional[QueryResult] = None
    error: Optional[PostgresSessionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> QueryResult:
        if self.error is not None:
            raise self.error
        if self.result is None:
            raise ExecutionFailure("PostgreSQL query produced no result")
        return self.result


class PostgresSession:
    """Run SQL checks against a PostgreSQL server through `psql`.

    Not safe for concurrent use; use one session per caller.
    """

    def __init__(
        self,
        user: Optional[str],
        password: Optional[str],
        host: Optional[str] = None,
        port: Union[int, str, None] = None,
        *,
        runner: Optional[CommandRunner] = None,
        connection_patterns: Optional[Iterable[PatternLike]] = None,
    ):
        """Validate credentials and probe the server.

        Args:
            user: Role name (default: postgres)
            password: Role password, required
            host: Server host (default: localhost)
            port: Server port (default: 5432)
            runner: Command runner; defaults to SubprocessRunner
            connection_patterns: Override the connection-failure text patterns

        Raises:
            ConfigurationError: user or password is empty
        """
        self._params = ConnectionParams.create(user, password, host, port)
        self._runner: CommandRunner = runner if runner is not None else SubprocessRunner()
        self._connection_patterns = tuple(connection_patterns) if connection_patterns is not None else None
        self._failed = False
        self._failure_reason: Optional[str] = None
        self._failure_output: Optional[str] = None

        self._probe()

    @classmethod
    def from_params(cls, params: ConnectionParams, **kwargs) -> PostgresSession:
        return cls(params.user, params.password, params.host, params.port, **kwargs)

    @property
    def params(self) -> ConnectionParams:
        return self._params

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def failure_reason(self) -> Optional[str]:
        return self._failure_reason

    def execute(self, query: str, databases: Sequence[str] = ()) -> QueryOutcome:
        """Run `query` and return the result or the error, without raising."""
        if self._failed:
            return QueryOutcome(error=ConnectionFailure(self._failure_reason or "", output=self._failure_output))

        command = build_psql_command(self._params, query, databases)
        outcome = self._runner.run(command)
        classification = classify_outcome(outcome, self._connection_patterns)

        if not classification.succeeded:
            logger.debug(f"Query failed ({classification.reason})")
            return QueryOutcome(
                error=ExecutionFailure(
                    f"PostgreSQL query with errors: {classification.output}",
                    output=classification.output,
                )
            )

        # stderr is dropped on success
        return QueryOutcome(result=QueryResult(outcome.stdout.strip(), f"PostgreSQL query: {query}"))

    def query(self, query: str, databases: Sequence[str] = ()) -> QueryResult:
        """Run `query` against the given databases.

        Raises:
            ConnectionFailure: the session's probe query failed
            ExecutionFailure: the query's outcome was classified as failed
        """
        return self.execute(query, databases).unwrap()

    def _probe(self) -> None:
        outcome = self.execute(PROBE_QUERY)
        if outcome.error is not None:
            self._failed = True
            self._failure_reason = str(outcome.error)
            self._failure_output = outcome.error.output
            logger.warning(
                f"PostgreSQL connection check failed for {self._params.user}@{self._params.host}:{self._params.port}"
            )
