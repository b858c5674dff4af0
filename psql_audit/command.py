"""psql command construction.

Builds one shell command line per query:

    PGPASSWORD='<password>' psql -U <user> [-d <db>]... -h <host> -p <port> -A -t -c <query>

Security:
- The query is shell-quoted; it always reaches psql as the single `-c` argument
- The password travels as an environment assignment, not a flag, so it stays out
  of the psql argument list. It is still part of the command string, so anything
  that logs the command must pass it through `redact_command` first
- Database names, user and host are shell-quoted as well
"""

from __future__ import annotations

import logging
import re
import shlex
from typing import Sequence

from psql_audit.config import ConnectionParams

# -A: unaligned output, -t: tuples only (no header/footer)
OUTPUT_FLAGS = "-A -t"

REDACT_PATTERN = re.compile(r"(PGPASSWORD=').+(' psql .*)", re.DOTALL)
REDACTED = "REDACTED"


def build_psql_command(params: ConnectionParams, query: str, databases: Sequence[str] = ()) -> str:
    """Compose the psql command line for `query`.

    Args:
        params: Connection parameters (password must not be logged)
        query: SQL or psql meta-command, passed verbatim to `psql -c`
        databases: Target databases, one `-d` flag each in the given order

    Returns:
        Shell command string

    Example:
        >>> params = ConnectionParams(password="secret")
        >>> build_psql_command(params, "SELECT 1;", ["app"])
        "PGPASSWORD='secret' psql -U postgres -d app -h localhost -p 5432 -A -t -c 'SELECT 1;'"
    """
    parts = [f"PGPASSWORD={_single_quote(params.password)}", "psql", "-U", shlex.quote(params.user)]
    for database in databases:
        parts += ["-d", shlex.quote(database)]
    parts += ["-h", shlex.quote(params.host), "-p", str(params.port), OUTPUT_FLAGS, "-c", shlex.quote(query)]
    return " ".join(parts)


def redact_command(text: str) -> str:
    """Mask the PGPASSWORD value in a composed command line."""
    return REDACT_PATTERN.sub(rf"\g<1>{REDACTED}\g<2>", text)


class RedactingFilter(logging.Filter):
    """Logging filter that masks PGPASSWORD values in formatted records."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_command(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _single_quote(value: str) -> str:
    # Always quoted, unlike shlex.quote, so REDACT_PATTERN can find the value.
    return "'" + value.replace("'", "'\"'\"'") + "'"
