"""Shared test fixtures for pytest.

Provides a scripted command runner so session tests never spawn psql.
"""

from __future__ import annotations

from typing import Callable, Union

import pytest

from psql_audit.config import ConnectionParams
from psql_audit.types import ExecutionOutcome

Responder = Union[ExecutionOutcome, Callable[[str], ExecutionOutcome]]

OK_PROBE = ExecutionOutcome(exit_status=0, stdout="postgres|Superuser|{}\n", stderr="")


class FakeRunner:
    """Command runner that records commands and replays scripted outcomes.

    Outcomes are consumed in order; the last one repeats once the script runs out.
    """

    def __init__(self, *outcomes: Responder):
        self.outcomes = list(outcomes) or [OK_PROBE]
        self.commands: list[str] = []

    def run(self, command: str) -> ExecutionOutcome:
        self.commands.append(command)
        responder = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        return responder(command) if callable(responder) else responder


@pytest.fixture
def params() -> ConnectionParams:
    return ConnectionParams(password="s3cret")


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeRunner]:
    return FakeRunner
