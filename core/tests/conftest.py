"""Shared test fixtures for core tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from core.executor import SpawnError
from core.models import Command, ExecutionResult, RunMode


@dataclass
class ScriptedResponse:
    """What the fake executor does for one program."""

    exit_status: int = 0
    stdout: str = ""
    missing: bool = False


@dataclass
class FakeExecutor:
    """Executor double that records calls instead of spawning processes.

    Responses are looked up by the full command line first, then by program
    name. Unknown commands succeed with empty output.
    """

    responses: dict[str, ScriptedResponse] = field(default_factory=dict)
    calls: list[tuple[Command, RunMode]] = field(default_factory=list)
    dry_run: bool = False

    def script(self, key: str, **kwargs: object) -> None:
        self.responses[key] = ScriptedResponse(**kwargs)  # type: ignore[arg-type]

    def run(self, command: Command, mode: RunMode = RunMode.STREAM) -> ExecutionResult:
        self.calls.append((command, mode))
        response = self.responses.get(str(command)) or self.responses.get(
            command.program, ScriptedResponse()
        )
        if response.missing:
            raise SpawnError(command, FileNotFoundError(2, "No such file or directory"))

        now = datetime.now(tz=UTC)
        return ExecutionResult(
            command_line=str(command),
            mode=mode,
            exit_status=response.exit_status,
            succeeded=command.is_success(response.exit_status),
            captured_text=response.stdout if mode == RunMode.CAPTURE else None,
            stderr_text="" if mode == RunMode.CAPTURE else None,
            start_time=now,
            end_time=now,
            duration_seconds=0.0,
        )

    def commands(self, mode: RunMode | None = None) -> list[Command]:
        return [command for command, m in self.calls if mode is None or m == mode]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """A fresh recording executor."""
    return FakeExecutor()


@pytest.fixture
def make_executor() -> Callable[..., FakeExecutor]:
    """Factory for recording executors with scripted responses.

    Keys are full command lines or program names, values are
    ScriptedResponse fields, e.g.
    ``make_executor({"pacman -Qtdq": {"stdout": "pkg\\n"}})``.
    """

    def _make(responses: dict[str, dict[str, object]] | None = None) -> FakeExecutor:
        executor = FakeExecutor()
        for key, kwargs in (responses or {}).items():
            executor.script(key, **kwargs)
        return executor

    return _make
