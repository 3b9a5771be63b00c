"""Blocking execution of single commands.

The executor runs one :class:`~core.models.Command` as a child process and
waits for it. In stream mode the child shares the terminal with uptodate so
the operator sees its output live; in capture mode standard output is
buffered and returned as text for the parsers.
"""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from .models import Command, ExecutionResult, RunMode

logger = structlog.get_logger(__name__)


class SpawnError(Exception):
    """Raised when a child process could not be created."""

    def __init__(self, command: Command, cause: OSError) -> None:
        self.command = command
        self.cause = cause
        super().__init__(f"Could not start '{command.program}': {cause.strerror or cause}")


class CommandExecutor:
    """Runs commands one at a time, blocking until each finishes.

    There is no timeout: a hung child hangs the run, which is acceptable
    for an operator-attended tool.
    """

    def __init__(
        self,
        dry_run: bool = False,
        on_start: Callable[[Command], None] | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            dry_run: If True, streamed commands are announced but not run.
                Captured commands are read-only queries and always run.
            on_start: Called with each command right before a streamed run.
        """
        self.dry_run = dry_run
        self.on_start = on_start

    def run(self, command: Command, mode: RunMode = RunMode.STREAM) -> ExecutionResult:
        """Run a command to completion.

        Args:
            command: The command to run.
            mode: Whether to stream output to the terminal or capture it.

        Returns:
            ExecutionResult with the exit status, and captured output in
            capture mode.

        Raises:
            SpawnError: If the program could not be started.
        """
        log = logger.bind(command=str(command), mode=mode.value)

        if mode == RunMode.STREAM and self.on_start is not None:
            self.on_start(command)

        start_time = datetime.now(tz=UTC)

        if self.dry_run and mode == RunMode.STREAM:
            log.info("command_skipped_dry_run")
            return ExecutionResult(
                command_line=str(command),
                mode=mode,
                exit_status=0,
                succeeded=True,
                dry_run=True,
                start_time=start_time,
                end_time=start_time,
                duration_seconds=0.0,
            )

        log.debug("command_started")

        try:
            if mode == RunMode.CAPTURE:
                completed = subprocess.run(
                    command.argv,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    check=False,
                )
            else:
                completed = subprocess.run(command.argv, check=False)
        except OSError as e:
            log.error("spawn_failed", error=str(e))
            raise SpawnError(command, e) from e

        end_time = datetime.now(tz=UTC)
        exit_status = completed.returncode
        succeeded = command.is_success(exit_status)

        captured_text: str | None = None
        stderr_text: str | None = None
        if mode == RunMode.CAPTURE:
            captured_text = _decode(completed.stdout)
            stderr_text = _decode(completed.stderr)

        if succeeded:
            log.debug("command_completed", exit_status=exit_status)
        else:
            log.warning("command_failed", exit_status=exit_status, stderr=stderr_text)

        return ExecutionResult(
            command_line=str(command),
            mode=mode,
            exit_status=exit_status,
            succeeded=succeeded,
            captured_text=captured_text,
            stderr_text=stderr_text,
            error_message=None if succeeded else f"Exited with status {exit_status}",
            start_time=start_time,
            end_time=end_time,
            duration_seconds=(end_time - start_time).total_seconds(),
        )

    def stream(self, command: Command) -> ExecutionResult:
        """Run a command with its output going straight to the terminal."""
        return self.run(command, RunMode.STREAM)

    def capture(self, command: Command) -> ExecutionResult:
        """Run a command and capture its standard output as text."""
        return self.run(command, RunMode.CAPTURE)


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")
