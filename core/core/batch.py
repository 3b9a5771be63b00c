"""Batch expansion of "list installed" output into update commands.

The expander captures a list of installed packages, drops the ones that
must not be touched, and runs one update command per remaining package.
Packages installed from a local path are never refreshed: reinstalling
them from the registry would replace a developer's working copy with a
published release.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from .executor import SpawnError
from .models import (
    Command,
    ExecutionResult,
    PackageOrigin,
    ParsedEntry,
    RunMode,
    StepResult,
    StepStatus,
)

if TYPE_CHECKING:
    from .executor import CommandExecutor
    from .pipeline import BatchStep, UpdateTemplate

logger = structlog.get_logger(__name__)


def select_entries(entries: Iterable[ParsedEntry], exclusions: Iterable[str]) -> list[ParsedEntry]:
    """Keep the entries that may be updated, in their original order.

    Args:
        entries: Parsed entries from the list command.
        exclusions: Names that must never be updated.

    Returns:
        Entries that are neither excluded by name nor installed from a local path.
    """
    excluded = frozenset(exclusions)
    return [
        entry
        for entry in entries
        if entry.name not in excluded and entry.origin != PackageOrigin.LOCAL_PATH
    ]


def plan_updates(
    entries: Iterable[ParsedEntry],
    exclusions: Iterable[str],
    update_template: UpdateTemplate,
) -> list[Command]:
    """Build the update commands for a batch without running anything."""
    return [update_template(entry.name) for entry in select_entries(entries, exclusions)]


def expand_batch(step: BatchStep, executor: CommandExecutor) -> StepResult:
    """Run a batch step.

    Every planned update is attempted in order, one at a time. A failure
    of one update does not stop the others.

    Args:
        step: The batch to run.
        executor: Executor used for the list command and the updates.

    Returns:
        StepResult whose results are the list command's result followed by
        one result per update command.

    Raises:
        SpawnError: If the list command could not be started.
    """
    log = logger.bind(step=step.name)
    start_time = datetime.now(tz=UTC)

    list_result = executor.run(step.list_command, RunMode.CAPTURE)
    if not list_result.succeeded:
        log.warning("batch_list_failed", exit_status=list_result.exit_status)
        return StepResult(
            step_name=step.name,
            kind=step.kind,
            status=StepStatus.FAILED,
            results=[list_result],
            message=f"'{step.list_command}' exited with status {list_result.exit_status}",
            start_time=start_time,
            end_time=datetime.now(tz=UTC),
        )

    entries = step.parse_rule(list_result.captured_text or "")
    commands = plan_updates(entries, step.exclusions, step.update_template)
    log.info("batch_planned", found=len(entries), selected=len(commands))

    if not commands:
        return StepResult(
            step_name=step.name,
            kind=step.kind,
            status=StepStatus.SKIPPED,
            results=[list_result],
            message="Nothing to do",
            start_time=start_time,
            end_time=datetime.now(tz=UTC),
        )

    update_results = [_run_update(command, executor) for command in commands]
    failed = [result.command_line for result in update_results if not result.succeeded]
    if failed:
        log.warning("batch_updates_failed", failed=failed)

    return StepResult(
        step_name=step.name,
        kind=step.kind,
        status=StepStatus.FAILED if failed else StepStatus.SUCCESS,
        results=[list_result, *update_results],
        message=f"{len(failed)} of {len(commands)} updates failed" if failed else None,
        start_time=start_time,
        end_time=datetime.now(tz=UTC),
    )


def _run_update(command: Command, executor: CommandExecutor) -> ExecutionResult:
    try:
        return executor.run(command, RunMode.STREAM)
    except SpawnError as e:
        now = datetime.now(tz=UTC)
        return ExecutionResult(
            command_line=str(command),
            mode=RunMode.STREAM,
            exit_status=None,
            succeeded=False,
            error_message=str(e),
            start_time=now,
            end_time=now,
            duration_seconds=0.0,
        )
