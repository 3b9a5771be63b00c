"""Conditional command chains.

A chain captures the output of a query command, parses it, and runs a
follow-up command with the parsed items appended. Orphan removal is the
typical use: ``pacman -Qtdq`` lists orphans, ``pacman -Rns`` removes them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from .executor import SpawnError
from .models import RunMode, StepResult, StepStatus

if TYPE_CHECKING:
    from .executor import CommandExecutor
    from .pipeline import ConditionalStep

logger = structlog.get_logger(__name__)


def run_conditional(step: ConditionalStep, executor: CommandExecutor) -> StepResult:
    """Run a conditional chain.

    The follow-up command only runs when the query succeeded and its output
    parsed to at least one item. A failed query never leads to the
    follow-up: cleanup must not act on an unknown state.

    Args:
        step: The chain to run.
        executor: Executor used for both commands.

    Returns:
        StepResult that is FAILED if the query failed, SKIPPED if there was
        nothing to do, SPAWN_FAILED if the follow-up could not be started,
        and otherwise reflects the follow-up command.

    Raises:
        SpawnError: If the query command could not be started.
    """
    log = logger.bind(step=step.name)
    start_time = datetime.now(tz=UTC)

    first_result = executor.run(step.first, RunMode.CAPTURE)
    if not first_result.succeeded:
        log.warning("chain_query_failed", exit_status=first_result.exit_status)
        return StepResult(
            step_name=step.name,
            kind=step.kind,
            status=StepStatus.FAILED,
            results=[first_result],
            message=f"'{step.first}' exited with status {first_result.exit_status}",
            start_time=start_time,
            end_time=datetime.now(tz=UTC),
        )

    items = step.parse_rule(first_result.captured_text or "")
    if not items:
        log.info("chain_nothing_to_do")
        return StepResult(
            step_name=step.name,
            kind=step.kind,
            status=StepStatus.SKIPPED,
            results=[first_result],
            message="Nothing to do",
            start_time=start_time,
            end_time=datetime.now(tz=UTC),
        )

    log.info("chain_items_found", count=len(items))
    second = step.second_template.with_args(*items)
    try:
        second_result = executor.run(second, RunMode.STREAM)
    except SpawnError as e:
        log.error("chain_spawn_failed", program=second.program, error=str(e))
        return StepResult(
            step_name=step.name,
            kind=step.kind,
            status=StepStatus.SPAWN_FAILED,
            results=[first_result],
            message=str(e),
            start_time=start_time,
            end_time=datetime.now(tz=UTC),
        )

    return StepResult(
        step_name=step.name,
        kind=step.kind,
        status=StepStatus.SUCCESS if second_result.succeeded else StepStatus.FAILED,
        results=[first_result, second_result],
        message=second_result.error_message,
        start_time=start_time,
        end_time=datetime.now(tz=UTC),
    )
