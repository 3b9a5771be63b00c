"""Orchestrator for sequential pipeline execution.

This module provides the orchestrator that runs pipeline steps one after
another, collecting results and producing a run summary.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from .batch import expand_batch
from .chain import run_conditional
from .executor import CommandExecutor, SpawnError
from .models import RunMode, RunSummary, StepResult, StepStatus
from .pipeline import BatchStep, ConditionalStep, DirectStep

if TYPE_CHECKING:
    from .pipeline import Pipeline, Step

logger = structlog.get_logger(__name__)


class Orchestrator:
    """Orchestrates sequential execution of pipeline steps.

    The orchestrator is responsible for:
    - Running steps in order, never two at once
    - Turning spawn failures into step results
    - Deciding whether to continue after a failed step
    - Generating the run summary
    """

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        continue_on_error: bool = True,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            executor: Executor used to run commands. A default one is created if omitted.
            continue_on_error: If True, continue with remaining steps after a failure.
        """
        self.executor = executor or CommandExecutor()
        self.continue_on_error = continue_on_error
        self._log = logger.bind(component="orchestrator")

    def run_all(self, pipeline: Pipeline) -> RunSummary:
        """Run all steps sequentially.

        Args:
            pipeline: Steps to execute, in order.

        Returns:
            RunSummary with results for every step that ran.
        """
        run_id = str(uuid.uuid4())[:8]
        start_time = datetime.now(tz=UTC)
        results: list[StepResult] = []

        self._log.info(
            "run_started",
            run_id=run_id,
            step_count=len(pipeline),
            dry_run=self.executor.dry_run,
        )

        for step in pipeline:
            result = self.run_step(step)
            results.append(result)

            if (
                result.status in (StepStatus.FAILED, StepStatus.SPAWN_FAILED)
                and not self.continue_on_error
            ):
                self._log.warning("run_aborted", run_id=run_id, failed_step=step.name)
                break

        end_time = datetime.now(tz=UTC)
        summary = self._create_summary(run_id, start_time, end_time, results)

        self._log.info(
            "run_completed",
            run_id=run_id,
            total_steps=summary.total_steps,
            successful=summary.successful_steps,
            failed=summary.failed_steps,
            skipped=summary.skipped_steps,
            spawn_failed=summary.spawn_failed_steps,
            duration_seconds=summary.total_duration_seconds,
        )

        return summary

    def run_step(self, step: Step) -> StepResult:
        """Run a single step.

        Args:
            step: The step to run.

        Returns:
            StepResult for the step. Spawn failures are reported as
            SPAWN_FAILED rather than raised.
        """
        log = self._log.bind(step=step.name, kind=step.kind)
        start_time = datetime.now(tz=UTC)
        log.info("step_started")

        try:
            if isinstance(step, ConditionalStep):
                result = run_conditional(step, self.executor)
            elif isinstance(step, BatchStep):
                result = expand_batch(step, self.executor)
            elif isinstance(step, DirectStep):
                result = self._run_direct(step, start_time)
            else:
                raise TypeError(f"Unknown step type: {type(step).__name__}")
        except SpawnError as e:
            log.error("step_spawn_failed", program=e.command.program, error=str(e))
            return StepResult(
                step_name=step.name,
                kind=step.kind,
                status=StepStatus.SPAWN_FAILED,
                message=str(e),
                start_time=start_time,
                end_time=datetime.now(tz=UTC),
            )

        log.info("step_completed", status=result.status.value)
        return result

    def _run_direct(self, step: DirectStep, start_time: datetime) -> StepResult:
        execution = self.executor.run(step.command, RunMode.STREAM)
        return StepResult(
            step_name=step.name,
            kind=step.kind,
            status=StepStatus.SUCCESS if execution.succeeded else StepStatus.FAILED,
            results=[execution],
            message=execution.error_message,
            start_time=start_time,
            end_time=datetime.now(tz=UTC),
        )

    def _create_summary(
        self,
        run_id: str,
        start_time: datetime,
        end_time: datetime,
        results: list[StepResult],
    ) -> RunSummary:
        """Create a run summary from step results.

        Args:
            run_id: Unique run identifier.
            start_time: Run start time.
            end_time: Run end time.
            results: List of step results.

        Returns:
            RunSummary for the run.
        """
        return RunSummary(
            run_id=run_id,
            start_time=start_time,
            end_time=end_time,
            total_duration_seconds=(end_time - start_time).total_seconds(),
            results=results,
            total_steps=len(results),
            successful_steps=sum(1 for r in results if r.status == StepStatus.SUCCESS),
            failed_steps=sum(1 for r in results if r.status == StepStatus.FAILED),
            skipped_steps=sum(1 for r in results if r.status == StepStatus.SKIPPED),
            spawn_failed_steps=sum(1 for r in results if r.status == StepStatus.SPAWN_FAILED),
        )
