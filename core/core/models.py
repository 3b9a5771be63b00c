"""Core data models for uptodate.

This module defines the command descriptor handed to the executor, the
Pydantic models describing execution results, and the entries produced by
the output parsers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003 - needed at runtime by Pydantic
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class RunMode(str, Enum):
    """How a command's output is handled."""

    STREAM = "stream"
    CAPTURE = "capture"


class StepStatus(str, Enum):
    """Outcome of a single pipeline step."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    SPAWN_FAILED = "spawn_failed"


class LogLevel(str, Enum):
    """Log level for structlog output."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class PackageOrigin(str, Enum):
    """Where an installed package came from."""

    REGISTRY = "registry"
    LOCAL_PATH = "local_path"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Command:
    """A program name plus its ordered argument list.

    Commands are immutable: appending arguments produces a new command,
    which is how conditional chains and batch expansions derive the
    commands they run.

    Attributes:
        program: Executable name, resolved through the search path.
        args: Arguments passed to the program, in order.
        description: Human-readable description of what the command does.
        ignore_exit_codes: Exit codes that should not be treated as errors.

    Example:
        >>> remove = Command("pacman", ("--noconfirm", "-Rns"))
        >>> str(remove.with_args("pkg-a", "pkg-b"))
        'pacman --noconfirm -Rns pkg-a pkg-b'
    """

    program: str
    args: tuple[str, ...] = ()
    description: str = field(default="", compare=False)
    ignore_exit_codes: tuple[int, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        """Validate the command after initialization."""
        if not self.program:
            raise ValueError("program must be non-empty")
        # Accept lists from callers but store an immutable tuple
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "ignore_exit_codes", tuple(self.ignore_exit_codes))

    @property
    def argv(self) -> list[str]:
        """Full argument vector including the program name."""
        return [self.program, *self.args]

    def with_args(self, *extra: str) -> Command:
        """Return a copy of this command with ``extra`` appended to its args."""
        return Command(
            program=self.program,
            args=(*self.args, *extra),
            description=self.description,
            ignore_exit_codes=self.ignore_exit_codes,
        )

    def is_success(self, exit_status: int) -> bool:
        """Check whether an exit status counts as success for this command."""
        return exit_status == 0 or exit_status in self.ignore_exit_codes

    def __str__(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class ParsedEntry:
    """One installed package parsed from a "list installed" report.

    Attributes:
        name: Package name, the first token of the line.
        version: Version token, if the line carried one.
        origin: Where the package was installed from.
    """

    name: str
    version: str | None = None
    origin: PackageOrigin = PackageOrigin.UNKNOWN


@dataclass(frozen=True)
class PlatformInfo:
    """The operating system uptodate is running on.

    Attributes:
        system: Lower-cased ``platform.system()`` value ("linux", "darwin", ...).
        distro_id: The ``ID`` field of ``/etc/os-release`` on Linux, else None.
    """

    system: str
    distro_id: str | None = None


class ExecutionResult(BaseModel):
    """Result of running one command."""

    command_line: str = Field(..., description="Command as it was run")
    mode: RunMode = Field(..., description="Stream or capture mode")
    exit_status: int | None = Field(
        default=None, description="Process exit code (None if the process never started)"
    )
    succeeded: bool = Field(default=False, description="Whether the exit status counts as success")
    captured_text: str | None = Field(default=None, description="Captured standard output")
    stderr_text: str | None = Field(default=None, description="Captured standard error")
    error_message: str | None = Field(default=None, description="Error message if failed")
    dry_run: bool = Field(default=False, description="Whether the command was only announced")
    start_time: datetime = Field(..., description="Execution start time")
    end_time: datetime | None = Field(default=None, description="Execution end time")
    duration_seconds: float | None = Field(default=None, description="Execution duration")

    @model_validator(mode="after")
    def _stream_results_have_no_capture(self) -> ExecutionResult:
        if self.mode == RunMode.STREAM and (
            self.captured_text is not None or self.stderr_text is not None
        ):
            raise ValueError("streamed results cannot carry captured output")
        return self

    @property
    def spawn_failed(self) -> bool:
        """Whether the process could not be started at all."""
        return self.exit_status is None and not self.dry_run


class StepResult(BaseModel):
    """Result of one pipeline step, with every command it ran."""

    step_name: str = Field(..., description="Name of the step")
    kind: str = Field(..., description="Step kind: direct, conditional or batch")
    status: StepStatus = Field(..., description="Step outcome")
    results: list[ExecutionResult] = Field(
        default_factory=list, description="Results of the commands run, in order"
    )
    message: str | None = Field(default=None, description="Why the step failed or was skipped")
    start_time: datetime = Field(..., description="Step start time")
    end_time: datetime | None = Field(default=None, description="Step end time")

    @property
    def duration_seconds(self) -> float | None:
        """Step duration in seconds."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()


class RunSummary(BaseModel):
    """Summary of a complete pipeline run."""

    run_id: str = Field(..., description="Unique run identifier")
    start_time: datetime = Field(..., description="Run start time")
    end_time: datetime | None = Field(default=None, description="Run end time")
    total_duration_seconds: float | None = Field(default=None, description="Total duration")
    results: list[StepResult] = Field(default_factory=list)
    total_steps: int = Field(default=0, description="Total number of steps run")
    successful_steps: int = Field(default=0, description="Number of successful steps")
    failed_steps: int = Field(default=0, description="Number of failed steps")
    skipped_steps: int = Field(default=0, description="Number of steps with nothing to do")
    spawn_failed_steps: int = Field(default=0, description="Number of steps that could not start")

    @property
    def exit_code(self) -> int:
        """Process exit code for the whole run."""
        return 1 if self.failed_steps or self.spawn_failed_steps else 0
