"""uptodate core library.

Core library providing the command model, execution engine, output parsers
and pipeline runner used by the uptodate CLI and plugins.

Module Overview:
    batch: Expansion of "list installed" output into per-package updates
    chain: Conditional chains (query, parse, follow-up command)
    config: Run configuration from defaults, environment and CLI overrides
    executor: Blocking stream/capture execution of single commands
    models: Command descriptor, results and parsed entries
    orchestrator: Sequential pipeline execution
    parsers: Pure parsers for package manager output
    pipeline: Step definitions (direct, conditional, batch)
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version

from core.batch import expand_batch, plan_updates, select_entries
from core.chain import run_conditional
from core.config import (
    DEFAULT_CARGO_EXCLUSIONS,
    ConfigError,
    RunConfig,
    config_from_env,
    load_run_config,
)
from core.executor import CommandExecutor, SpawnError
from core.models import (
    Command,
    ExecutionResult,
    LogLevel,
    PackageOrigin,
    ParsedEntry,
    RunMode,
    RunSummary,
    StepResult,
    StepStatus,
)
from core.orchestrator import Orchestrator
from core.parsers import classify_origin, parse_installed_list, parse_orphan_packages
from core.pipeline import BatchStep, ConditionalStep, DirectStep, Pipeline, Step, describe_step

try:
    __version__ = get_package_version("uptodate")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "DEFAULT_CARGO_EXCLUSIONS",
    "BatchStep",
    "Command",
    "CommandExecutor",
    "ConditionalStep",
    "ConfigError",
    "DirectStep",
    "ExecutionResult",
    "LogLevel",
    "Orchestrator",
    "PackageOrigin",
    "ParsedEntry",
    "Pipeline",
    "RunConfig",
    "RunMode",
    "RunSummary",
    "SpawnError",
    "Step",
    "StepResult",
    "StepStatus",
    "classify_origin",
    "config_from_env",
    "describe_step",
    "expand_batch",
    "load_run_config",
    "parse_installed_list",
    "parse_orphan_packages",
    "plan_updates",
    "run_conditional",
    "select_entries",
]
