"""Main CLI entry point for uptodate.

This module defines the Typer application and its commands. It detects the
platform, builds the pipeline from the built-in plugins, hands it to the
orchestrator and reports the outcome.

Environment Variables:
    UPTODATE_LOG_LEVEL, UPTODATE_DRY_RUN, UPTODATE_CARGO_EXCLUDE, UPTODATE_SKIP:
        See :mod:`core.config`.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Annotated

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from core.config import ConfigError, RunConfig, load_run_config
from core.executor import CommandExecutor
from core.models import LogLevel, StepStatus
from core.orchestrator import Orchestrator
from core.pipeline import describe_step

from . import __version__
from .detection import UnsupportedPlatformError, build_pipeline, detect_platform

if TYPE_CHECKING:
    from plugins import PluginRegistry

    from core.models import Command, RunSummary

# Create the main Typer app
app = typer.Typer(
    name="uptodate",
    help="Bring this machine up to date in one go.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Create console for rich output
console = Console()
err_console = Console(stderr=True)

BANNER_RULE = "=" * 24

STATUS_LABELS = {
    StepStatus.SUCCESS: "[green]✓ Success[/green]",
    StepStatus.FAILED: "[red]✗ Failed[/red]",
    StepStatus.SKIPPED: "[yellow]⊘ Nothing to do[/yellow]",
    StepStatus.SPAWN_FAILED: "[red]✗ Not started[/red]",
}


def configure_logging(log_level: LogLevel | str) -> None:
    """Configure structlog and standard logging with the specified level.

    Log lines go to standard error so they never mix into the output of the
    commands being run.

    Args:
        log_level: Log level (debug, info, warning, error).
    """
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }
    name = log_level.value if isinstance(log_level, LogLevel) else log_level
    level = level_map.get(name.lower(), logging.WARNING)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        stream=sys.stderr,
        force=True,
    )

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]uptodate[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """uptodate: update everything on this machine in one go.

    Runs the system package manager (apt, pacman/yay or brew), rustup,
    lazy.nvim and cargo, one command at a time.
    """


def _get_registry() -> PluginRegistry:
    """Get the plugin registry with built-in plugins registered."""
    from plugins import PluginRegistry, register_builtin_plugins

    registry = PluginRegistry()
    register_builtin_plugins(registry)
    return registry


def _load_config(**overrides: object) -> RunConfig:
    try:
        return load_run_config(**overrides)
    except ConfigError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def print_banner(command: Command) -> None:
    """Print the separator shown before every streamed command."""
    console.print()
    console.print(BANNER_RULE)
    console.print(f"[bold]$ {escape(str(command))}[/bold]")
    console.print(BANNER_RULE)


@app.command()
def run(
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show the commands that would run. Read-only queries still run.",
        ),
    ] = False,
    continue_on_error: Annotated[
        bool,
        typer.Option(
            "--continue-on-error/--stop-on-error",
            "-c/-x",
            help="Continue with remaining steps after a failure (default: continue).",
        ),
    ] = True,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-e",
            help="Crate never to update with cargo. Can be specified multiple times.",
        ),
    ] = None,
    skip: Annotated[
        list[str] | None,
        typer.Option(
            "--skip",
            "-s",
            help="Plugin to leave out. Can be specified multiple times.",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            help="Log level: debug, info, warning or error (default: warning).",
        ),
    ] = None,
) -> None:
    """Run every update step for this platform.

    Steps run one at a time. A failed step is reported and, unless
    --stop-on-error is given, the remaining steps still run.
    """
    config = _load_config(
        dry_run=dry_run or None,
        continue_on_error=continue_on_error,
        log_level=log_level,
    )
    config = config.model_copy(
        update={
            "cargo_exclusions": config.cargo_exclusions | frozenset(exclude or ()),
            "skip_plugins": config.skip_plugins | frozenset(skip or ()),
        }
    )
    configure_logging(config.log_level)

    log = structlog.get_logger(__name__)
    log.debug(
        "config_loaded",
        dry_run=config.dry_run,
        continue_on_error=config.continue_on_error,
        cargo_exclusions=sorted(config.cargo_exclusions),
        skip_plugins=sorted(config.skip_plugins),
    )

    try:
        pipeline = build_pipeline(detect_platform(), config, _get_registry())
    except UnsupportedPlatformError as e:
        err_console.print(f"[red]ERROR:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if not pipeline:
        console.print("[yellow]No steps to run[/yellow]")
        return

    if config.dry_run:
        console.print("[yellow]Dry run mode - no changes will be made[/yellow]")

    executor = CommandExecutor(dry_run=config.dry_run, on_start=print_banner)
    orchestrator = Orchestrator(executor, continue_on_error=config.continue_on_error)
    summary = orchestrator.run_all(pipeline)

    console.print()
    _print_summary(summary)

    if summary.exit_code:
        raise typer.Exit(code=summary.exit_code)


def _print_summary(summary: RunSummary) -> None:
    """Print execution summary."""
    table = Table(title="Update Summary", show_header=True)
    table.add_column("Step", style="cyan")
    table.add_column("Status", style="bold")
    table.add_column("Commands", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Details")

    for result in summary.results:
        duration = result.duration_seconds
        table.add_row(
            result.step_name,
            STATUS_LABELS.get(result.status, result.status.value),
            str(len(result.results)),
            f"{duration:.1f}s" if duration is not None else "",
            escape(result.message or ""),
        )

    console.print(table)

    console.print()
    console.print(f"[bold]Total:[/bold] {summary.total_steps} steps")
    console.print(f"  [green]Successful:[/green] {summary.successful_steps}")
    console.print(f"  [yellow]Nothing to do:[/yellow] {summary.skipped_steps}")
    console.print(f"  [red]Failed:[/red] {summary.failed_steps}")
    console.print(f"  [red]Not started:[/red] {summary.spawn_failed_steps}")
    if summary.total_duration_seconds:
        console.print(f"  [dim]Duration:[/dim] {summary.total_duration_seconds:.1f}s")


@app.command()
def steps() -> None:
    """Show the steps that `run` would execute on this machine."""
    config = _load_config()
    configure_logging(config.log_level)

    try:
        platform_info = detect_platform()
        pipeline = build_pipeline(platform_info, config, _get_registry())
    except UnsupportedPlatformError as e:
        err_console.print(f"[red]ERROR:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    distro = f" ({platform_info.distro_id})" if platform_info.distro_id else ""
    table = Table(title=f"Pipeline for {platform_info.system}{distro}", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Step", style="cyan")
    table.add_column("Kind")
    table.add_column("Runs")

    for index, step in enumerate(pipeline, start=1):
        table.add_row(str(index), step.name, step.kind, escape(describe_step(step)))

    console.print(table)


@app.command()
def plugins() -> None:
    """List plugins, whether they apply to this platform and whether their tool is installed."""
    configure_logging(LogLevel.WARNING)
    platform_info = detect_platform()

    table = Table(title="Plugin Status", show_header=True)
    table.add_column("Plugin", style="cyan")
    table.add_column("Description")
    table.add_column("Platform", justify="center")
    table.add_column("Available", justify="center")

    for plugin in _get_registry().get_all():
        applies = "[green]✓[/green]" if plugin.applies_to(platform_info) else "[dim]-[/dim]"
        available = "[green]✓[/green]" if plugin.check_available() else "[red]✗[/red]"
        description = getattr(plugin, "description", plugin.name)
        table.add_row(plugin.name, description, applies, available)

    console.print(table)


if __name__ == "__main__":
    app()
