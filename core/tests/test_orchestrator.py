"""Tests for the orchestrator module."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from core.models import Command, RunMode, StepStatus
from core.orchestrator import Orchestrator
from core.parsers import parse_installed_list, parse_orphan_packages
from core.pipeline import BatchStep, ConditionalStep, DirectStep


def direct(name: str, program: str, *args: str) -> DirectStep:
    return DirectStep(name=name, command=Command(program, args))


class TestOrchestrator:
    """Tests for Orchestrator class."""

    def test_run_all_empty_pipeline(self, make_executor: Callable[..., Any]) -> None:
        """Test running with no steps."""
        orchestrator = Orchestrator(make_executor())
        summary = orchestrator.run_all([])

        assert summary.total_steps == 0
        assert summary.exit_code == 0

    def test_run_all_direct_steps_in_order(self, make_executor: Callable[..., Any]) -> None:
        """Test that steps run one after another in pipeline order."""
        executor = make_executor()
        pipeline = [
            direct("one", "rustup", "update"),
            direct("two", "nvim", "--headless", "+Lazy! sync", "+qa"),
        ]

        summary = Orchestrator(executor).run_all(pipeline)

        assert [str(c) for c in executor.commands()] == [
            "rustup update",
            "nvim --headless +Lazy! sync +qa",
        ]
        assert summary.successful_steps == 2
        assert [r.step_name for r in summary.results] == ["one", "two"]

    def test_missing_program_does_not_stop_run(self, make_executor: Callable[..., Any]) -> None:
        """Test that a spawn failure is reported and the next step still runs."""
        executor = make_executor({"yay": {"missing": True}})
        pipeline = [
            direct("yay-upgrade", "yay", "--noconfirm", "-Syu"),
            direct("rustup-update", "rustup", "update"),
        ]

        summary = Orchestrator(executor).run_all(pipeline)

        assert summary.total_steps == 2
        assert summary.results[0].status == StepStatus.SPAWN_FAILED
        assert "yay" in (summary.results[0].message or "")
        assert summary.results[1].status == StepStatus.SUCCESS
        assert summary.spawn_failed_steps == 1
        assert summary.exit_code == 1

    def test_chain_follow_up_spawn_failure(self, make_executor: Callable[..., Any]) -> None:
        """Test that the orphan query result survives a missing removal program."""
        executor = make_executor({"pacman -Qtdq": {"stdout": "pkg\n"}, "sudo": {"missing": True}})
        pipeline = [
            ConditionalStep(
                name="pacman-orphans",
                first=Command("pacman", ("-Qtdq",), ignore_exit_codes=(1,)),
                parse_rule=parse_orphan_packages,
                second_template=Command("sudo", ("pacman", "--noconfirm", "-Rns")),
            ),
            direct("rustup-update", "rustup", "update"),
        ]

        summary = Orchestrator(executor).run_all(pipeline)

        assert summary.results[0].status == StepStatus.SPAWN_FAILED
        assert [r.command_line for r in summary.results[0].results] == ["pacman -Qtdq"]
        assert summary.results[1].status == StepStatus.SUCCESS
        assert summary.spawn_failed_steps == 1

    def test_failed_step_continues_by_default(self, make_executor: Callable[..., Any]) -> None:
        """Test that a non-zero exit does not stop the run by default."""
        executor = make_executor({"brew update": {"exit_status": 1}})
        pipeline = [
            direct("brew-update", "brew", "update"),
            direct("brew-upgrade", "brew", "upgrade"),
        ]

        summary = Orchestrator(executor).run_all(pipeline)

        assert summary.failed_steps == 1
        assert summary.successful_steps == 1
        assert summary.results[0].message == "Exited with status 1"

    def test_stop_on_error(self, make_executor: Callable[..., Any]) -> None:
        """Test that continue_on_error=False stops after the first failure."""
        executor = make_executor({"brew update": {"exit_status": 1}})
        pipeline = [
            direct("brew-update", "brew", "update"),
            direct("brew-upgrade", "brew", "upgrade"),
        ]

        summary = Orchestrator(executor, continue_on_error=False).run_all(pipeline)

        assert summary.total_steps == 1
        assert len(executor.calls) == 1

    def test_stop_on_spawn_failure(self, make_executor: Callable[..., Any]) -> None:
        """Test that a spawn failure also stops the run when asked to."""
        executor = make_executor({"yay": {"missing": True}})
        pipeline = [
            direct("yay-upgrade", "yay", "-Syu"),
            direct("rustup-update", "rustup", "update"),
        ]

        summary = Orchestrator(executor, continue_on_error=False).run_all(pipeline)

        assert summary.total_steps == 1

    def test_skipped_step_does_not_stop_run(self, make_executor: Callable[..., Any]) -> None:
        """Test that "nothing to do" is neither success nor failure."""
        executor = make_executor({"pacman -Qtdq": {"exit_status": 1}})
        pipeline = [
            ConditionalStep(
                name="pacman-orphans",
                first=Command("pacman", ("-Qtdq",), ignore_exit_codes=(1,)),
                parse_rule=parse_orphan_packages,
                second_template=Command("sudo", ("pacman", "--noconfirm", "-Rns")),
            ),
            direct("rustup-update", "rustup", "update"),
        ]

        summary = Orchestrator(executor, continue_on_error=False).run_all(pipeline)

        assert summary.skipped_steps == 1
        assert summary.successful_steps == 1
        assert summary.exit_code == 0

    def test_mixed_pipeline(self, make_executor: Callable[..., Any]) -> None:
        """Test a pipeline with every step kind."""
        executor = make_executor(
            {
                "yay -Qtdq": {"stdout": "orphan-a\n"},
                "cargo install --list": {"stdout": "ripgrep v14.1.0:\n    rg\n"},
            }
        )
        pipeline = [
            direct("yay-upgrade", "yay", "--noconfirm", "-Syu"),
            ConditionalStep(
                name="yay-orphans",
                first=Command("yay", ("-Qtdq",)),
                parse_rule=parse_orphan_packages,
                second_template=Command("yay", ("--noconfirm", "-Rns")),
            ),
            BatchStep(
                name="cargo-install",
                list_command=Command("cargo", ("install", "--list")),
                parse_rule=parse_installed_list,
                update_template=lambda name: Command("cargo", ("install", name)),
            ),
        ]

        summary = Orchestrator(executor).run_all(pipeline)

        assert summary.successful_steps == 3
        assert [str(c) for c in executor.commands(RunMode.STREAM)] == [
            "yay --noconfirm -Syu",
            "yay --noconfirm -Rns orphan-a",
            "cargo install ripgrep",
        ]
        assert [r.kind for r in summary.results] == ["direct", "conditional", "batch"]
