"""Tests for batch expansion."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from core.batch import expand_batch, plan_updates, select_entries
from core.executor import SpawnError
from core.models import Command, PackageOrigin, ParsedEntry, RunMode, StepStatus
from core.parsers import parse_installed_list
from core.pipeline import BatchStep

LIST = Command("cargo", ("install", "--list"))


def cargo_install(name: str) -> Command:
    return Command("cargo", ("install", name))


def make_step(exclusions: frozenset[str] = frozenset()) -> BatchStep:
    return BatchStep(
        name="cargo-install",
        list_command=LIST,
        parse_rule=parse_installed_list,
        update_template=cargo_install,
        exclusions=exclusions,
    )


ENTRIES = [
    ParsedEntry("ripgrep", "14.1.0", PackageOrigin.REGISTRY),
    ParsedEntry("tm", "1.2.0", PackageOrigin.LOCAL_PATH),
    ParsedEntry("project", "0.1.0", PackageOrigin.REGISTRY),
    ParsedEntry("helix-term", "25.1.0", PackageOrigin.UNKNOWN),
    ParsedEntry("devtool", "0.0.1", PackageOrigin.LOCAL_PATH),
]


class TestSelectEntries:
    """Tests for select_entries."""

    def test_drops_excluded_and_local(self) -> None:
        """Test both filters and that order is kept."""
        selected = select_entries(ENTRIES, {"project"})

        assert [e.name for e in selected] == ["ripgrep", "helix-term"]

    def test_local_path_dropped_regardless_of_exclusions(self) -> None:
        """Test that local installs are never selected."""
        selected = select_entries(ENTRIES, set())

        assert all(e.origin != PackageOrigin.LOCAL_PATH for e in selected)

    @pytest.mark.parametrize(
        "exclusions",
        [set(), {"ripgrep"}, {"tm", "project"}, {e.name for e in ENTRIES}, {"unrelated"}],
    )
    def test_excluded_names_never_selected(self, exclusions: set[str]) -> None:
        """Test that no selected name is in the exclusion set."""
        for entry in select_entries(ENTRIES, exclusions):
            assert entry.name not in exclusions


class TestPlanUpdates:
    """Tests for plan_updates."""

    def test_builds_one_command_per_entry(self) -> None:
        """Test that the template is applied to each selected name."""
        commands = plan_updates(ENTRIES, {"project"}, cargo_install)

        assert commands == [cargo_install("ripgrep"), cargo_install("helix-term")]


class TestExpandBatch:
    """Tests for expand_batch."""

    def test_excluded_local_entry_gets_no_update(self, make_executor: Callable[..., Any]) -> None:
        """Test a path-installed crate that is also excluded by name."""
        executor = make_executor(
            {"cargo install --list": {"stdout": "tm 1.2.0 (path+file:///home/user/tm)\n"}}
        )

        result = expand_batch(make_step(frozenset({"tm"})), executor)

        assert result.status == StepStatus.SKIPPED
        assert executor.commands(RunMode.STREAM) == []

    def test_registry_entry_gets_one_update(self, make_executor: Callable[..., Any]) -> None:
        """Test a registry crate with no exclusions."""
        executor = make_executor(
            {"cargo install --list": {"stdout": "ripgrep 14.1.0 (registry+https://crates.io)\n"}}
        )

        result = expand_batch(make_step(), executor)

        assert result.status == StepStatus.SUCCESS
        assert executor.commands(RunMode.STREAM) == [cargo_install("ripgrep")]

    def test_updates_run_in_list_order(self, make_executor: Callable[..., Any]) -> None:
        """Test that updates follow the order of the list output."""
        executor = make_executor(
            {"cargo install --list": {"stdout": "bat v0.24.0:\n    bat\nripgrep v14.1.0:\n"}}
        )

        expand_batch(make_step(), executor)

        assert executor.calls == [
            (LIST, RunMode.CAPTURE),
            (cargo_install("bat"), RunMode.STREAM),
            (cargo_install("ripgrep"), RunMode.STREAM),
        ]

    def test_failure_does_not_stop_other_updates(self, make_executor: Callable[..., Any]) -> None:
        """Test that every selected entry is attempted."""
        executor = make_executor(
            {
                "cargo install --list": {"stdout": "a v1:\nb v1:\nc v1:\n"},
                "cargo install a": {"exit_status": 101},
            }
        )

        result = expand_batch(make_step(), executor)

        assert result.status == StepStatus.FAILED
        assert [str(c) for c in executor.commands(RunMode.STREAM)] == [
            "cargo install a",
            "cargo install b",
            "cargo install c",
        ]
        assert result.message == "1 of 3 updates failed"
        assert len(result.results) == 4

    def test_spawn_failure_of_one_update_is_recorded(
        self, make_executor: Callable[..., Any]
    ) -> None:
        """Test that a spawn failure mid-batch is recorded and the batch goes on."""
        executor = make_executor(
            {
                "cargo install --list": {"stdout": "a v1:\nb v1:\n"},
                "cargo install a": {"missing": True},
            }
        )

        result = expand_batch(make_step(), executor)

        assert result.status == StepStatus.FAILED
        assert result.results[1].spawn_failed is True
        assert result.results[2].succeeded is True

    def test_failed_list_command_expands_nothing(self, make_executor: Callable[..., Any]) -> None:
        """Test that a failing list command produces no updates."""
        executor = make_executor(
            {"cargo install --list": {"exit_status": 101, "stdout": "ripgrep v14.1.0:\n"}}
        )

        result = expand_batch(make_step(), executor)

        assert result.status == StepStatus.FAILED
        assert executor.commands(RunMode.STREAM) == []

    def test_missing_list_program_raises(self, make_executor: Callable[..., Any]) -> None:
        """Test that a spawn failure of the list command propagates."""
        executor = make_executor({"cargo": {"missing": True}})

        with pytest.raises(SpawnError):
            expand_batch(make_step(), executor)
