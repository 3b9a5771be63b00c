"""Shared test fixtures for CLI tests."""

from __future__ import annotations

import os
import subprocess
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
import structlog

from core.models import PlatformInfo

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from UPTODATE_* variables set in the caller's shell.

    This fixture is applied automatically to all tests in this module.
    """
    for name in list(os.environ):
        if name.startswith("UPTODATE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def platform_as() -> Generator[Callable[..., None], None, None]:
    """Make the CLI believe it runs on the given platform."""
    with patch("cli.main.detect_platform") as detect:

        def set_platform(system: str, distro_id: str | None = None) -> None:
            detect.return_value = PlatformInfo(system, distro_id)

        yield set_platform


@pytest.fixture
def mock_subprocess() -> Generator[MagicMock, None, None]:
    """Replace subprocess.run so no real command is started.

    Captured runs report a single installed crate; every run exits 0.
    """

    def fake_run(argv: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        stdout = b"ripgrep v14.1.0:\n    rg\n" if kwargs.get("stdout") is not None else None
        return subprocess.CompletedProcess(argv, 0, stdout=stdout, stderr=b"")

    with patch("subprocess.run", side_effect=fake_run) as run:
        yield run


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep tables on one line and restore logging after each test."""
    from cli.main import console, err_console

    monkeypatch.setattr(console, "width", 200)
    monkeypatch.setattr(err_console, "width", 200)
    yield
    structlog.reset_defaults()
