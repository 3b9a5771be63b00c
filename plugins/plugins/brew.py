"""Homebrew plugin.

Official documentation:
- Homebrew: https://docs.brew.sh/

Update mechanism:
- brew update: Fetches the newest Homebrew and formula definitions
- brew upgrade: Upgrades outdated formulae and casks
- brew cleanup: Removes stale lock files, old versions and downloads
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.pipeline import DirectStep
from plugins.base import BasePlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step


class BrewPlugin(BasePlugin):
    """Plugin for Homebrew (macOS)."""

    supported_systems = ("darwin",)

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "brew"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "brew"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "macOS Homebrew package manager"

    def get_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the Homebrew update steps."""
        return self._log_steps(
            [
                DirectStep(name=f"brew-{action}", command=Command("brew", (action,)))
                for action in ("update", "upgrade", "cleanup")
            ]
        )
