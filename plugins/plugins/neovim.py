"""Neovim plugin manager (lazy.nvim) plugin.

Official documentation:
- lazy.nvim: https://lazy.folke.io/usage

Update mechanism:
- nvim --headless "+Lazy! sync" +qa: Installs, cleans and updates plugins
  without opening the UI. The bang makes the sync run synchronously so
  nvim only quits once it is done.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.pipeline import DirectStep
from plugins.base import BasePlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step


class NeovimPlugin(BasePlugin):
    """Plugin for Neovim plugins managed by lazy.nvim."""

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "neovim"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "nvim"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "Neovim plugins (lazy.nvim)"

    def get_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the lazy.nvim sync step."""
        return self._log_steps(
            [
                DirectStep(
                    name="neovim-sync",
                    command=Command(
                        "nvim",
                        ("--headless", "+Lazy! sync", "+qa"),
                        description="Sync Neovim plugins",
                    ),
                )
            ]
        )
