"""APT package manager plugin.

This plugin updates system packages using apt-get on Ubuntu and Pop!_OS.

Official documentation:
- APT: https://wiki.debian.org/Apt
- apt-get man page: https://manpages.debian.org/bookworm/apt/apt-get.8.en.html

Update mechanism:
- apt-get update: Refreshes package lists from repositories
- apt-get upgrade -y --allow-downgrades --with-new-pkgs: Installs upgrades,
  including ones that pull in new dependencies
- apt-get autoremove -y: Removes packages that are no longer needed

Note: Requires sudo privileges for all operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.pipeline import DirectStep
from plugins.base import BasePlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step


class AptPlugin(BasePlugin):
    """Plugin for APT package manager (Ubuntu/Pop!_OS).

    Executes:
    1. sudo apt-get update
    2. sudo apt-get upgrade -y --allow-downgrades --with-new-pkgs
    3. sudo apt-get autoremove -y
    """

    supported_systems = ("linux",)
    supported_distros = ("ubuntu", "pop")

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "apt"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "apt-get"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "Ubuntu/Pop!_OS APT package manager"

    def get_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the APT update steps."""
        return self._log_steps(
            [
                DirectStep(
                    name="apt-update",
                    command=Command(
                        "sudo",
                        ("apt-get", "update"),
                        description="Refresh package lists",
                    ),
                ),
                DirectStep(
                    name="apt-upgrade",
                    command=Command(
                        "sudo",
                        ("apt-get", "upgrade", "-y", "--allow-downgrades", "--with-new-pkgs"),
                        description="Upgrade installed packages",
                    ),
                ),
                DirectStep(
                    name="apt-autoremove",
                    command=Command(
                        "sudo",
                        ("apt-get", "autoremove", "-y"),
                        description="Remove packages that are no longer needed",
                    ),
                ),
            ]
        )
