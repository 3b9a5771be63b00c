"""Pacman package manager plugin.

This plugin updates system packages on Arch Linux and EndeavourOS.

Official documentation:
- pacman: https://wiki.archlinux.org/title/Pacman
- Removing orphans: https://wiki.archlinux.org/title/Pacman/Tips_and_tricks

Update mechanism:
- pacman -S archlinux-keyring: Refreshes signing keys first so the upgrade
  does not fail on packages signed by new keys
- pacman -Syu: Full system upgrade
- pacman -Qtdq | pacman -Rns: Removes orphaned dependencies, if any

Note: ``pacman -Qtdq`` exits with status 1 when there are no orphans.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.parsers import parse_orphan_packages
from core.pipeline import ConditionalStep, DirectStep
from plugins.base import BasePlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step

ARCH_DISTROS = ("arch", "endeavouros")


class PacmanPlugin(BasePlugin):
    """Plugin for pacman (Arch Linux/EndeavourOS).

    Executes:
    1. sudo pacman --noconfirm -S archlinux-keyring
    2. sudo pacman --noconfirm -Syu
    3. pacman -Qtdq, then sudo pacman --noconfirm -Rns <orphans> if any,
       once yay has upgraded too (cleanup step)
    """

    supported_systems = ("linux",)
    supported_distros = ARCH_DISTROS

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "pacman"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "pacman"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "Arch Linux pacman package manager"

    def get_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the pacman update steps."""
        return self._log_steps(
            [
                DirectStep(
                    name="pacman-keyring",
                    command=Command(
                        "sudo",
                        ("pacman", "--noconfirm", "-S", "archlinux-keyring"),
                        description="Refresh the Arch Linux keyring",
                    ),
                ),
                DirectStep(
                    name="pacman-upgrade",
                    command=Command(
                        "sudo",
                        ("pacman", "--noconfirm", "-Syu"),
                        description="Upgrade all packages",
                    ),
                ),
            ]
        )

    def get_cleanup_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the orphan removal chain."""
        return self._log_steps(
            [
                ConditionalStep(
                    name="pacman-orphans",
                    first=Command(
                        "pacman",
                        ("-Qtdq",),
                        description="List orphaned packages",
                        ignore_exit_codes=(1,),
                    ),
                    parse_rule=parse_orphan_packages,
                    second_template=Command(
                        "sudo",
                        ("pacman", "--noconfirm", "-Rns"),
                        description="Remove orphaned packages",
                    ),
                ),
            ]
        )
