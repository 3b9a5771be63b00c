"""Yay (AUR helper) plugin.

Official documentation:
- yay: https://github.com/Jguer/yay

Update mechanism:
- yay -Syu: Upgrades repository and AUR packages
- yay -Qtdq | yay -Rns: Removes orphaned dependencies, if any
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.parsers import parse_orphan_packages
from core.pipeline import ConditionalStep, DirectStep
from plugins.base import BasePlugin
from plugins.pacman import ARCH_DISTROS

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step


class YayPlugin(BasePlugin):
    """Plugin for the yay AUR helper.

    yay calls sudo itself when it needs to, so its commands run unprivileged.
    """

    supported_systems = ("linux",)
    supported_distros = ARCH_DISTROS

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "yay"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "yay"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "AUR packages via yay"

    def get_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the yay update steps."""
        return self._log_steps(
            [
                DirectStep(
                    name="yay-upgrade",
                    command=Command(
                        "yay",
                        ("--noconfirm", "-Syu"),
                        description="Upgrade repository and AUR packages",
                    ),
                ),
            ]
        )

    def get_cleanup_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the orphan removal chain."""
        return self._log_steps(
            [
                ConditionalStep(
                    name="yay-orphans",
                    first=Command(
                        "yay",
                        ("-Qtdq",),
                        description="List orphaned packages",
                        ignore_exit_codes=(1,),
                    ),
                    parse_rule=parse_orphan_packages,
                    second_template=Command(
                        "yay",
                        ("--noconfirm", "-Rns"),
                        description="Remove orphaned packages",
                    ),
                ),
            ]
        )
