"""Cargo (Rust) package manager plugin.

This plugin reinstalls every crate installed with ``cargo install`` so each
one is rebuilt at its latest published version.

Official documentation:
- cargo install: https://doc.rust-lang.org/cargo/commands/cargo-install.html

Update mechanism:
- cargo install --list: Lists installed crates and the binaries they provide
- cargo install <crate>: Installs the newest version, once per crate

Crates installed from a local path are never reinstalled, and neither are
crates named in the configured exclusions (``UPTODATE_CARGO_EXCLUDE``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.parsers import parse_installed_list
from core.pipeline import BatchStep
from plugins.base import BasePlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step


def cargo_install(crate: str) -> Command:
    """Build the command that installs the latest version of a crate."""
    return Command("cargo", ("install", crate), description=f"Update {crate}")


class CargoPlugin(BasePlugin):
    """Plugin for Cargo package manager (Rust).

    Executes:
    1. cargo install --list - find installed crates
    2. cargo install <crate> - once per registry crate not excluded
    """

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "cargo"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "cargo"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "Rust crates installed with cargo install"

    def get_steps(self, config: RunConfig) -> list[Step]:
        """Get the cargo batch update step.

        Args:
            config: Run configuration providing the crate exclusions.

        Returns:
            A single batch step.
        """
        return self._log_steps(
            [
                BatchStep(
                    name="cargo-install",
                    list_command=Command(
                        "cargo", ("install", "--list"), description="List installed crates"
                    ),
                    parse_rule=parse_installed_list,
                    update_template=cargo_install,
                    exclusions=frozenset(config.cargo_exclusions),
                )
            ]
        )
