"""Rustup (Rust toolchain) manager plugin.

This plugin updates Rust toolchains using rustup.

Official documentation:
- Rustup: https://rust-lang.github.io/rustup/

Update mechanism:
- rustup update - Updates all installed toolchains and rustup itself
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.models import Command
from core.pipeline import DirectStep
from plugins.base import BasePlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.pipeline import Step


class RustupPlugin(BasePlugin):
    """Plugin for Rustup toolchain manager (Rust).

    Executes:
    1. rustup update - update all installed toolchains
    """

    @property
    def name(self) -> str:
        """Return the plugin name."""
        return "rustup"

    @property
    def command(self) -> str:
        """Return the main command."""
        return "rustup"

    @property
    def description(self) -> str:
        """Return plugin description."""
        return "Rust toolchain manager"

    def get_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Get the rustup update step."""
        return self._log_steps(
            [
                DirectStep(
                    name="rustup-update",
                    command=Command("rustup", ("update",), description="Update Rust toolchains"),
                )
            ]
        )
