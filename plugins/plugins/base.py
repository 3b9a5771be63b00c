"""Base plugin implementation with common functionality."""

from __future__ import annotations

import shutil
from abc import abstractmethod
from typing import TYPE_CHECKING

import structlog

from core.interfaces import StepPlugin

if TYPE_CHECKING:
    from core.config import RunConfig
    from core.models import PlatformInfo
    from core.pipeline import Step

logger = structlog.get_logger(__name__)


class BasePlugin(StepPlugin):
    """Base class for all step plugins with common functionality.

    Provides:
    - Availability checking through the search path
    - Platform matching from ``supported_systems`` and ``supported_distros``
    """

    #: Lower-cased ``platform.system()`` values the plugin runs on. Empty means all.
    supported_systems: tuple[str, ...] = ()

    #: os-release ``ID`` values the plugin runs on. Empty means any distro.
    supported_distros: tuple[str, ...] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the plugin name."""
        ...

    @property
    @abstractmethod
    def command(self) -> str:
        """Return the main command this plugin uses (e.g., 'apt-get', 'cargo')."""
        ...

    @property
    def description(self) -> str:
        """Return a human-readable description of the plugin."""
        return f"Update steps for {self.name}"

    @property
    def cross_platform(self) -> bool:
        """Whether the plugin runs on every platform."""
        return not self.supported_systems and not self.supported_distros

    def check_available(self) -> bool:
        """Check if the plugin's command is available on the system."""
        return shutil.which(self.command) is not None

    def applies_to(self, platform_info: PlatformInfo) -> bool:
        """Check if the plugin belongs in the pipeline for a platform."""
        if self.supported_systems and platform_info.system not in self.supported_systems:
            return False
        if self.supported_distros and platform_info.distro_id not in self.supported_distros:
            return False
        return True

    @abstractmethod
    def get_steps(self, config: RunConfig) -> list[Step]:
        """Return the steps this plugin contributes, in execution order."""
        ...

    def _log_steps(self, steps: list[Step]) -> list[Step]:
        logger.debug("plugin_steps", plugin=self.name, steps=[step.name for step in steps])
        return steps
