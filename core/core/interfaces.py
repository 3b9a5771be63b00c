"""Core interfaces for uptodate.

This module defines the abstract base class for step plugins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import RunConfig
    from .models import PlatformInfo
    from .pipeline import Step


class StepPlugin(ABC):
    """Abstract base class for step plugins.

    A plugin contributes the pipeline steps for one tool (a package manager,
    a toolchain, an editor). Plugins can be instantiated without
    configuration for metadata access.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the plugin name.

        Returns:
            Unique plugin identifier
        """
        ...

    @abstractmethod
    def check_available(self) -> bool:
        """Check if the plugin's tool is installed.

        Returns:
            True if the tool is on the search path, False otherwise
        """
        ...

    @abstractmethod
    def applies_to(self, platform_info: PlatformInfo) -> bool:
        """Check if the plugin belongs in the pipeline for a platform.

        Args:
            platform_info: The detected platform.

        Returns:
            True if the plugin's steps should run on this platform
        """
        ...

    @abstractmethod
    def get_steps(self, config: RunConfig) -> list[Step]:
        """Return the steps this plugin contributes, in execution order.

        Args:
            config: Configuration for the current run.

        Returns:
            Pipeline steps
        """
        ...

    def get_cleanup_steps(self, config: RunConfig) -> list[Step]:  # noqa: ARG002
        """Return steps that run after every system package manager has upgraded.

        Orphan removal belongs here: on systems with more than one package
        manager, an upgrade by a later one can orphan packages of an earlier
        one.

        Args:
            config: Configuration for the current run.

        Returns:
            Pipeline steps, empty by default
        """
        return []
