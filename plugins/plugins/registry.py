"""Plugin registry for looking up step plugins."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from core.interfaces import StepPlugin
    from core.models import PlatformInfo

logger = structlog.get_logger(__name__)


class PluginRegistry:
    """Registry of step plugins.

    Plugins are kept in registration order, which is the order their steps
    run in. Registering a name twice replaces the earlier plugin in place.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, type[StepPlugin]] = {}

    def register(self, plugin_class: type[StepPlugin]) -> None:
        """Register a plugin class.

        Args:
            plugin_class: The plugin class to register.
        """
        # name is an instance property
        name = plugin_class().name
        self._plugins[name] = plugin_class
        logger.debug("plugin_registered", plugin=name)

    def get_all(self) -> list[StepPlugin]:
        """Get instances of all registered plugins, in registration order."""
        return [cls() for cls in self._plugins.values()]

    def applicable(self, platform_info: PlatformInfo) -> list[StepPlugin]:
        """Get instances of the plugins that apply to a platform.

        Args:
            platform_info: The detected platform.

        Returns:
            Matching plugin instances, in registration order.
        """
        plugins = [plugin for plugin in self.get_all() if plugin.applies_to(platform_info)]
        logger.debug(
            "plugins_selected",
            system=platform_info.system,
            distro=platform_info.distro_id,
            plugins=[plugin.name for plugin in plugins],
        )
        return plugins
