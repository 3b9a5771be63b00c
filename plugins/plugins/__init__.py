"""uptodate plugins package.

This package contains the step plugins for each supported tool.
"""

from __future__ import annotations

from plugins.apt import AptPlugin
from plugins.base import BasePlugin
from plugins.brew import BrewPlugin
from plugins.cargo import CargoPlugin, cargo_install
from plugins.neovim import NeovimPlugin
from plugins.pacman import PacmanPlugin
from plugins.registry import PluginRegistry
from plugins.rustup import RustupPlugin
from plugins.yay import YayPlugin

__all__ = [
    "AptPlugin",
    "BasePlugin",
    "BrewPlugin",
    "CargoPlugin",
    "NeovimPlugin",
    "PacmanPlugin",
    "PluginRegistry",
    "RustupPlugin",
    "YayPlugin",
    "cargo_install",
    "register_builtin_plugins",
]


def register_builtin_plugins(registry: PluginRegistry) -> PluginRegistry:
    """Register all built-in plugins with the registry.

    System package managers come first, then the cross-platform tools, so
    the toolchain is current before cargo rebuilds crates with it.

    Args:
        registry: Registry to add the plugins to.

    Returns:
        The registry with built-in plugins registered.
    """
    registry.register(AptPlugin)
    registry.register(PacmanPlugin)
    registry.register(YayPlugin)
    registry.register(BrewPlugin)
    registry.register(RustupPlugin)
    registry.register(NeovimPlugin)
    registry.register(CargoPlugin)

    return registry
