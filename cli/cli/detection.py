"""Platform detection and pipeline assembly.

The pipeline for a run is decided entirely by the platform: which system
package manager to drive, followed by the cross-platform tools.
"""

from __future__ import annotations

import platform
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from core.models import PlatformInfo

if TYPE_CHECKING:
    from plugins import PluginRegistry

    from core.config import RunConfig
    from core.interfaces import StepPlugin
    from core.pipeline import Step

logger = structlog.get_logger(__name__)

OS_RELEASE_PATHS = (Path("/etc/os-release"), Path("/usr/lib/os-release"))


class UnsupportedPlatformError(Exception):
    """Raised when no system package manager is known for the platform."""


def read_distro_id(paths: tuple[Path, ...] = OS_RELEASE_PATHS) -> str | None:
    """Read the ``ID`` field from os-release.

    Args:
        paths: Candidate os-release files, in order of preference.

    Returns:
        The distro id (e.g. "ubuntu", "arch"), or None if unavailable.
    """
    for path in paths:
        try:
            with path.open(encoding="utf-8") as f:
                for line in f:
                    if line.startswith("ID="):
                        return line.strip().split("=", 1)[1].strip("\"'") or None
        except OSError:
            continue
        return None
    return None


def detect_platform() -> PlatformInfo:
    """Detect the operating system and, on Linux, the distribution."""
    system = platform.system().lower()
    distro_id = read_distro_id() if system == "linux" else None
    info = PlatformInfo(system=system, distro_id=distro_id)
    logger.debug("platform_detected", system=info.system, distro=info.distro_id)
    return info


def select_plugins(platform_info: PlatformInfo, registry: PluginRegistry) -> list[StepPlugin]:
    """Pick the plugins whose steps run on a platform.

    Args:
        platform_info: The detected platform.
        registry: Registry with the available plugins.

    Returns:
        Matching plugins in registration order.

    Raises:
        UnsupportedPlatformError: On a Linux distribution with no known
            package manager.
    """
    plugins = registry.applicable(platform_info)

    if platform_info.system == "linux":
        has_system_manager = any(not getattr(p, "cross_platform", True) for p in plugins)
        if not has_system_manager:
            distro = platform_info.distro_id
            if distro is None:
                raise UnsupportedPlatformError("Could not determine the Linux distribution")
            raise UnsupportedPlatformError(f"Not sure what OS this is: {distro}")

    return plugins


def build_pipeline(
    platform_info: PlatformInfo,
    config: RunConfig,
    registry: PluginRegistry,
) -> list[Step]:
    """Assemble the ordered steps for a run.

    Args:
        platform_info: The detected platform.
        config: Run configuration (skipped plugins, cargo exclusions).
        registry: Registry with the available plugins.

    System package managers upgrade first, then their cleanup steps run,
    then the cross-platform tools.

    Returns:
        The pipeline, in execution order.
    """
    plugins: list[StepPlugin] = []
    for plugin in select_plugins(platform_info, registry):
        if plugin.name in config.skip_plugins:
            logger.info("plugin_skipped", plugin=plugin.name, reason="configured")
            continue
        plugins.append(plugin)

    system = [p for p in plugins if not getattr(p, "cross_platform", True)]
    common = [p for p in plugins if getattr(p, "cross_platform", True)]

    steps: list[Step] = []
    # Cleanup waits until every system package manager has upgraded
    for plugin in system:
        steps.extend(plugin.get_steps(config))
    for plugin in system:
        steps.extend(plugin.get_cleanup_steps(config))
    for plugin in common:
        steps.extend(plugin.get_steps(config))
        steps.extend(plugin.get_cleanup_steps(config))
    return steps
