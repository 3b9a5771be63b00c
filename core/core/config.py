"""Run configuration for uptodate.

There is no configuration file: the steps are fixed per platform. The few
knobs that exist come from defaults, ``UPTODATE_*`` environment variables
and command-line overrides, in increasing order of precedence.

Environment Variables:
    UPTODATE_LOG_LEVEL: debug, info, warning or error.
    UPTODATE_DRY_RUN: Set to "1", "true" or "yes" to only announce commands.
    UPTODATE_CARGO_EXCLUDE: Comma-separated crate names never to update.
        Replaces the default exclusions.
    UPTODATE_SKIP: Comma-separated plugin names to leave out of the pipeline.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .models import LogLevel

ENV_PREFIX = "UPTODATE_"

# Crates installed from local checkouts on the author's machines
DEFAULT_CARGO_EXCLUSIONS: frozenset[str] = frozenset({"tm", "project"})

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when a configuration value is invalid."""


class RunConfig(BaseModel):
    """Configuration for a single uptodate invocation."""

    dry_run: bool = Field(default=False, description="Announce commands without running them")
    continue_on_error: bool = Field(
        default=True, description="Continue with remaining steps after a failure"
    )
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    cargo_exclusions: frozenset[str] = Field(
        default=DEFAULT_CARGO_EXCLUSIONS, description="Crates never updated by the cargo step"
    )
    skip_plugins: frozenset[str] = Field(
        default_factory=frozenset, description="Plugins left out of the pipeline"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: Any) -> Any:
        """Accept log level names in any case."""
        if isinstance(value, str):
            return value.strip().lower()
        return value


def _split_names(value: str) -> frozenset[str]:
    return frozenset(name.strip() for name in value.split(",") if name.strip())


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def config_from_env(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Read configuration values from ``UPTODATE_*`` environment variables.

    Args:
        environ: Environment to read. Uses ``os.environ`` if not provided.

    Returns:
        Dictionary of the values that were set.
    """
    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}

    if (level := env.get(f"{ENV_PREFIX}LOG_LEVEL")) is not None:
        values["log_level"] = level.strip().lower()
    if (dry_run := env.get(f"{ENV_PREFIX}DRY_RUN")) is not None:
        values["dry_run"] = _parse_bool(f"{ENV_PREFIX}DRY_RUN", dry_run)
    if (exclude := env.get(f"{ENV_PREFIX}CARGO_EXCLUDE")) is not None:
        values["cargo_exclusions"] = _split_names(exclude)
    if (skip := env.get(f"{ENV_PREFIX}SKIP")) is not None:
        values["skip_plugins"] = _split_names(skip)

    return values


def load_run_config(environ: Mapping[str, str] | None = None, **overrides: Any) -> RunConfig:
    """Build the run configuration.

    Args:
        environ: Environment to read. Uses ``os.environ`` if not provided.
        **overrides: Values from the command line. None values are ignored.

    Returns:
        The validated RunConfig.

    Raises:
        ConfigError: If a value is invalid.
    """
    values = config_from_env(environ)
    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return RunConfig(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
