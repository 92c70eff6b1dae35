"""Run settings for the override audit.

Each setting is resolved with the priority:

1. Explicit argument (usually a CLI flag)
2. ``NPM_OVERRIDES_AUDIT_*`` environment variable
3. Built-in default
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .discovery import PackageManager

MANAGER_ENV_VAR = "NPM_OVERRIDES_AUDIT_MANAGER"
TIMEOUT_ENV_VAR = "NPM_OVERRIDES_AUDIT_TIMEOUT"
WARN_ONLY_ENV_VAR = "NPM_OVERRIDES_AUDIT_WARN_ONLY"

AUTO_MANAGER = "auto"
DEFAULT_TIMEOUT = 300.0
_TRUTHY = {"1", "true", "yes", "y"}


class ConfigError(RuntimeError):
    """Raised when a setting has an invalid value."""


@dataclass(slots=True, frozen=True)
class AuditSettings:
    """Resolved settings for one audit run.

    ``manager`` is None when it should be detected from the lock files.
    """

    manager: PackageManager | None = None
    timeout: float = DEFAULT_TIMEOUT
    warn_only: bool = False


def _parse_manager(value: str) -> PackageManager | None:
    value = value.strip().lower()
    if not value or value == AUTO_MANAGER:
        return None
    try:
        return PackageManager(value)
    except ValueError as exc:
        known = ", ".join([AUTO_MANAGER] + [m.value for m in PackageManager])
        raise ConfigError(f"Unknown package manager '{value}'. Known: {known}") from exc


def _parse_timeout(value: str | float) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid timeout '{value}' (must be a number of seconds)") from exc
    if timeout <= 0:
        raise ConfigError(f"Invalid timeout '{value}' (must be positive)")
    return timeout


def load_settings(
    manager: str | None = None,
    timeout: float | None = None,
    warn_only: bool | None = None,
) -> AuditSettings:
    """Resolve settings from arguments, then the environment, then defaults.

    Raises:
        ConfigError: if a value cannot be parsed.
    """
    if manager is None:
        manager = os.environ.get(MANAGER_ENV_VAR, AUTO_MANAGER)

    if timeout is None:
        env_timeout = os.environ.get(TIMEOUT_ENV_VAR, "").strip()
        resolved_timeout = _parse_timeout(env_timeout) if env_timeout else DEFAULT_TIMEOUT
    else:
        resolved_timeout = _parse_timeout(timeout)

    if warn_only is None:
        warn_only = os.environ.get(WARN_ONLY_ENV_VAR, "").strip().lower() in _TRUTHY

    return AuditSettings(
        manager=_parse_manager(manager),
        timeout=resolved_timeout,
        warn_only=warn_only,
    )
