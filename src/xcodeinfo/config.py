# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Runtime settings for toolchain discovery."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from .constants import (
    DEFAULT_NUMBER_OF_RETRIES,
    DEVELOPER_DIR_ENV_VAR,
    LEGACY_SYMLINKS_ENV_VAR,
    RETRIES_ENV_VAR,
    TIMEOUT_ENV_VAR,
    XCRUN_TIMEOUT,
)
from .errors import ConfigurationError

_TRUE_TOKENS: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class ToolchainSettings:
    """Define how the toolchain resolvers behave.

    Attributes:
        developer_dir: Override for the Xcode developer directory. When set, it
            is the only path strategy attempted.
        timeout: Default per-command timeout in seconds.
        retries: Default number of attempts for retried resolvers.
        use_legacy_symlinks: Whether the ``xcode-select`` symlinks are read
            when the command itself fails or prints nothing.
    """

    developer_dir: str | None = None
    timeout: float = XCRUN_TIMEOUT
    retries: int = DEFAULT_NUMBER_OF_RETRIES
    use_legacy_symlinks: bool = True


def _parse_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {raw!r}")
    return value


def _parse_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    token = raw.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


def settings_from_environment(env: Mapping[str, str]) -> ToolchainSettings:
    """Build settings from ``env``.

    Args:
        env: Environment mapping consulted for overrides.

    Returns:
        ToolchainSettings: Settings with every recognised override applied.

    Raises:
        ConfigurationError: If a numeric or boolean override cannot be parsed.
    """

    developer_dir = env.get(DEVELOPER_DIR_ENV_VAR) or None
    return ToolchainSettings(
        developer_dir=developer_dir,
        timeout=_parse_float(env, TIMEOUT_ENV_VAR, XCRUN_TIMEOUT),
        retries=_parse_int(env, RETRIES_ENV_VAR, DEFAULT_NUMBER_OF_RETRIES),
        use_legacy_symlinks=_parse_bool(env, LEGACY_SYMLINKS_ENV_VAR, True),
    )


def resolve_settings(
    settings: ToolchainSettings | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> ToolchainSettings:
    """Return toolchain settings honouring explicit values and the environment.

    Args:
        settings: Explicit settings that take precedence when provided.
        env: Optional environment mapping used instead of :mod:`os.environ`.

    Returns:
        ToolchainSettings: Effective settings.

    Raises:
        ConfigurationError: If an environment override is malformed.
    """

    if settings is not None:
        return settings
    return settings_from_environment(os.environ if env is None else env)


__all__ = ["ToolchainSettings", "resolve_settings", "settings_from_environment"]
