# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Discover the installed Xcode toolchain.

The module-level coroutines delegate to a process-wide
:class:`~xcodeinfo.service.ToolchainInfo`. Construct your own instance to
inject settings or a custom command runner.
"""

from __future__ import annotations

from importlib import metadata

from .config import ToolchainSettings, resolve_settings
from .errors import (
    ConfigurationError,
    ExecutionError,
    NotFoundError,
    ResolutionError,
    UnexpectedOutputError,
    ValidationError,
)
from .models import DeviceInfo, XcodeVersion
from .service import ToolchainInfo, default_toolchain

try:
    __version__ = metadata.version("xcodeinfo")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"


async def get_path(timeout: float | None = None) -> str:
    """Return the full path to the Xcode ``Contents/Developer`` folder."""

    return await default_toolchain().get_path(timeout)


async def get_version(
    parse: bool = False,
    retries: int | None = None,
    timeout: float | None = None,
) -> str | XcodeVersion:
    """Return the Xcode version string, or the parsed record when ``parse`` is true."""

    return await default_toolchain().get_version(parse, retries, timeout)


async def get_max_ios_sdk(retries: int | None = None, timeout: float | None = None) -> str:
    """Return the newest iOS simulator SDK version."""

    return await default_toolchain().get_max_ios_sdk(retries, timeout)


async def get_max_ios_sdk_without_retry(timeout: float | None = None) -> str:
    """Return the newest iOS simulator SDK with a single ``xcrun`` attempt."""

    return await default_toolchain().get_max_ios_sdk_without_retry(timeout)


async def get_max_tvos_sdk(retries: int | None = None, timeout: float | None = None) -> str:
    """Return the newest tvOS simulator SDK version."""

    return await default_toolchain().get_max_tvos_sdk(retries, timeout)


async def get_max_tvos_sdk_without_retry(timeout: float | None = None) -> str:
    """Return the newest tvOS simulator SDK with a single ``xcrun`` attempt."""

    return await default_toolchain().get_max_tvos_sdk_without_retry(timeout)


async def get_clang_version() -> str | None:
    """Return the Command Line Tools clang version, or ``None``."""

    return await default_toolchain().get_clang_version()


async def get_command_line_tools_version() -> str | None:
    """Return the Command Line Tools package version, or ``None``."""

    return await default_toolchain().get_command_line_tools_version()


async def get_connected_devices(timeout: float | None = None) -> list[DeviceInfo]:
    """Return USB-connected iPhones, iPads and Apple TVs."""

    return await default_toolchain().get_connected_devices(timeout)


async def get_instruments_path(retries: int | None = None, timeout: float | None = None) -> str:
    """Return the path to the legacy ``instruments`` binary."""

    return await default_toolchain().get_instruments_path(retries, timeout)


async def get_automation_trace_template_path(retries: int | None = None, timeout: float | None = None) -> str:
    """Return the UI Automation ``.tracetemplate`` shipped with Instruments."""

    return await default_toolchain().get_automation_trace_template_path(retries, timeout)


def clear_internal_cache() -> None:
    """Reset every memoized resolver of the process-wide service."""

    default_toolchain().clear_internal_cache()


__all__ = [
    "ConfigurationError",
    "DeviceInfo",
    "ExecutionError",
    "NotFoundError",
    "ResolutionError",
    "ToolchainInfo",
    "ToolchainSettings",
    "UnexpectedOutputError",
    "ValidationError",
    "XcodeVersion",
    "__version__",
    "clear_internal_cache",
    "default_toolchain",
    "get_automation_trace_template_path",
    "get_clang_version",
    "get_command_line_tools_version",
    "get_connected_devices",
    "get_instruments_path",
    "get_max_ios_sdk",
    "get_max_ios_sdk_without_retry",
    "get_max_tvos_sdk",
    "get_max_tvos_sdk_without_retry",
    "get_path",
    "get_version",
    "resolve_settings",
]
