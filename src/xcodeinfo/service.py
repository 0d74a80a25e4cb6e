# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Toolchain information service with per-instance memoization.

:class:`ToolchainInfo` owns a :class:`~xcodeinfo.cache.CacheRegistry`; every
memoized resolver is registered there so :meth:`ToolchainInfo.clear_internal_cache`
resets all of them together.

Retry granularity differs between resolvers. The version resolver retries its
whole chain and asks for the developer path again on every attempt; since a
failed path lookup is never cached this re-runs ``xcode-select`` only after a
failure. SDK, Instruments and template resolvers retry only their own final
command.
"""

from __future__ import annotations

import logging
from typing import Literal, overload

from packaging.version import Version

from .cache import CacheRegistry
from .config import ToolchainSettings, resolve_settings
from .constants import LEGACY_IOS_SDK, LEGACY_XCODE_MAJOR_PREFIX
from .devices import get_connected_devices as _list_connected_devices
from .errors import NotFoundError, ResolutionError, UnexpectedOutputError
from .models import DeviceInfo, XcodeVersion
from .paths import path_strategies, resolve_path
from .plist import read_xcode_plist, xcode_plist_path
from .process import CommandRunner, run_command
from .retry import retry
from .sdk import SdkPlatform, guess_ios_sdk, query_sdk_version
from .tools import (
    find_automation_trace_template,
    find_instruments,
    get_clang_version as _query_clang_version,
    get_command_line_tools_version as _query_command_line_tools_version,
)
from .version import build_xcode_version, coerce_version, format_version

LOGGER = logging.getLogger(__name__)


class ToolchainInfo:
    """Resolve facts about the installed Xcode, caching results per instance."""

    def __init__(
        self,
        settings: ToolchainSettings | None = None,
        *,
        runner: CommandRunner = run_command,
    ) -> None:
        """Create a service.

        Args:
            settings: Fixed settings. When omitted, settings are read from the
                environment on every resolution so ``DEVELOPER_DIR`` changes are
                honoured after the cache is cleared.
            runner: Command runner used for every subprocess.
        """

        self._settings = settings
        self._runner = runner
        self._cache = CacheRegistry()
        self._path = self._cache.memoize(self._resolve_path)
        self._version = self._cache.memoize(self._resolve_version_with_retry)
        self._max_ios_sdk = self._cache.memoize(self._resolve_max_ios_sdk)
        self._max_tvos_sdk = self._cache.memoize(self._resolve_max_tvos_sdk)
        self._connected_devices = self._cache.memoize(self._resolve_connected_devices)
        self._instruments_path = self._cache.memoize(self._resolve_instruments_path)
        self._automation_template = self._cache.memoize(self._resolve_automation_trace_template)

    @property
    def settings(self) -> ToolchainSettings:
        return resolve_settings(self._settings)

    def _timeout(self, timeout: float | None) -> float:
        return self.settings.timeout if timeout is None else timeout

    def _retries(self, retries: int | None) -> int:
        return self.settings.retries if retries is None else retries

    # Path

    async def _resolve_path(self, timeout: float) -> str:
        strategies = path_strategies(self.settings, runner=self._runner, timeout=timeout)
        return await resolve_path(strategies)

    async def get_path(self, timeout: float | None = None) -> str:
        """Return the full path to the Xcode ``Contents/Developer`` folder.

        ``DEVELOPER_DIR`` takes priority when set; otherwise ``xcode-select`` is
        asked and its answer validated.

        Raises:
            ResolutionError: If no strategy yields a valid Xcode path.
        """

        return await self._path(self._timeout(timeout))

    # Version

    async def _resolve_version_once(self, timeout: float) -> Version:
        developer_path = await self.get_path(timeout)
        plist_path = xcode_plist_path(developer_path)
        info = await read_xcode_plist(developer_path)
        if not info:
            raise NotFoundError(f"Could not read Xcode version: '{plist_path}' does not exist")
        raw_version = info.get("CFBundleShortVersionString")
        version = coerce_version(raw_version)
        if version is None:
            raise UnexpectedOutputError(f"Cannot parse Xcode version {raw_version!r} read from '{plist_path}'")
        return version

    async def _resolve_version_with_retry(self, retries: int, timeout: float) -> Version:
        return await retry(retries, self._resolve_version_once, timeout)

    @overload
    async def get_version(
        self, parse: Literal[False] = False, retries: int | None = None, timeout: float | None = None
    ) -> str: ...

    @overload
    async def get_version(
        self, parse: Literal[True], retries: int | None = None, timeout: float | None = None
    ) -> XcodeVersion: ...

    async def get_version(
        self,
        parse: bool = False,
        retries: int | None = None,
        timeout: float | None = None,
    ) -> str | XcodeVersion:
        """Return the Xcode version.

        Args:
            parse: Return an :class:`XcodeVersion` instead of the display string.
            retries: Attempts made to resolve the version.
            timeout: Seconds to wait for each command.

        Returns:
            str | XcodeVersion: ``"15.0"`` style string or the parsed record.

        Raises:
            ResolutionError: If the version cannot be determined.
        """

        version = await self._version(self._retries(retries), self._timeout(timeout))
        if parse:
            return build_xcode_version(version)
        return format_version(version)

    # SDKs

    async def get_max_ios_sdk_without_retry(self, timeout: float | None = None) -> str:
        """Return the newest iOS simulator SDK with a single ``xcrun`` attempt."""

        resolved_timeout = self._timeout(timeout)
        xcode_version = await self.get_version(False, None, resolved_timeout)
        if xcode_version.startswith(LEGACY_XCODE_MAJOR_PREFIX):
            return LEGACY_IOS_SDK
        return await query_sdk_version(SdkPlatform.IPHONE_SIMULATOR, runner=self._runner, timeout=resolved_timeout)

    async def _resolve_max_ios_sdk(self, retries: int, timeout: float) -> str:
        try:
            return await retry(retries, self.get_max_ios_sdk_without_retry, timeout)
        except ResolutionError as exc:
            LOGGER.warning("Unable to retrieve maximum iOS version: %s", exc)
            LOGGER.warning("Guessing from Xcode version")
        version = await self.get_version(True, None, timeout)
        return guess_ios_sdk(version)

    async def get_max_ios_sdk(self, retries: int | None = None, timeout: float | None = None) -> str:
        """Return the newest iOS simulator SDK supported by the installed Xcode.

        Falls back to a guess derived from the Xcode version when ``xcrun``
        keeps failing.
        """

        return await self._max_ios_sdk(self._retries(retries), self._timeout(timeout))

    async def get_max_tvos_sdk_without_retry(self, timeout: float | None = None) -> str:
        """Return the newest tvOS simulator SDK with a single ``xcrun`` attempt."""

        return await query_sdk_version(
            SdkPlatform.APPLETV_SIMULATOR, runner=self._runner, timeout=self._timeout(timeout)
        )

    async def _resolve_max_tvos_sdk(self, retries: int, timeout: float) -> str:
        return await retry(retries, self.get_max_tvos_sdk_without_retry, timeout)

    async def get_max_tvos_sdk(self, retries: int | None = None, timeout: float | None = None) -> str:
        """Return the newest tvOS simulator SDK supported by the installed Xcode.

        Raises:
            ResolutionError: If the SDK version cannot be determined.
        """

        return await self._max_tvos_sdk(self._retries(retries), self._timeout(timeout))

    # Auxiliary lookups

    async def get_clang_version(self) -> str | None:
        """Return the Command Line Tools clang version, or ``None``."""

        return await _query_clang_version(runner=self._runner)

    async def get_command_line_tools_version(self) -> str | None:
        """Return the Command Line Tools package version, or ``None``."""

        return await _query_command_line_tools_version(runner=self._runner)

    async def _resolve_connected_devices(self, timeout: float) -> list[DeviceInfo]:
        return await _list_connected_devices(runner=self._runner, timeout=timeout)

    async def get_connected_devices(self, timeout: float | None = None) -> list[DeviceInfo]:
        """Return USB-connected iPhones, iPads and Apple TVs; never raises."""

        return list(await self._connected_devices(self._timeout(timeout)))

    async def _resolve_instruments_path(self, retries: int, timeout: float) -> str:
        return await retry(retries, find_instruments, runner=self._runner, timeout=timeout)

    async def get_instruments_path(self, retries: int | None = None, timeout: float | None = None) -> str:
        """Return the path to the legacy ``instruments`` binary."""

        return await self._instruments_path(self._retries(retries), self._timeout(timeout))

    async def _find_automation_trace_template_once(self, timeout: float) -> str:
        return await find_automation_trace_template(await self.get_path(timeout))

    async def _resolve_automation_trace_template(self, retries: int, timeout: float) -> str:
        return await retry(retries, self._find_automation_trace_template_once, timeout)

    async def get_automation_trace_template_path(
        self, retries: int | None = None, timeout: float | None = None
    ) -> str:
        """Return the legacy UI Automation ``.tracetemplate`` shipped with Instruments."""

        return await self._automation_template(self._retries(retries), self._timeout(timeout))

    # Cache

    def clear_internal_cache(self) -> None:
        """Forget every memoized result held by this service."""

        self._cache.invalidate()


_DEFAULT: ToolchainInfo | None = None


def default_toolchain() -> ToolchainInfo:
    """Return the process-wide :class:`ToolchainInfo`, creating it on first use."""

    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = ToolchainInfo()
    return _DEFAULT


__all__ = ["ToolchainInfo", "default_toolchain"]
