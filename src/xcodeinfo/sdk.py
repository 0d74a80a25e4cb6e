# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Simulator SDK version lookups."""

from __future__ import annotations

import re
from enum import Enum
from typing import Final

from .constants import IOS_SDK_OFFSET
from .errors import UnexpectedOutputError
from .models import XcodeVersion
from .process import CommandRunner, run_command, run_xcrun

_SDK_VERSION: Final[re.Pattern[str]] = re.compile(r"\d+(?:\.\d+)+")


class SdkPlatform(str, Enum):
    """Simulator SDKs understood by ``xcrun --sdk``."""

    IPHONE_SIMULATOR = "iphonesimulator"
    APPLETV_SIMULATOR = "appletvsimulator"

    @property
    def display_name(self) -> str:
        return "iOS" if self is SdkPlatform.IPHONE_SIMULATOR else "tvOS"


def is_sdk_version(value: str) -> bool:
    """Return whether ``value`` looks like ``17.0`` or ``17.0.1``."""

    return _SDK_VERSION.fullmatch(value) is not None


async def query_sdk_version(
    platform: SdkPlatform,
    *,
    runner: CommandRunner = run_command,
    timeout: float | None = None,
) -> str:
    """Return the newest SDK version ``xcrun`` reports for ``platform``.

    Raises:
        ExecutionError: If ``xcrun`` fails or times out.
        UnexpectedOutputError: If the printed version is not numeric.
    """

    result = await run_xcrun(["--sdk", platform.value, "--show-sdk-version"], timeout, runner=runner)
    sdk_version = result.stdout.strip()
    if not is_sdk_version(sdk_version):
        raise UnexpectedOutputError(
            f"xcrun returned a non-numeric {platform.display_name} SDK version: '{sdk_version}'"
        )
    return sdk_version


def guess_ios_sdk(version: XcodeVersion) -> str:
    """Approximate the iOS SDK shipped with ``version`` (Xcode major + 2)."""

    return f"{version.major + IOS_SDK_OFFSET}.{version.minor}"


__all__ = ["SdkPlatform", "guess_ios_sdk", "is_sdk_version", "query_sdk_version"]
