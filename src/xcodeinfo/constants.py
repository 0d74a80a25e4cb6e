# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fixed identifiers, locations and timeouts used during toolchain discovery."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

XCODE_BUNDLE_ID: Final[str] = "com.apple.dt.Xcode"
XCODE_SUBDIR: Final[PurePosixPath] = PurePosixPath("Contents", "Developer")
INFO_PLIST_NAME: Final[str] = "Info.plist"

DEVELOPER_DIR_ENV_VAR: Final[str] = "DEVELOPER_DIR"
TIMEOUT_ENV_VAR: Final[str] = "XCODEINFO_TIMEOUT"
RETRIES_ENV_VAR: Final[str] = "XCODEINFO_RETRIES"
LEGACY_SYMLINKS_ENV_VAR: Final[str] = "XCODEINFO_LEGACY_SYMLINKS"

# Seconds.
XCRUN_TIMEOUT: Final[float] = 15.0

DEFAULT_NUMBER_OF_RETRIES: Final[int] = 2

SYMLINK_PATH: Final[str] = "/var/db/xcode_select_link"
LEGACY_SYMLINK_PATH: Final[str] = "/usr/share/xcode-select/xcode_dir_path"

XCODE_SELECT_BIN: Final[str] = "xcode-select"
XCRUN_BIN: Final[str] = "xcrun"
MDFIND_BIN: Final[str] = "/usr/bin/mdfind"
SYSTEM_PROFILER_BIN: Final[str] = "/usr/sbin/system_profiler"
PKGUTIL_BIN: Final[str] = "pkgutil"
CLANG_BIN: Final[str] = "clang"

# xcrun ignored ``--show-sdk-version`` on Xcode 4.
LEGACY_XCODE_MAJOR_PREFIX: Final[str] = "4"
LEGACY_IOS_SDK: Final[str] = "6.1"
IOS_SDK_OFFSET: Final[int] = 2

DEVICE_NAME_PREFIXES: Final[tuple[str, ...]] = ("iPad", "iPhone")
DEVICE_NAME_MARKERS: Final[tuple[str, ...]] = ("Apple TV",)

CLT_SDK_PACKAGE_PATTERN: Final[str] = "com.apple.pkg.DevSDK_.*"
CLT_PACKAGE_IDS: Final[tuple[str, ...]] = (
    "com.apple.pkg.CLTools_Executables",
    "com.apple.pkg.DeveloperToolsCLI",
)

TIMEOUT_RETURNCODE: Final[int] = 124
SPAWN_FAILURE_RETURNCODE: Final[int] = 127

__all__ = [
    "CLANG_BIN",
    "CLT_PACKAGE_IDS",
    "CLT_SDK_PACKAGE_PATTERN",
    "DEFAULT_NUMBER_OF_RETRIES",
    "DEVELOPER_DIR_ENV_VAR",
    "DEVICE_NAME_MARKERS",
    "DEVICE_NAME_PREFIXES",
    "INFO_PLIST_NAME",
    "IOS_SDK_OFFSET",
    "LEGACY_IOS_SDK",
    "LEGACY_SYMLINKS_ENV_VAR",
    "LEGACY_SYMLINK_PATH",
    "LEGACY_XCODE_MAJOR_PREFIX",
    "MDFIND_BIN",
    "PKGUTIL_BIN",
    "RETRIES_ENV_VAR",
    "SPAWN_FAILURE_RETURNCODE",
    "SYMLINK_PATH",
    "SYSTEM_PROFILER_BIN",
    "TIMEOUT_ENV_VAR",
    "TIMEOUT_RETURNCODE",
    "XCODE_BUNDLE_ID",
    "XCODE_SELECT_BIN",
    "XCODE_SUBDIR",
    "XCRUN_BIN",
    "XCRUN_TIMEOUT",
]
