# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Coercion and formatting of Xcode version strings."""

from __future__ import annotations

import re
from typing import Final

from packaging.version import InvalidVersion, Version

from .models import XcodeVersion

# First run of up to three dot separated numbers, e.g. "Version 15.0" -> "15.0".
_LOOSE_VERSION: Final[re.Pattern[str]] = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def coerce_version(raw: object) -> Version | None:
    """Coerce a loosely formatted version into ``major.minor.patch``.

    Missing minor or patch components become ``0``; trailing qualifiers such
    as ``beta`` are dropped.

    Args:
        raw: Value read from ``CFBundleShortVersionString``.

    Returns:
        Version | None: Normalised version, or ``None`` when ``raw`` contains no
        number at all.
    """

    if raw is None:
        return None
    match = _LOOSE_VERSION.search(str(raw))
    if match is None:
        return None
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    try:
        return Version(f"{major}.{minor}.{patch}")
    except InvalidVersion:  # pragma: no cover - regex guarantees digits
        return None


def format_version(version: Version) -> str:
    """Render ``version`` the way Xcode displays it.

    A zero patch is omitted: ``10.0.0`` becomes ``10.0`` while ``10.3.1`` is kept.
    """

    if version.micro > 0:
        return f"{version.major}.{version.minor}.{version.micro}"
    return f"{version.major}.{version.minor}"


def build_xcode_version(version: Version) -> XcodeVersion:
    """Return the structured record for ``version``."""

    version_string = format_version(version)
    return XcodeVersion(
        version_string=version_string,
        version_float=float(f"{version.major}.{version.minor}"),
        major=version.major,
        minor=version.minor,
        patch=version.micro if version.micro > 0 else None,
    )


__all__ = ["build_xcode_version", "coerce_version", "format_version"]
