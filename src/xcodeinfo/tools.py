# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lookups for companion developer tools (clang, Command Line Tools, Instruments)."""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shutil
from collections.abc import Awaitable, Callable, Sequence
from functools import partial
from pathlib import Path
from typing import Final

from .constants import CLANG_BIN, CLT_PACKAGE_IDS, CLT_SDK_PACKAGE_PATTERN, PKGUTIL_BIN
from .errors import NotFoundError, ResolutionError, UnexpectedOutputError
from .process import CommandRunner, run_command, run_xcrun

LOGGER = logging.getLogger(__name__)

_CLANG_VERSION: Final[re.Pattern[str]] = re.compile(r"clang-([0-9.]+)")
_PKG_VERSION: Final[re.Pattern[str]] = re.compile(r"^version: (.+)$", re.MULTILINE)

_INSTRUMENTS_PLUGINS: Final[Path] = Path("..", "Applications", "Instruments.app", "Contents", "PlugIns")
_AUTOMATION_BUNDLE_EXTENSIONS: Final[tuple[str, ...]] = ("xrplugin", "bundle")
_AUTOMATION_TEMPLATE: Final[Path] = Path("Contents", "Resources", "Automation.tracetemplate")


async def get_clang_version(*, runner: CommandRunner = run_command) -> str | None:
    """Return the clang build number supplied with Command Line Tools.

    See https://trac.macports.org/wiki/XcodeVersionInfo for how clang
    versions map onto Xcode releases.

    Returns:
        str | None: Version in ``x.x.x`` or ``x.x.x.x`` form, or ``None`` when
        clang is missing or its output cannot be parsed.
    """

    if shutil.which(CLANG_BIN) is None:
        LOGGER.info("Cannot find clang executable on the local system. Are Xcode Command Line Tools installed?")
        return None
    try:
        result = await runner([CLANG_BIN, "--version"])
    except (ResolutionError, OSError) as exc:
        LOGGER.info("Cannot run '%s --version': %s", CLANG_BIN, exc)
        return None
    match = _CLANG_VERSION.search(result.stdout)
    if match is None:
        LOGGER.info("Cannot parse clang version from %s", result.stdout)
        return None
    return match.group(1)


async def _query_pkg_info(runner: CommandRunner, package_id: str) -> str:
    result = await runner([PKGUTIL_BIN, f"--pkg-info={package_id}"])
    return result.stdout


async def _query_sdk_package(runner: CommandRunner) -> str:
    listing = await runner([PKGUTIL_BIN, f"--pkgs={CLT_SDK_PACKAGE_PATTERN}"])
    package_id = listing.stdout.strip()
    if not package_id:
        raise UnexpectedOutputError(f"No package matches {CLT_SDK_PACKAGE_PATTERN}")
    return await _query_pkg_info(runner, package_id)


def command_line_tools_probes(runner: CommandRunner = run_command) -> list[Callable[[], Awaitable[str]]]:
    """Return ``pkgutil`` queries in the order they should be attempted."""

    return [
        partial(_query_sdk_package, runner),
        *(partial(_query_pkg_info, runner, package_id) for package_id in CLT_PACKAGE_IDS),
    ]


async def get_command_line_tools_version(
    *,
    runner: CommandRunner = run_command,
    probes: Sequence[Callable[[], Awaitable[str]]] | None = None,
) -> str | None:
    """Return the installed Command Line Tools package version.

    ``pkgutil --pkg-info`` prints a line such as ``version: 8.0.0.0.1.1472435881``.
    The first candidate package reporting a version line wins.
    """

    for probe in probes if probes is not None else command_line_tools_probes(runner):
        try:
            stdout = await probe()
        except (ResolutionError, OSError) as exc:
            LOGGER.debug("Command Line Tools probe failed: %s", exc)
            continue
        match = _PKG_VERSION.search(stdout)
        if match is None:
            LOGGER.debug("Command Line Tools probe printed no version line")
            continue
        return match.group(1).strip()
    return None


async def find_instruments(*, runner: CommandRunner = run_command, timeout: float | None = None) -> str:
    """Return the path to the ``instruments`` binary via ``xcrun -find``."""

    args = ["-find", "instruments"]
    result = await run_xcrun(args, timeout, runner=runner)
    instruments_path = result.stdout.strip()
    if not instruments_path:
        raise UnexpectedOutputError(f"Could not find path to instruments binary using 'xcrun {' '.join(args)}'")
    return instruments_path


def automation_template_candidates(developer_root: str) -> list[Path]:
    """Return possible ``Automation.tracetemplate`` locations for ``developer_root``."""

    plugins = Path(os.path.normpath(Path(developer_root, _INSTRUMENTS_PLUGINS)))
    return [
        plugins / f"AutomationInstrument.{extension}" / _AUTOMATION_TEMPLATE
        for extension in _AUTOMATION_BUNDLE_EXTENSIONS
    ]


async def find_automation_trace_template(developer_root: str) -> str:
    """Return the first existing ``Automation.tracetemplate`` under ``developer_root``.

    Raises:
        NotFoundError: If the template exists in none of the known locations.
    """

    candidates = automation_template_candidates(developer_root)
    for candidate in candidates:
        if await asyncio.to_thread(candidate.exists):
            return str(candidate)
    locations = ", ".join(str(candidate) for candidate in candidates)
    raise NotFoundError(f"Could not find Automation.tracetemplate in any of the following locations: {locations}")


__all__ = [
    "automation_template_candidates",
    "command_line_tools_probes",
    "find_automation_trace_template",
    "find_instruments",
    "get_clang_version",
    "get_command_line_tools_version",
]
