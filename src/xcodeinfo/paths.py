# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Locate the ``Contents/Developer`` folder of the active Xcode.

Resolution is an ordered list of :class:`PathStrategy` objects. Each strategy
reports a :class:`PathResult`; :func:`resolve_path` returns the first success
and stops early when a strategy marks its failure as final.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .config import ToolchainSettings
from .constants import (
    LEGACY_SYMLINK_PATH,
    MDFIND_BIN,
    SYMLINK_PATH,
    XCODE_BUNDLE_ID,
    XCODE_SELECT_BIN,
    XCODE_SUBDIR,
)
from .errors import ExecutionError, NotFoundError, ResolutionError, UnexpectedOutputError, ValidationError
from .plist import read_xcode_plist
from .process import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)

_XCODE_SELECT_FAILED = "Cannot determine the path to Xcode by running 'xcode-select -p' command"


@dataclass(frozen=True, slots=True)
class PathResult:
    """Outcome of a single path strategy.

    Attributes:
        strategy: Name of the strategy that produced the result.
        path: Resolved developer directory on success.
        error: Failure description when no path was produced.
        final: When true, no later strategy may be attempted.
    """

    strategy: str
    path: str | None = None
    error: ResolutionError | None = None
    final: bool = False

    @property
    def ok(self) -> bool:
        return self.path is not None

    @classmethod
    def success(cls, strategy: str, path: str) -> PathResult:
        return cls(strategy=strategy, path=path)

    @classmethod
    def failure(cls, strategy: str, error: ResolutionError, *, final: bool = False) -> PathResult:
        return cls(strategy=strategy, error=error, final=final)


@dataclass(frozen=True, slots=True)
class PathStrategy:
    """Named coroutine producing a :class:`PathResult`."""

    name: str
    resolve: Callable[[], Awaitable[PathResult]]


def normalize_developer_dir(path: str) -> str:
    """Return ``path`` ending in ``Contents/Developer`` without a trailing separator."""

    trimmed = path.strip().rstrip("/") or "/"
    if Path(trimmed).parts[-len(XCODE_SUBDIR.parts) :] == XCODE_SUBDIR.parts:
        return trimmed
    return str(Path(trimmed) / XCODE_SUBDIR)


async def has_xcode_identity(developer_root: str) -> bool:
    """Return whether ``developer_root`` belongs to a full Xcode bundle."""

    info = await read_xcode_plist(developer_root)
    return info.get("CFBundleIdentifier") == XCODE_BUNDLE_ID


async def find_app_paths(
    bundle_id: str,
    *,
    runner: CommandRunner = run_command,
    timeout: float | None = None,
) -> list[str]:
    """Use Spotlight to list installed copies of the app with ``bundle_id``.

    Paths that the index reports but that no longer exist are dropped. Any
    failure of the search tool yields an empty list.
    """

    try:
        result = await runner([MDFIND_BIN, f"kMDItemCFBundleIdentifier={bundle_id}"], timeout=timeout)
    except (ResolutionError, OSError) as exc:
        LOGGER.debug("Spotlight search for %s failed: %s", bundle_id, exc)
        return []
    candidates = [line.strip() for line in result.stdout.strip().splitlines() if line.strip()]
    if not candidates:
        return []
    exists = await asyncio.gather(*(asyncio.to_thread(os.path.exists, candidate) for candidate in candidates))
    return [candidate for candidate, present in zip(candidates, exists) if present]


async def _with_install_proposals(
    prefix: str,
    *,
    runner: CommandRunner,
    timeout: float | None,
) -> str:
    xcode_paths = await find_app_paths(XCODE_BUNDLE_ID, runner=runner, timeout=timeout)
    if not xcode_paths:
        return f"{prefix}. Consider installing Xcode to address this issue."
    proposals = "\n".join(f'    sudo xcode-select -s "{Path(app) / XCODE_SUBDIR}"' for app in xcode_paths)
    any_of = " any of" if len(xcode_paths) > 1 else ""
    return f"{prefix}. Consider running{any_of}:\n{proposals}\nto address this issue."


async def path_from_developer_dir(developer_dir: str) -> PathResult:
    """Validate the ``DEVELOPER_DIR`` override.

    A mismatching override is a final failure: it is never corrected or
    replaced by another strategy.
    """

    name = "DEVELOPER_DIR"
    developer_root = normalize_developer_dir(developer_dir)
    if await has_xcode_identity(developer_root):
        return PathResult.success(name, developer_root)
    error = ValidationError(
        f"The path to Xcode Developer dir '{developer_root}' provided in DEVELOPER_DIR "
        "environment variable is not a valid path"
    )
    return PathResult.failure(name, error, final=True)


async def path_from_xcode_select(
    *,
    runner: CommandRunner = run_command,
    timeout: float | None = None,
) -> PathResult:
    """Ask ``xcode-select --print-path`` for the active developer directory."""

    name = "xcode-select"
    try:
        result = await runner([XCODE_SELECT_BIN, "--print-path"], timeout=timeout)
    except ExecutionError as exc:
        error = ExecutionError(exc.command, exc.returncode, exc.stdout, exc.stderr, context=_XCODE_SELECT_FAILED)
        return PathResult.failure(name, error)
    except OSError as exc:
        return PathResult.failure(name, ResolutionError(f"{_XCODE_SELECT_FAILED}. Original error: {exc}"))

    developer_root = result.stdout.strip().rstrip("/")
    if not developer_root:
        message = await _with_install_proposals(
            "'xcode-select -p' returned an empty string", runner=runner, timeout=timeout
        )
        return PathResult.failure(name, UnexpectedOutputError(message))

    # xcode-select may point at a Command Line Tools only installation.
    if await has_xcode_identity(developer_root):
        return PathResult.success(name, developer_root)
    message = await _with_install_proposals(
        f"'{developer_root}' is not a valid Xcode path", runner=runner, timeout=timeout
    )
    return PathResult.failure(name, ValidationError(message), final=True)


async def path_from_symlinks(
    locations: Sequence[str] = (SYMLINK_PATH, LEGACY_SYMLINK_PATH),
) -> PathResult:
    """Read the symlinks ``xcode-select`` maintains, in priority order."""

    name = "symlink"
    for location in locations:
        if not await asyncio.to_thread(os.path.islink, location):
            if await asyncio.to_thread(os.path.lexists, location):
                LOGGER.debug("Ignoring %s: not a symlink", location)
            continue
        try:
            target = await asyncio.to_thread(os.readlink, location)
        except OSError as exc:
            return PathResult.failure(name, NotFoundError(f"Cannot read the Xcode symlink at {location}: {exc}"))
        LOGGER.warning("Finding Xcode path by symlink %s", location)
        developer_root = target.rstrip("/")
        if await has_xcode_identity(developer_root):
            return PathResult.success(name, developer_root)
        error = ValidationError(f"'{developer_root}' linked from {location} is not a valid Xcode path")
        return PathResult.failure(name, error, final=True)
    joined = ", or ".join(locations)
    return PathResult.failure(name, NotFoundError(f"Could not find path to Xcode by symlinks located in {joined}"))


def path_strategies(
    settings: ToolchainSettings,
    *,
    runner: CommandRunner = run_command,
    timeout: float | None = None,
) -> list[PathStrategy]:
    """Return the ordered strategies applicable under ``settings``."""

    if settings.developer_dir:
        override = settings.developer_dir
        return [PathStrategy("DEVELOPER_DIR", lambda: path_from_developer_dir(override))]

    strategies = [
        PathStrategy("xcode-select", lambda: path_from_xcode_select(runner=runner, timeout=timeout)),
    ]
    if settings.use_legacy_symlinks:
        strategies.append(PathStrategy("symlink", path_from_symlinks))
    return strategies


async def resolve_path(strategies: Sequence[PathStrategy]) -> str:
    """Evaluate ``strategies`` in order and return the first resolved path.

    Raises:
        ResolutionError: When every attempted strategy failed. A single
            failure is raised unchanged; several are summarised in one error
            chained to the last failure.
    """

    failures: list[PathResult] = []
    for strategy in strategies:
        result = await strategy.resolve()
        if result.ok and result.path is not None:
            return result.path
        failures.append(result)
        if result.final:
            break

    if not failures:
        raise ResolutionError("No strategy is available to locate Xcode")
    last = failures[-1]
    if last.error is None:
        raise ResolutionError(f"Strategy '{last.strategy}' produced neither a path nor an error")
    if len(failures) == 1:
        raise last.error
    earlier = "; ".join(f"{failure.strategy}: {failure.error}" for failure in failures[:-1])
    raise ResolutionError(f"{last.error} (earlier attempts: {earlier})") from last.error


__all__ = [
    "PathResult",
    "PathStrategy",
    "find_app_paths",
    "has_xcode_identity",
    "normalize_developer_dir",
    "path_from_developer_dir",
    "path_from_symlinks",
    "path_from_xcode_select",
    "path_strategies",
    "resolve_path",
]
