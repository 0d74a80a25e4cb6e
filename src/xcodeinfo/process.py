# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Asynchronous wrappers around external command execution."""

from __future__ import annotations

import asyncio
import shutil

# Bandit: subprocess usage is intentional, arguments are passed as a list and
# never expanded by a shell.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .constants import SPAWN_FAILURE_RETURNCODE, TIMEOUT_RETURNCODE, XCRUN_BIN, XCRUN_TIMEOUT
from .errors import ExecutionError


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured outcome of a finished subprocess."""

    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner(Protocol):
    """Callable signature shared by :func:`run_command` and test doubles."""

    async def __call__(
        self,
        args: Sequence[str],
        *,
        timeout: float | None = None,
        check: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult: ...


def _ensure_text(value: str | bytes | None) -> str:
    """Return ``value`` decoded to text when supplied as ``bytes``.

    Args:
        value: Stream output captured from subprocess execution.

    Returns:
        str: Text output, empty when nothing was captured.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="replace")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def _spawn_failure(args: Sequence[str], exc: OSError) -> ExecutionError:
    return ExecutionError(list(args), SPAWN_FAILURE_RETURNCODE, None, str(exc))


async def _terminate(process: asyncio.subprocess.Process) -> None:
    # Grandchildren may keep the pipes open, so only the direct child is awaited.
    if process.returncode is None:
        process.kill()
    await process.wait()


async def run_command(
    args: Sequence[str],
    *,
    timeout: float | None = None,
    check: bool = True,
    env: Mapping[str, str] | None = None,
) -> CommandResult:
    """Execute ``args`` after normalising the executable path.

    A timed out child is killed and reported with exit status ``124`` and a
    timeout note in place of its stderr. A command that cannot be started is
    reported with exit status ``127`` whatever the value of ``check``.

    Args:
        args: Command and argument sequence to execute.
        timeout: Seconds to wait before the child is killed.
        check: Raise :class:`ExecutionError` on a non-zero exit status.
        env: Optional environment replacing the inherited one.

    Returns:
        CommandResult: Captured exit status and text output.

    Raises:
        ValueError: If no arguments are provided.
        ExecutionError: When the command cannot be started, or when ``check``
            is true and the process fails.
    """

    try:
        normalized = _normalize_args(args)
        process = await asyncio.create_subprocess_exec(
            *normalized,
            stdin=subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
        )
    except OSError as exc:
        raise _spawn_failure(args, exc) from exc
    try:
        raw_stdout, raw_stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        returncode = process.returncode if process.returncode is not None else 0
        stdout = _ensure_text(raw_stdout)
        stderr = _ensure_text(raw_stderr)
    except asyncio.TimeoutError:
        await _terminate(process)
        stdout = ""
        stderr = f"Command timed out after {timeout:.1f}s" if timeout is not None else "Command timed out"
        returncode = TIMEOUT_RETURNCODE

    completed = CommandResult(args=tuple(normalized), returncode=returncode, stdout=stdout, stderr=stderr)
    if check and completed.returncode != 0:
        raise ExecutionError(normalized, completed.returncode, completed.stdout, completed.stderr)
    return completed


async def run_xcrun(
    args: Sequence[str],
    timeout: float | None = XCRUN_TIMEOUT,
    *,
    runner: CommandRunner = run_command,
) -> CommandResult:
    """Execute ``xcrun`` with ``args``.

    Args:
        args: Arguments passed to ``xcrun``.
        timeout: Seconds to wait for ``xcrun`` to exit.
        runner: Command runner used to spawn the process.

    Returns:
        CommandResult: Result of the ``xcrun`` invocation.

    Raises:
        ExecutionError: If ``xcrun`` cannot be started, exits with a non-zero
            status or times out.
    """

    command = [XCRUN_BIN, *args]
    try:
        return await runner(command, timeout=timeout)
    except OSError as exc:
        raise _spawn_failure(command, exc) from exc


__all__ = ["CommandResult", "CommandRunner", "run_command", "run_xcrun"]
