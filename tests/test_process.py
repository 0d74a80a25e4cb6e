# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the asynchronous command runner."""

from __future__ import annotations

import shutil

import pytest

from xcodeinfo.constants import SPAWN_FAILURE_RETURNCODE, TIMEOUT_RETURNCODE
from xcodeinfo.errors import ExecutionError
from xcodeinfo.process import run_command, run_xcrun

pytestmark = pytest.mark.skipif(shutil.which("sh") is None, reason="requires a POSIX shell")


@pytest.mark.asyncio
async def test_run_command_captures_output() -> None:
    result = await run_command(["sh", "-c", "printf 'out'; printf 'err' >&2"])

    assert result.returncode == 0
    assert result.stdout == "out"
    assert result.stderr == "err"
    assert result.args[0] == shutil.which("sh")


@pytest.mark.asyncio
async def test_run_command_raises_with_stderr() -> None:
    with pytest.raises(ExecutionError) as excinfo:
        await run_command(["sh", "-c", "echo 'no developer dir' >&2; exit 3"])

    assert excinfo.value.returncode == 3
    assert "no developer dir" in str(excinfo.value)


@pytest.mark.asyncio
async def test_run_command_without_check_returns_failure() -> None:
    result = await run_command(["sh", "-c", "exit 5"], check=False)

    assert result.returncode == 5


@pytest.mark.asyncio
async def test_run_command_times_out() -> None:
    with pytest.raises(ExecutionError) as excinfo:
        await run_command(["sh", "-c", "sleep 5"], timeout=0.1)

    assert excinfo.value.returncode == TIMEOUT_RETURNCODE
    assert "timed out after 0.1s" in str(excinfo.value)


@pytest.mark.asyncio
async def test_run_command_passes_environment() -> None:
    result = await run_command(["sh", "-c", 'printf "$XCODEINFO_PROBE"'], env={"XCODEINFO_PROBE": "42"})

    assert result.stdout == "42"


@pytest.mark.asyncio
async def test_run_command_missing_executable() -> None:
    with pytest.raises(ExecutionError, match="not found on PATH") as excinfo:
        await run_command(["definitely-not-a-real-tool-xyz"], check=False)

    assert excinfo.value.returncode == SPAWN_FAILURE_RETURNCODE
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


@pytest.mark.asyncio
async def test_run_command_requires_arguments() -> None:
    with pytest.raises(ValueError, match="at least one argument"):
        await run_command([])


@pytest.mark.asyncio
async def test_run_xcrun_prefixes_command(make_runner) -> None:
    runner = make_runner({("xcrun", "--show-sdk-path"): "/SDKs/iPhoneOS.sdk\n"})

    result = await run_xcrun(["--show-sdk-path"], runner=runner)

    assert result.stdout.strip() == "/SDKs/iPhoneOS.sdk"


@pytest.mark.asyncio
async def test_run_xcrun_wraps_spawn_failure_of_custom_runner(make_runner) -> None:
    runner = make_runner({("xcrun", "-find", "instruments"): PermissionError("Permission denied: 'xcrun'")})

    with pytest.raises(ExecutionError, match="Permission denied") as excinfo:
        await run_xcrun(["-find", "instruments"], runner=runner)

    assert excinfo.value.command == ("xcrun", "-find", "instruments")
    assert excinfo.value.returncode == SPAWN_FAILURE_RETURNCODE
