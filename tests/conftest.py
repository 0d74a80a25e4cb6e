# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import asyncio
import plistlib
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

import xcodeinfo
from xcodeinfo.constants import DEVELOPER_DIR_ENV_VAR, XCODE_BUNDLE_ID
from xcodeinfo.errors import ExecutionError
from xcodeinfo.process import CommandResult

Response = str | BaseException | list[str | BaseException]


class FakeRunner:
    """Command runner double answering from a table of canned responses.

    A list response is consumed one item per call, repeating its last item.
    Unknown commands fail like a missing tool would.
    """

    def __init__(self, responses: Mapping[tuple[str, ...], Response] | None = None, *, delay: float = 0.0) -> None:
        self.responses: dict[tuple[str, ...], Response] = dict(responses or {})
        self.delay = delay
        self.calls: list[tuple[str, ...]] = []

    def count(self, *prefix: str) -> int:
        return sum(1 for call in self.calls if call[: len(prefix)] == prefix)

    def _next(self, key: tuple[str, ...]) -> str | BaseException | None:
        response = self.responses.get(key)
        if isinstance(response, list):
            return response.pop(0) if len(response) > 1 else response[0]
        return response

    async def __call__(
        self,
        args: Sequence[str],
        *,
        timeout: float | None = None,
        check: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> CommandResult:
        key = tuple(args)
        self.calls.append(key)
        if self.delay:
            await asyncio.sleep(self.delay)
        response = self._next(key)
        if response is None:
            raise ExecutionError(key, 127, "", f"{key[0]}: command not stubbed")
        if isinstance(response, BaseException):
            raise response
        return CommandResult(args=key, returncode=0, stdout=response, stderr="")


@pytest.fixture
def make_runner() -> Callable[..., FakeRunner]:
    return FakeRunner


@pytest.fixture
def make_xcode(tmp_path: Path) -> Callable[..., str]:
    """Create a fake ``*.app`` bundle and return its ``Contents/Developer`` path."""

    def factory(
        version: str = "15.0",
        *,
        bundle_id: str = XCODE_BUNDLE_ID,
        name: str = "Xcode.app",
        write_plist: bool = True,
    ) -> str:
        contents = tmp_path / name / "Contents"
        developer = contents / "Developer"
        developer.mkdir(parents=True, exist_ok=True)
        if write_plist:
            with (contents / "Info.plist").open("wb") as handle:
                plistlib.dump({"CFBundleIdentifier": bundle_id, "CFBundleShortVersionString": version}, handle)
        return str(developer)

    return factory


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch):
    for name in (DEVELOPER_DIR_ENV_VAR, "XCODEINFO_TIMEOUT", "XCODEINFO_RETRIES", "XCODEINFO_LEGACY_SYMLINKS"):
        monkeypatch.delenv(name, raising=False)
    xcodeinfo.clear_internal_cache()
    yield
    xcodeinfo.clear_internal_cache()
