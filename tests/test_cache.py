# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the coroutine memoization helpers."""

from __future__ import annotations

import asyncio

import pytest

from xcodeinfo.cache import AsyncMemoizer, CacheRegistry, build_cache_key


def test_build_cache_key_sorts_keywords() -> None:
    assert build_cache_key((1,), {"b": 2, "a": 1}) == build_cache_key((1,), {"a": 1, "b": 2})
    assert build_cache_key((1, 2), {}) == (1, 2)


def test_build_cache_key_rejects_unhashable_arguments() -> None:
    with pytest.raises(TypeError, match="positional argument 0"):
        build_cache_key(([1],), {})


@pytest.mark.asyncio
async def test_memoizer_coalesces_concurrent_calls() -> None:
    calls = {"count": 0}

    async def compute(value: int) -> int:
        calls["count"] += 1
        await asyncio.sleep(0.01)
        return value * 2

    memoized = AsyncMemoizer(compute)
    results = await asyncio.gather(memoized(3), memoized(3), memoized(3))

    assert results == [6, 6, 6]
    assert calls["count"] == 1
    assert memoized.cache_metadata().hits == 2


@pytest.mark.asyncio
async def test_memoizer_keys_on_arguments() -> None:
    calls: list[int] = []

    async def compute(value: int) -> int:
        calls.append(value)
        return value

    memoized = AsyncMemoizer(compute)
    await memoized(1)
    await memoized(2)
    await memoized(1)

    assert calls == [1, 2]
    assert memoized.cache_metadata().current_size == 2


@pytest.mark.asyncio
async def test_memoizer_does_not_cache_failures() -> None:
    attempts = {"count": 0}

    async def flaky() -> str:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise RuntimeError("boom")
        return "ok"

    memoized = AsyncMemoizer(flaky)
    with pytest.raises(RuntimeError, match="boom"):
        await memoized()
    assert await memoized() == "ok"
    assert await memoized() == "ok"
    assert attempts["count"] == 2


@pytest.mark.asyncio
async def test_registry_invalidates_every_memoizer() -> None:
    calls = {"first": 0, "second": 0}

    async def first() -> int:
        calls["first"] += 1
        return 1

    async def second() -> int:
        calls["second"] += 1
        return 2

    registry = CacheRegistry()
    memo_first = registry.memoize(first)
    memo_second = registry.memoize(second)
    await memo_first()
    await memo_second()
    registry.invalidate()
    await memo_first()
    await memo_second()

    assert len(registry) == 2
    assert calls == {"first": 2, "second": 2}
