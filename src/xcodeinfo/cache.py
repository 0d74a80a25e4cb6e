# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory memoization for coroutine resolvers.

Each memoized coroutine keeps the :class:`asyncio.Task` computing a result,
so concurrent callers with identical arguments await one shared computation
instead of spawning duplicate subprocesses. Failed computations are evicted
so the next call starts afresh.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable, Mapping
from dataclasses import dataclass
from functools import update_wrapper
from typing import Final, Generic, ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")
HashableCandidate = TypeVar("HashableCandidate")

CacheKey = Hashable


@dataclass(frozen=True, slots=True)
class CacheInfo:
    """Use this container to describe cache state metadata.

    Attributes:
        current_size: Number of cached entries, pending or settled.
        hits: Number of calls served from an existing entry.
    """

    current_size: int
    hits: int


def _ensure_hashable(value: HashableCandidate, *, label: str) -> Hashable:
    """Return ``value`` ensuring it is hashable for cache key construction.

    Args:
        value: Arbitrary argument value supplied to the cached callable.
        label: Human-readable label used when raising descriptive errors.

    Returns:
        Hashable: The original value when it supports hashing.

    Raises:
        TypeError: If ``value`` is not hashable.
    """

    if isinstance(value, Hashable):
        return value
    raise TypeError(f"{label} must be hashable to participate in caching")


def build_cache_key(args: tuple[object, ...], kwargs: Mapping[str, object]) -> CacheKey:
    """Construct a stable hashable cache key.

    Args:
        args: Positional arguments supplied to the wrapped callable.
        kwargs: Keyword arguments supplied to the wrapped callable.

    Returns:
        CacheKey: Tuple-based representation suitable for dict access.
    """

    positional = tuple(
        _ensure_hashable(arg, label=f"positional argument {index}") for index, arg in enumerate(args)
    )
    if not kwargs:
        return positional
    keywords = tuple(
        sorted((key, _ensure_hashable(value, label=f"keyword argument '{key}'")) for key, value in kwargs.items())
    )
    return positional + (keywords,)


class AsyncMemoizer(Generic[P, R]):
    """Memoize a coroutine function, sharing in-flight computations."""

    def __init__(self, func: Callable[P, Awaitable[R]]) -> None:
        self._func = func
        self._store: dict[CacheKey, asyncio.Future[R]] = {}
        self._hits = 0
        update_wrapper(self, func)

    async def __call__(self, *args: P.args, **kwargs: P.kwargs) -> R:
        """Return the cached result for the arguments, computing it once."""

        cache_key = build_cache_key(args, kwargs)
        entry = self._store.get(cache_key)
        if entry is not None:
            self._hits += 1
        else:
            entry = asyncio.ensure_future(self._func(*args, **kwargs))
            self._store[cache_key] = entry
            entry.add_done_callback(lambda done, key=cache_key: self._evict_failure(key, done))
        # Shielded so one cancelled waiter does not cancel the shared computation.
        return await asyncio.shield(entry)

    def _evict_failure(self, cache_key: CacheKey, done: asyncio.Future[R]) -> None:
        if done.cancelled() or done.exception() is not None:
            if self._store.get(cache_key) is done:
                del self._store[cache_key]

    def cache_clear(self) -> None:
        """Drop every cached entry and reset hit tracking.

        Pending computations keep running for the callers already awaiting
        them, but new calls start a fresh computation.
        """

        self._store.clear()
        self._hits = 0

    def cache_metadata(self) -> CacheInfo:
        """Return the number of stored entries and hits."""

        return CacheInfo(current_size=len(self._store), hits=self._hits)


class CacheRegistry:
    """Own a family of memoizers that are invalidated together."""

    def __init__(self) -> None:
        self._memoizers: list[AsyncMemoizer] = []

    def memoize(self, func: Callable[P, Awaitable[R]]) -> AsyncMemoizer[P, R]:
        """Wrap ``func`` in a memoizer tracked by this registry.

        Args:
            func: Coroutine function whose results should be memoized.

        Returns:
            AsyncMemoizer[P, R]: Memoized callable registered for invalidation.
        """

        memoized: AsyncMemoizer[P, R] = AsyncMemoizer(func)
        self._memoizers.append(memoized)
        return memoized

    def invalidate(self) -> None:
        """Clear every registered memoizer at once."""

        for memoized in self._memoizers:
            memoized.cache_clear()

    def __len__(self) -> int:
        return len(self._memoizers)


__all__: Final = ["AsyncMemoizer", "CacheInfo", "CacheRegistry", "build_cache_key"]
