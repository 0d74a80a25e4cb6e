# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded retry helper for flaky toolchain commands."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from .errors import ResolutionError

P = ParamSpec("P")
R = TypeVar("R")

LOGGER = logging.getLogger(__name__)

RETRIABLE_ERRORS: tuple[type[BaseException], ...] = (ResolutionError,)


async def retry(
    attempts: int,
    func: Callable[P, Awaitable[R]],
    *args: P.args,
    **kwargs: P.kwargs,
) -> R:
    """Await ``func`` up to ``attempts`` times and return the first success.

    Args:
        attempts: Maximum number of calls. Values below one still make a
            single call.
        func: Coroutine function to invoke.
        *args: Positional arguments forwarded to ``func``.
        **kwargs: Keyword arguments forwarded to ``func``.

    Returns:
        R: Result of the first successful call.

    Raises:
        ResolutionError: The error raised by the final attempt.
    """

    total = max(1, attempts)
    name = getattr(func, "__name__", repr(func))
    for attempt in range(1, total + 1):
        try:
            return await func(*args, **kwargs)
        except RETRIABLE_ERRORS as exc:
            if attempt == total:
                raise
            LOGGER.debug("Attempt %d/%d of %s failed: %s", attempt, total, name, exc)
    raise AssertionError("unreachable")  # pragma: no cover


__all__ = ["RETRIABLE_ERRORS", "retry"]
