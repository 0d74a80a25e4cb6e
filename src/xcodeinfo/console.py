# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be a TTY."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover - detached streams
        return False


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(console: Console, msg: str, *, style: str | None, use_color: bool | None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def info(console: Console, msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(console, f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_color=use_color)


def ok(console: Console, msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(console, f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_color=use_color)


def warn(console: Console, msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(console, f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_color=use_color)


def configure_logging(verbose: bool, *, console: Console | None = None) -> None:
    """Route library log records through ``rich`` at the requested verbosity."""

    handler = RichHandler(console=console or Console(stderr=True), show_path=False, show_time=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


__all__ = ["configure_logging", "detect_tty", "emoji", "info", "ok", "warn"]
