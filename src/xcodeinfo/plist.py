# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Property list helpers for Xcode bundle metadata."""

from __future__ import annotations

import asyncio
import plistlib
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from .constants import INFO_PLIST_NAME
from .errors import UnexpectedOutputError

PlistValue = Any


def parse_plist_data(data: str | bytes) -> PlistValue:
    """Parse XML or binary plist ``data``.

    Raises:
        UnexpectedOutputError: If ``data`` is not a readable property list.
    """

    payload = data.encode() if isinstance(data, str) else data
    try:
        return plistlib.loads(payload)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise UnexpectedOutputError(f"Cannot parse property list data: {exc}") from exc


def read_plist_file(path: Path) -> PlistValue:
    """Return the parsed contents of the plist stored at ``path``.

    Raises:
        UnexpectedOutputError: If the file cannot be read or parsed.
    """

    try:
        with path.open("rb") as handle:
            return plistlib.load(handle)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        raise UnexpectedOutputError(f"Cannot parse property list '{path}': {exc}") from exc
    except OSError as exc:
        raise UnexpectedOutputError(f"Cannot read property list '{path}': {exc}") from exc


def xcode_plist_path(developer_root: str | Path) -> Path:
    """Return the ``Info.plist`` location next to the ``Contents/Developer`` folder."""

    return Path(developer_root).parent / INFO_PLIST_NAME


async def read_xcode_plist(developer_root: str | Path) -> dict[str, PlistValue]:
    """Read the ``Info.plist`` belonging to ``developer_root``.

    Args:
        developer_root: Full path to the ``Contents/Developer`` folder.

    Returns:
        dict[str, PlistValue]: Plist entries, or an empty mapping when the
        file does not exist.
    """

    plist_path = xcode_plist_path(developer_root)
    if not await asyncio.to_thread(plist_path.is_file):
        return {}
    content = await asyncio.to_thread(read_plist_file, plist_path)
    return content if isinstance(content, dict) else {}


__all__ = [
    "PlistValue",
    "parse_plist_data",
    "read_plist_file",
    "read_xcode_plist",
    "xcode_plist_path",
]
