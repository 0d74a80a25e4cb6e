# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Enumerate Apple devices attached over USB."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .constants import DEVICE_NAME_MARKERS, DEVICE_NAME_PREFIXES, SYSTEM_PROFILER_BIN
from .errors import ResolutionError
from .models import DeviceInfo
from .plist import PlistValue, parse_plist_data
from .process import CommandRunner, run_command

LOGGER = logging.getLogger(__name__)


def _optional_text(value: PlistValue) -> str | None:
    return None if value is None else str(value)


def is_apple_device(name: object) -> bool:
    """Return whether a USB node called ``name`` is an iPhone, iPad or Apple TV."""

    if not isinstance(name, str):
        return False
    return name.startswith(DEVICE_NAME_PREFIXES) or any(marker in name for marker in DEVICE_NAME_MARKERS)


def collect_devices(root: PlistValue) -> list[DeviceInfo]:
    """Walk the ``SPUSBDataType`` tree and return the Apple devices found.

    The walk uses an explicit stack, so arbitrarily deep hubs cannot exhaust
    the interpreter's recursion limit.
    """

    devices: list[DeviceInfo] = []
    pending: list[PlistValue] = [root]
    while pending:
        entry = pending.pop()
        if isinstance(entry, list):
            pending.extend(entry)
        elif not isinstance(entry, dict):
            continue
        elif is_apple_device(entry.get("_name")):
            devices.append(
                DeviceInfo(
                    name=entry["_name"],
                    udid=_optional_text(entry.get("serial_num")),
                    product_id=_optional_text(entry.get("product_id")),
                    device_version=_optional_text(entry.get("bcd_device")),
                )
            )
        elif isinstance(entry.get("_items"), list):
            pending.extend(entry["_items"])
    return devices


def _first_report(content: PlistValue) -> Iterable[PlistValue]:
    # system_profiler -xml wraps the data type report in a single element array.
    if isinstance(content, list):
        return content[:1]
    return [content]


async def get_connected_devices(
    *,
    runner: CommandRunner = run_command,
    timeout: float | None = None,
) -> list[DeviceInfo]:
    """Return the USB-connected iOS and tvOS devices.

    A failing ``system_profiler`` or unreadable report yields an empty list.
    """

    try:
        result = await runner([SYSTEM_PROFILER_BIN, "-xml", "SPUSBDataType"], timeout=timeout)
        content = parse_plist_data(result.stdout)
    except (ResolutionError, OSError) as exc:
        LOGGER.warning("Cannot list connected devices: %s", exc)
        return []
    return collect_devices(list(_first_report(content)))


__all__ = ["collect_devices", "get_connected_devices", "is_apple_device"]
