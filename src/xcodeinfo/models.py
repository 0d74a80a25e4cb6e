# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value models returned by the toolchain resolvers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class XcodeVersion(BaseModel):
    """Parsed Xcode version.

    ``version_string`` never carries a ``.0`` patch component, and ``patch`` is
    ``None`` whenever the patch number is zero.
    """

    model_config = ConfigDict(frozen=True)

    version_string: str
    version_float: float
    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int | None = Field(default=None, gt=0)

    def __str__(self) -> str:
        return self.version_string


class DeviceInfo(BaseModel):
    """USB-attached Apple device reported by ``system_profiler``."""

    model_config = ConfigDict(frozen=True)

    name: str
    udid: str | None = None
    product_id: str | None = None
    device_version: str | None = None


__all__ = ["DeviceInfo", "XcodeVersion"]
