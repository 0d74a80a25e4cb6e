# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for Xcode version coercion and display formatting."""

from __future__ import annotations

import pytest
from packaging.version import Version

from xcodeinfo.version import build_xcode_version, coerce_version, format_version


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        (Version("10.0.0"), "10.0"),
        (Version("10.3.1"), "10.3.1"),
        (Version("9.4.0"), "9.4"),
        (Version("15.0.2"), "15.0.2"),
    ],
)
def test_format_version_drops_zero_patch(version: Version, expected: str) -> None:
    assert format_version(version) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15", "15.0.0"),
        ("15.2", "15.2.0"),
        ("10.3.1", "10.3.1"),
        ("Version 8.3.3 beta", "8.3.3"),
        ("16.0.0.1", "16.0.0"),
    ],
)
def test_coerce_version_tolerates_loose_input(raw: str, expected: str) -> None:
    assert coerce_version(raw) == Version(expected)


@pytest.mark.parametrize("raw", [None, "", "unknown"])
def test_coerce_version_returns_none_without_digits(raw: str | None) -> None:
    assert coerce_version(raw) is None


def test_build_xcode_version_without_patch() -> None:
    record = build_xcode_version(Version("10.0.0"))

    assert record.version_string == "10.0"
    assert record.version_float == pytest.approx(10.0)
    assert (record.major, record.minor, record.patch) == (10, 0, None)
    assert str(record) == "10.0"


def test_build_xcode_version_with_patch() -> None:
    record = build_xcode_version(Version("10.3.1"))

    assert record.version_string == "10.3.1"
    assert record.version_float == pytest.approx(10.3)
    assert record.patch == 1
