# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Command line interface printing toolchain facts."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Annotated, TypeVar

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .console import configure_logging, info, ok, warn
from .errors import ResolutionError
from .service import ToolchainInfo

T = TypeVar("T")

app = typer.Typer(help="Inspect the installed Xcode toolchain.", no_args_is_help=True)
console = Console()


class Platform(str, Enum):
    """Simulator platform accepted by the ``sdk`` command."""

    IOS = "ios"
    TVOS = "tvos"


TimeoutOption = Annotated[
    float | None,
    typer.Option("--timeout", "-t", help="Seconds to wait for each external command."),
]


def _run(factory: Callable[[ToolchainInfo], Awaitable[T]]) -> T:
    """Run ``factory`` against a fresh service, mapping failures to exit code 1."""

    service = ToolchainInfo()
    try:
        return asyncio.run(factory(service))
    except ResolutionError as exc:
        console.print(Panel(f"[red]{exc}[/red]", title="Error", border_style="red"))
        raise typer.Exit(code=1) from exc


@app.callback()
def main(verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False) -> None:
    configure_logging(verbose)


@app.command()
def path(timeout: TimeoutOption = None) -> None:
    """Print the Xcode developer directory."""

    console.print(_run(lambda service: service.get_path(timeout)))


@app.command()
def version(
    parse: Annotated[bool, typer.Option("--parse", help="Print every version component.")] = False,
    timeout: TimeoutOption = None,
) -> None:
    """Print the Xcode version."""

    if not parse:
        console.print(_run(lambda service: service.get_version(False, None, timeout)))
        return
    parsed = _run(lambda service: service.get_version(True, None, timeout))
    table = Table(title="Xcode version", box=box.SIMPLE)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for field, value in parsed.model_dump().items():
        table.add_row(field, "" if value is None else str(value))
    console.print(table)


@app.command()
def sdk(
    platform: Annotated[Platform, typer.Option("--platform", "-p", help="Simulator platform.")] = Platform.IOS,
    timeout: TimeoutOption = None,
) -> None:
    """Print the newest simulator SDK version."""

    if platform is Platform.IOS:
        console.print(_run(lambda service: service.get_max_ios_sdk(None, timeout)))
    else:
        console.print(_run(lambda service: service.get_max_tvos_sdk(None, timeout)))


@app.command()
def clang() -> None:
    """Print the Command Line Tools clang version."""

    found = _run(lambda service: service.get_clang_version())
    if found is None:
        warn(console, "clang is not available")
        raise typer.Exit(code=1)
    console.print(found)


@app.command()
def clt() -> None:
    """Print the Command Line Tools package version."""

    found = _run(lambda service: service.get_command_line_tools_version())
    if found is None:
        warn(console, "Command Line Tools are not installed")
        raise typer.Exit(code=1)
    console.print(found)


@app.command()
def devices(timeout: TimeoutOption = None) -> None:
    """List USB-connected iPhones, iPads and Apple TVs."""

    found = _run(lambda service: service.get_connected_devices(timeout))
    if not found:
        info(console, "No devices connected")
        return
    table = Table(title="Connected devices", box=box.SIMPLE, expand=True)
    for column in ("Name", "UDID", "Product ID", "Version"):
        table.add_column(column, overflow="fold")
    for device in found:
        table.add_row(device.name, device.udid or "", device.product_id or "", device.device_version or "")
    console.print(table)


async def _gather_summary(service: ToolchainInfo, timeout: float | None) -> dict[str, str | None]:
    path_value, version_value, ios, tvos, clang_value, clt_value = await asyncio.gather(
        service.get_path(timeout),
        service.get_version(False, None, timeout),
        service.get_max_ios_sdk(None, timeout),
        service.get_max_tvos_sdk(None, timeout),
        service.get_clang_version(),
        service.get_command_line_tools_version(),
    )
    return {
        "Developer path": path_value,
        "Xcode": version_value,
        "iOS SDK": ios,
        "tvOS SDK": tvos,
        "clang": clang_value,
        "Command Line Tools": clt_value,
    }


@app.command()
def summary(timeout: TimeoutOption = None) -> None:
    """Resolve every toolchain fact concurrently and print a table."""

    facts = _run(lambda service: _gather_summary(service, timeout))
    table = Table(title="Xcode toolchain", box=box.SIMPLE, expand=True)
    table.add_column("Fact", style="bold")
    table.add_column("Value", overflow="fold")
    for label, value in facts.items():
        table.add_row(label, value or "-")
    console.print(table)
    ok(console, "Toolchain resolved")


__all__ = ["app"]
