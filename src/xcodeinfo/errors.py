# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by toolchain resolvers."""

from __future__ import annotations

from collections.abc import Sequence


class ResolutionError(RuntimeError):
    """Base class for every failure surfaced by a public resolver."""


class ExecutionError(ResolutionError):
    """Raised when a subprocess exits with a non-zero status or times out."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
        *,
        context: str | None = None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Normalised command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
            context: Optional sentence describing what the command was for.
        """
        message = f"Command '{' '.join(command)}' exited with status {returncode}"
        if stderr and stderr.strip():
            message = f"{message}: {stderr.strip()}"
        if context:
            message = f"{context}. Original error: {message}"
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class UnexpectedOutputError(ResolutionError):
    """Raised when a command succeeds but prints something unusable."""


class ValidationError(ResolutionError):
    """Raised when a resolved path does not belong to a full Xcode install."""


class NotFoundError(ResolutionError):
    """Raised when a required file is missing from the expected location."""


class ConfigurationError(ResolutionError, ValueError):
    """Raised when an environment override cannot be parsed."""


__all__ = [
    "ConfigurationError",
    "ExecutionError",
    "NotFoundError",
    "ResolutionError",
    "UnexpectedOutputError",
    "ValidationError",
]
