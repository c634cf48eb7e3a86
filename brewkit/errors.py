"""Errors raised while running commands through the CLI queue."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class CommandError(Exception):
    message: str
    details: Optional[dict[str, Any]] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        return self.message


class NoResultAfterRunning(CommandError):
    """The work item finished without recording a success or a failure."""


class CommandIOError(CommandError):
    """The process could not be launched, or its output pipe could not be read."""


@dataclass
class StringDecodeError(CommandError):
    encoding: str = "utf-8"


class WrappedCommandError(CommandError):
    """Any other exception raised while running a command."""


class BrewInfoError(CommandError):
    pass
