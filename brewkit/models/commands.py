"""Command-related data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel

from brewkit.config import Settings, settings
from brewkit.errors import CommandError


class CommandProcessor(BaseModel):
    """The shell or interpreter every command line is handed to.

    ``execution_flag`` is the argument telling the processor that what follows
    is a command string, like ``-c`` for ``sh -c``. When it is ``None`` the
    processor receives the command line as its only argument.
    """

    path: str
    execution_flag: Optional[str] = "-c"

    model_config = {"frozen": True}

    def argv(self, command_line: str) -> list[str]:
        args = [self.path]
        if self.execution_flag is not None:
            args.append(self.execution_flag)
        args.append(command_line)
        return args

    @classmethod
    def sh(cls) -> CommandProcessor:
        return cls(path="/bin/sh", execution_flag="-c")

    @classmethod
    def bash(cls) -> CommandProcessor:
        return cls(path="/bin/bash", execution_flag="-c")

    @classmethod
    def zsh(cls) -> CommandProcessor:
        return cls(path="/bin/zsh", execution_flag="-c")

    @classmethod
    def from_settings(cls, cfg: Settings | None = None) -> CommandProcessor:
        _cfg = cfg or settings
        # An empty flag from the environment means "no flag"
        return cls(path=_cfg.brew_processor_path, execution_flag=_cfg.brew_processor_flag or None)


@dataclass(frozen=True)
class Success:
    output: Optional[bytes] = None


@dataclass(frozen=True)
class Failure:
    error: CommandError


CommandOutcome = Union[Success, Failure]

