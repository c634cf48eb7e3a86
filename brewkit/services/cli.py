"""Async interface to the command line.

Passing ``"command"`` and ``["--foo", "bar"]`` is like typing
``command --foo bar`` into the configured shell. Arguments are joined with
spaces and are not escaped, so callers quote anything the shell should not
interpret.
"""

from __future__ import annotations

import asyncio
import uuid
from typing import Optional, Sequence

from brewkit.config import Settings, settings
from brewkit.errors import StringDecodeError
from brewkit.models.commands import CommandProcessor
from brewkit.services.command_queue import CommandQueue
from brewkit.services.runner import CommandRunner
from brewkit.utils.logging import get_logger

log = get_logger(__name__)


def decode_output(data: Optional[bytes], encoding: str = "utf-8") -> Optional[str]:
    if data is None:
        return None
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        log.error("cli.decode_failed", encoding=encoding, bytes=len(data))
        raise StringDecodeError(
            f"Output is not valid {encoding} text",
            details={"bytes": len(data)},
            cause=exc,
            encoding=encoding,
        ) from exc


def split_lines(text: Optional[str]) -> list[str]:
    """Split on newline boundaries; a trailing newline adds no empty line."""
    if not text:
        return []
    return text.splitlines()


class CLI:
    """A command-line interface whose commands never overlap."""

    def __init__(
        self,
        processor: CommandProcessor | None = None,
        cfg: Settings | None = None,
    ) -> None:
        self._cfg = cfg or settings
        self.processor = processor or CommandProcessor.from_settings(self._cfg)
        self._runner = CommandRunner(self.processor, cfg=self._cfg)
        self._queue = CommandQueue(self._runner)

    @property
    def pending(self) -> int:
        return self._queue.pending

    # ── raw output ────────────────────────────────────────────────────

    async def run(self, command: str, arguments: Sequence[str] = ()) -> Optional[bytes]:
        return await self._queue.enqueue(command, arguments)

    async def run_args(self, command: str, *arguments: str) -> Optional[bytes]:
        return await self.run(command, arguments)

    async def output(self, command: str, arguments: Sequence[str] = ()) -> Optional[bytes]:
        """The bytes *command* wrote to stdout, ``None`` if it wrote none."""
        return await self.run(command, arguments)

    # ── text output ───────────────────────────────────────────────────

    async def run_text(
        self,
        command: str,
        arguments: Sequence[str] = (),
        *,
        encoding: str | None = None,
    ) -> Optional[str]:
        data = await self.run(command, arguments)
        return decode_output(data, encoding or self._cfg.brew_output_encoding)

    async def output_text(
        self,
        command: str,
        arguments: Sequence[str] = (),
        *,
        encoding: str | None = None,
    ) -> str:
        """Like ``run_text`` but no output comes back as an empty string."""
        return await self.run_text(command, arguments, encoding=encoding) or ""

    async def output_lines(
        self,
        command: str,
        arguments: Sequence[str] = (),
        *,
        encoding: str | None = None,
    ) -> list[str]:
        return split_lines(await self.run_text(command, arguments, encoding=encoding))

    # ── blocking ──────────────────────────────────────────────────────

    def run_blocking(self, command: str, arguments: Sequence[str] = ()) -> Optional[bytes]:
        """Run *command* from synchronous code and wait for its output.

        Goes through the same queue as ``run``. Must not be called while an
        event loop is running in this thread.
        """
        return asyncio.run(self.run(command, arguments))

    # ── sanity check ──────────────────────────────────────────────────

    async def sanity_check(self) -> bool:
        """Echo a fresh UUID and check it comes back unchanged."""
        token = str(uuid.uuid4())
        try:
            echoed = await self.output_text("echo", ["-n", token])
        except Exception as exc:
            log.error("cli.sanity_check_failed", error=str(exc))
            return False
        if echoed != token:
            log.warning("cli.sanity_check_mismatch", expected=token, got=echoed)
            return False
        return True

    def close(self) -> None:
        self._queue.close()
