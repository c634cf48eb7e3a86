"""Runs one command line through the configured command processor.

The child's stdout is drained on a dedicated thread while the calling thread
waits for the process to exit. Waiting first and reading afterwards deadlocks
as soon as the child writes more than the pipe buffer holds.
"""

from __future__ import annotations

import subprocess
import threading
import time
import uuid
from typing import IO, Optional, Sequence

from brewkit.config import Settings, settings
from brewkit.errors import CommandIOError
from brewkit.models.commands import CommandProcessor
from brewkit.utils.logging import get_logger

log = get_logger(__name__)


def build_command_line(command: str, arguments: Sequence[str]) -> str:
    """Join *command* and *arguments* with single spaces. Nothing is quoted."""
    return " ".join([command, *arguments])


class _Drain:
    """Reads a pipe to end-of-stream on its own thread."""

    def __init__(self, runner: CommandRunner, stream: IO[bytes], name: str, call_log) -> None:
        self._runner = runner
        self._stream = stream
        self._log = call_log
        self.buffer = bytearray()
        self.error: Optional[BaseException] = None
        self.thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self.thread.start()

    def join(self) -> None:
        self.thread.join()

    def _run(self) -> None:
        self._log.debug("cli.reading")
        try:
            while True:
                chunk = self._runner._read_chunk(self._stream)
                if not chunk:
                    break
                self._log.debug("cli.read_chunk", bytes=len(chunk))
                self.buffer.extend(chunk)
            self._log.debug("cli.read_done", bytes=len(self.buffer))
        except Exception as exc:
            self._log.error("cli.read_failed", error=str(exc), partial_bytes=len(self.buffer))
            self.error = exc
        finally:
            # A child still writing gets EPIPE instead of blocking on a reader that is gone.
            try:
                self._stream.close()
            except OSError:
                pass


class CommandRunner:
    """Spawns one process per call and captures its entire standard output."""

    def __init__(
        self,
        processor: CommandProcessor | None = None,
        *,
        chunk_size: int | None = None,
        cfg: Settings | None = None,
    ) -> None:
        _cfg = cfg or settings
        self.processor = processor or CommandProcessor.from_settings(_cfg)
        self.chunk_size = chunk_size or _cfg.brew_read_chunk_size

    def argv(self, command: str, arguments: Sequence[str]) -> list[str]:
        return self.processor.argv(build_command_line(command, arguments))

    def _spawn(self, argv: list[str]) -> subprocess.Popen:
        # stdin and stderr stay inherited from this process.
        return subprocess.Popen(argv, stdout=subprocess.PIPE)

    def _read_chunk(self, stream: IO[bytes]) -> bytes:
        return stream.read1(self.chunk_size)

    def run(self, command: str, arguments: Sequence[str]) -> Optional[bytes]:
        """Run *command* with *arguments* and block until it has finished.

        Returns the bytes the command wrote to stdout, or ``None`` when it
        wrote nothing. The exit code is logged but not inspected.
        """
        call_id = uuid.uuid4().hex[:8]
        call_log = log.bind(command=command, call_id=call_id)
        argv = self.argv(command, arguments)

        call_log.debug("cli.about_to_run", argv=argv)
        started = time.monotonic()
        try:
            process = self._spawn(argv)
        except OSError as exc:
            call_log.error("cli.launch_failed", error=str(exc))
            raise CommandIOError(
                f"Could not launch {self.processor.path!r} for {command!r}: {exc}",
                details={"argv": argv},
                cause=exc,
            ) from exc
        call_log.debug("cli.running", pid=process.pid)

        drain = _Drain(self, process.stdout, f"drain-{command}-{call_id}", call_log)
        drain.start()

        returncode = process.wait()
        drain.join()

        elapsed = time.monotonic() - started
        if drain.error is not None:
            raise CommandIOError(
                f"Reading output of {command!r} failed: {drain.error}",
                details={"argv": argv, "returncode": returncode},
                cause=drain.error,
            ) from drain.error

        if drain.buffer:
            call_log.debug("cli.done", bytes=len(drain.buffer), returncode=returncode, elapsed=elapsed)
            return bytes(drain.buffer)

        call_log.debug("cli.done", bytes=0, returncode=returncode, elapsed=elapsed)
        return None
