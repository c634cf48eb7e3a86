"""Strictly serial command queue.

Every command goes through one single-thread executor, so commands submitted
to the same queue run one at a time, in submission order, without any lock
around the external state they touch. Async callers are suspended on a
one-shot future that the worker resolves when the command completes.
"""

from __future__ import annotations

import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence

from brewkit.errors import CommandError, NoResultAfterRunning, WrappedCommandError
from brewkit.models.commands import CommandOutcome, Failure, Success
from brewkit.services.runner import CommandRunner
from brewkit.utils.logging import get_logger

log = get_logger(__name__)


class PendingCommand:
    """One queued command and, once it has run, its outcome."""

    def __init__(self, runner: CommandRunner, command: str, arguments: Sequence[str]) -> None:
        self.runner = runner
        self.command = command
        self.arguments = list(arguments)
        self.result: Optional[CommandOutcome] = None
        self.completion: Optional[Callable[[], None]] = None
        self._completed = False
        self._completed_lock = threading.Lock()

    def main(self) -> None:
        try:
            self.result = Success(self.runner.run(self.command, self.arguments))
        except CommandError as exc:
            self.result = Failure(exc)
        except Exception as exc:
            log.error("cli.queue.command_raised", command=self.command, error=repr(exc))
            self.result = Failure(
                WrappedCommandError(f"{self.command!r} raised {exc!r}", cause=exc),
            )

    def __call__(self) -> None:
        try:
            self.main()
        finally:
            self._complete()

    def _complete(self) -> None:
        with self._completed_lock:
            if self._completed:
                log.error("cli.queue.completed_twice", command=self.command)
                return
            self._completed = True
        if self.completion is not None:
            self.completion()


def _resume(waiter: asyncio.Future, pending: PendingCommand) -> None:
    if waiter.done():
        if waiter.cancelled():
            log.info("cli.queue.caller_gone", command=pending.command)
        else:
            log.error("cli.queue.resumed_twice", command=pending.command)
        return

    outcome = pending.result
    if outcome is None:
        log.error("cli.queue.no_result", command=pending.command)
        waiter.set_exception(
            NoResultAfterRunning(
                f"{pending.command!r} finished without a result",
                details={"arguments": pending.arguments},
            ),
        )
    elif isinstance(outcome, Failure):
        waiter.set_exception(outcome.error)
    else:
        waiter.set_result(outcome.output)


class CommandQueue:
    """Runs commands one at a time, in the order they were enqueued."""

    def __init__(self, runner: CommandRunner) -> None:
        self._runner = runner
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cli-queue")
        self._pending = 0
        self._pending_lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Commands submitted but not yet completed."""
        with self._pending_lock:
            return self._pending

    def _make_pending(self, command: str, arguments: Sequence[str]) -> PendingCommand:
        return PendingCommand(self._runner, command, arguments)

    async def enqueue(self, command: str, arguments: Sequence[str]) -> Optional[bytes]:
        """Queue *command* and wait until it has run.

        Returns the command's stdout, or ``None`` when it printed nothing.
        Raises the ``CommandError`` the command failed with.
        """
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future = loop.create_future()
        pending = self._make_pending(command, arguments)

        def completion() -> None:
            with self._pending_lock:
                self._pending -= 1
            try:
                loop.call_soon_threadsafe(_resume, waiter, pending)
            except RuntimeError:
                log.warning("cli.queue.loop_closed", command=pending.command)

        pending.completion = completion
        with self._pending_lock:
            self._pending += 1
        log.debug("cli.queue.enqueued", command=command, pending=self.pending)
        try:
            self._executor.submit(pending)
        except RuntimeError:
            with self._pending_lock:
                self._pending -= 1
            raise
        return await waiter

    def close(self) -> None:
        """Stop accepting commands. Commands already queued still run."""
        self._executor.shutdown(wait=False)
