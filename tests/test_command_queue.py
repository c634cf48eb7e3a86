"""Tests for the serial command queue."""

from __future__ import annotations

import asyncio

import pytest

from brewkit.errors import CommandIOError, NoResultAfterRunning, WrappedCommandError
from brewkit.services.command_queue import CommandQueue, PendingCommand
from brewkit.services.runner import CommandRunner


@pytest.fixture
def queue(sh_processor):
    q = CommandQueue(CommandRunner(sh_processor))
    yield q
    q.close()


@pytest.mark.asyncio
async def test_enqueue_returns_output(queue):
    assert await queue.enqueue("printf", ["ok"]) == b"ok"


@pytest.mark.asyncio
async def test_enqueue_empty_output_is_none(queue):
    assert await queue.enqueue("true", []) is None


@pytest.mark.asyncio
async def test_commands_run_in_submission_order(queue, tmp_path):
    log_file = tmp_path / "order.log"
    count = 20
    # Earlier commands sleep longer, so any overlap would reorder the log.
    await asyncio.gather(*(
        queue.enqueue(
            "sleep",
            [f"0.0{(count - i) % 10}", "&&", "echo", str(i), ">>", str(log_file)],
        )
        for i in range(count)
    ))
    assert log_file.read_text().split() == [str(i) for i in range(count)]


@pytest.mark.asyncio
async def test_commands_never_overlap(queue, tmp_path):
    log_file = tmp_path / "spans.log"
    span = ["echo", "start", ">>", str(log_file), "&&", "sleep", "0.2", "&&", "echo", "end", ">>", str(log_file)]
    await asyncio.gather(
        queue.enqueue(span[0], span[1:]),
        queue.enqueue(span[0], span[1:]),
        queue.enqueue(span[0], span[1:]),
    )
    assert log_file.read_text().split() == ["start", "end"] * 3


@pytest.mark.asyncio
async def test_failure_does_not_poison_queue(sh_processor):
    class FlakyRunner(CommandRunner):
        def run(self, command, arguments):
            if command == "explode":
                raise CommandIOError("boom")
            return super().run(command, arguments)

    q = CommandQueue(FlakyRunner(sh_processor))
    try:
        failed, ok = await asyncio.gather(
            q.enqueue("explode", []),
            q.enqueue("printf", ["after"]),
            return_exceptions=True,
        )
        assert isinstance(failed, CommandIOError)
        assert ok == b"after"
    finally:
        q.close()


@pytest.mark.asyncio
async def test_unexpected_exception_is_wrapped(sh_processor):
    class BrokenRunner(CommandRunner):
        def run(self, command, arguments):
            raise ValueError("not a command error")

    q = CommandQueue(BrokenRunner(sh_processor))
    try:
        with pytest.raises(WrappedCommandError) as exc_info:
            await q.enqueue("anything", [])
        assert isinstance(exc_info.value.cause, ValueError)
    finally:
        q.close()


@pytest.mark.asyncio
async def test_missing_result_fails_instead_of_hanging(sh_processor):
    class SilentCommand(PendingCommand):
        def main(self):
            pass

    class SilentQueue(CommandQueue):
        def _make_pending(self, command, arguments):
            return SilentCommand(self._runner, command, arguments)

    q = SilentQueue(CommandRunner(sh_processor))
    try:
        with pytest.raises(NoResultAfterRunning):
            await asyncio.wait_for(q.enqueue("true", []), timeout=5)
    finally:
        q.close()


def test_completion_fires_once(sh_processor):
    fired: list[int] = []
    pending = PendingCommand(CommandRunner(sh_processor), "true", [])
    pending.completion = lambda: fired.append(1)
    pending()
    pending._complete()
    assert fired == [1]


@pytest.mark.asyncio
async def test_pending_count_returns_to_zero(queue):
    first = asyncio.ensure_future(queue.enqueue("sleep", ["0.2"]))
    second = asyncio.ensure_future(queue.enqueue("true", []))
    await asyncio.sleep(0.05)
    assert queue.pending == 2
    await asyncio.gather(first, second)
    assert queue.pending == 0
