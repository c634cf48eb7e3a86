"""Tests for the CLI facade (real /bin/sh subprocesses)."""

from __future__ import annotations

import uuid

import pytest

from brewkit.errors import StringDecodeError
from brewkit.models.commands import CommandProcessor
from brewkit.services.cli import CLI, decode_output, split_lines


# ── pure helpers ─────────────────────────────────────────────────────────

class TestSplitLines:
    def test_splits_on_newlines(self):
        assert split_lines("a\nb\nc") == ["a", "b", "c"]

    def test_trailing_newline_adds_no_line(self):
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_none_is_no_lines(self):
        assert split_lines(None) == []

    def test_empty_is_no_lines(self):
        assert split_lines("") == []


class TestDecodeOutput:
    def test_none_stays_none(self):
        assert decode_output(None) is None

    def test_utf8(self):
        assert decode_output("café".encode()) == "café"

    def test_invalid_bytes_raise(self):
        with pytest.raises(StringDecodeError) as exc_info:
            decode_output(b"\xff\xfe\xfd", "utf-8")
        assert exc_info.value.encoding == "utf-8"

    def test_unknown_encoding_raises(self):
        with pytest.raises(StringDecodeError) as exc_info:
            decode_output(b"abc", "no-such-codec")
        assert exc_info.value.encoding == "no-such-codec"


# ── through the shell ────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_echo_round_trip(cli):
    token = str(uuid.uuid4())
    assert await cli.output_text("echo", ["-n", token]) == token


@pytest.mark.asyncio
async def test_run_args_variadic(cli):
    assert await cli.run_args("printf", "%s-%s", "a", "b") == b"a-b"


@pytest.mark.asyncio
async def test_output_lines(cli):
    assert await cli.output_lines("printf", ["'a\\nb\\nc'"]) == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_output_lines_no_output(cli):
    assert await cli.output_lines("true") == []


@pytest.mark.asyncio
async def test_output_text_no_output_is_empty_string(cli):
    assert await cli.output_text("true") == ""


@pytest.mark.asyncio
async def test_run_text_no_output_is_none(cli):
    assert await cli.run_text("true") is None


@pytest.mark.asyncio
async def test_run_text_decode_failure(cli):
    with pytest.raises(StringDecodeError):
        await cli.run_text("printf", ["'\\377\\376'"])


@pytest.mark.asyncio
async def test_run_text_other_encoding(cli):
    assert await cli.run_text("printf", ["'\\351'"], encoding="latin-1") == "é"


@pytest.mark.asyncio
async def test_sanity_check_passes(cli):
    assert await cli.sanity_check() is True


@pytest.mark.asyncio
async def test_sanity_check_fails_without_shell():
    broken = CLI(CommandProcessor(path="/nonexistent/shell", execution_flag="-c"))
    try:
        assert await broken.sanity_check() is False
    finally:
        broken.close()


def test_run_blocking(sh_processor):
    blocking_cli = CLI(sh_processor)
    try:
        assert blocking_cli.run_blocking("printf", ["sync"]) == b"sync"
        assert blocking_cli.run_blocking("printf", ["again"]) == b"again"
    finally:
        blocking_cli.close()
