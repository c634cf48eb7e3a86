"""Shared pytest fixtures."""

from __future__ import annotations

import os

# Force settings to use test-safe defaults before any import
os.environ.setdefault("BREW_PROCESSOR_PATH", "/bin/sh")
os.environ.setdefault("BREW_PROCESSOR_FLAG", "-c")
os.environ.setdefault("BREW_EXECUTABLE", "brew")
os.environ.setdefault("BREW_API_KEY", "")

import pytest
from httpx import ASGITransport, AsyncClient

from tests.mock_cli import MockCLI


@pytest.fixture
def sh_processor():
    from brewkit.models.commands import CommandProcessor

    return CommandProcessor.sh()


@pytest.fixture
def cli(sh_processor):
    """A real CLI running commands through /bin/sh."""
    from brewkit.services.cli import CLI

    instance = CLI(sh_processor)
    yield instance
    instance.close()


@pytest.fixture
def mock_cli():
    """Provide a fresh MockCLI."""
    return MockCLI()


@pytest.fixture
async def client(mock_cli, monkeypatch):
    """Async test client with a Homebrew facade backed by the mock CLI."""
    monkeypatch.setenv("BREW_API_KEY", "")

    from brewkit.config import Settings
    from brewkit.services.homebrew import Homebrew

    test_settings = Settings(brew_executable="brew")
    mock_brew = Homebrew(cli=mock_cli, cfg=test_settings)

    # Patch singletons
    import brewkit.services.homebrew as hb_mod
    import brewkit.routers.brew as rb
    import brewkit.routers.health as rh

    monkeypatch.setattr(hb_mod, "homebrew", mock_brew)
    monkeypatch.setattr(rb, "homebrew", mock_brew)
    monkeypatch.setattr(rh, "homebrew", mock_brew)

    from brewkit.main import app as fastapi_app

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
