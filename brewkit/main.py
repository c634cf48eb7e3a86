"""FastAPI application entry-point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from brewkit import __version__
from brewkit.routers import brew, health
from brewkit.services.homebrew import homebrew
from brewkit.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    setup_logging()
    yield
    # Shutdown: release the command queue worker
    homebrew.close()


app = FastAPI(
    title="brewkit",
    description="Homebrew catalog and package management over a serial command queue",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(brew.router)
