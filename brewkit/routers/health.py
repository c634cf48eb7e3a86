"""Health-check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from brewkit import __version__
from brewkit.auth import require_api_key
from brewkit.models.responses import CliHealthResponse, HealthResponse
from brewkit.services.homebrew import homebrew

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def service_health() -> HealthResponse:
    """Basic liveness probe (no auth required)."""
    return HealthResponse(status="ok", version=__version__)


@router.get(
    "/cli/health",
    response_model=CliHealthResponse,
    dependencies=[Depends(require_api_key)],
)
async def cli_health() -> CliHealthResponse:
    """Check that commands round-trip through the shell."""
    cli = homebrew.cli
    healthy = await cli.sanity_check()
    return CliHealthResponse(
        healthy=healthy,
        pending=cli.pending,
        processor_path=cli.processor.path,
        execution_flag=cli.processor.execution_flag,
    )
