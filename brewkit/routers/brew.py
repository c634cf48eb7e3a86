"""Homebrew endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from brewkit.auth import require_api_key
from brewkit.errors import CommandError
from brewkit.models.brew import BrewAction, BrewApp
from brewkit.models.responses import (
    AppInfoResponse,
    AppListResponse,
    BrewActionResponse,
    ErrorResponse,
)
from brewkit.services.homebrew import homebrew
from brewkit.services.token_filter import check_token
from brewkit.utils.logging import get_logger

log = get_logger(__name__)

router = APIRouter(
    prefix="/brew",
    tags=["brew"],
    dependencies=[Depends(require_api_key)],
    responses={401: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)

_TOKEN_RESPONSES = {403: {"model": ErrorResponse}}


def _checked(token: str) -> str:
    filt = check_token(token)
    if not filt.allowed:
        raise HTTPException(status_code=403, detail=filt.reason)
    return token.strip()


@router.get("/installed", response_model=AppListResponse)
async def installed_apps() -> AppListResponse:
    try:
        apps = await homebrew.list_installed_apps()
    except CommandError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return AppListResponse(apps=apps, count=len(apps))


@router.get("/apps", response_model=AppListResponse)
async def all_apps() -> AppListResponse:
    try:
        apps = await homebrew.list_all_apps()
    except CommandError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return AppListResponse(apps=apps, count=len(apps))


@router.get("/info/{token:path}", response_model=AppInfoResponse, responses=_TOKEN_RESPONSES)
async def app_info(token: str) -> AppInfoResponse:
    token = _checked(token)
    try:
        info = await homebrew.info(token)
    except CommandError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return AppInfoResponse(token=token, info=info)


@router.get(
    "/describe/{token:path}",
    response_model=BrewApp,
    responses={**_TOKEN_RESPONSES, 404: {"model": ErrorResponse}},
)
async def describe_app(token: str) -> BrewApp:
    token = _checked(token)
    try:
        app = await homebrew.describe(token)
    except CommandError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    if app is None:
        raise HTTPException(status_code=404, detail=f"No cask or formula named {token}")
    return app


@router.post("/update")
async def update() -> dict:
    await homebrew.update()
    return {"status": "ok"}


# Tapped tokens ("homebrew/cask/firefox") span several path segments.
@router.post("/{action}/{token:path}", response_model=BrewActionResponse, responses=_TOKEN_RESPONSES)
async def perform_action(action: BrewAction, token: str) -> BrewActionResponse:
    """Install, uninstall or upgrade one cask."""
    token = _checked(token)
    log.info("brew.action_requested", action=action.value, token=token)
    success = await homebrew.perform(action, token)
    return BrewActionResponse(token=token, action=action, success=success)
