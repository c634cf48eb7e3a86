"""Common API response models."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from brewkit.models.brew import BrewAction


class HealthResponse(BaseModel):
    status: str
    version: str


class CliHealthResponse(BaseModel):
    healthy: bool
    pending: int
    processor_path: str
    execution_flag: Optional[str] = None


class AppListResponse(BaseModel):
    apps: list[str]
    count: int


class AppInfoResponse(BaseModel):
    token: str
    info: Optional[dict[str, Any]] = None


class BrewActionResponse(BaseModel):
    token: str
    action: BrewAction
    success: bool


class ErrorResponse(BaseModel):
    detail: str
