"""X-API-Key check shared by every non-liveness route."""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from brewkit.config import settings
from brewkit.utils.logging import get_logger

log = get_logger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def _key_matches(presented: str, expected: str) -> bool:
    return secrets.compare_digest(presented.encode(), expected.encode())


async def require_api_key(
    api_key: str | None = Security(_api_key_header),
) -> str:
    """Reject requests whose X-API-Key does not match BREW_API_KEY.

    An unset BREW_API_KEY disables the check, so a local service can run
    without one.
    """
    expected = settings.brew_api_key
    if not expected:
        return "no-key-configured"
    if api_key and _key_matches(api_key, expected):
        return api_key
    log.warning("auth.rejected", key_present=api_key is not None)
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or missing API key",
    )
