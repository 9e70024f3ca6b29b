from __future__ import annotations

import re

from fastapi import Header, HTTPException, status

from hireprep.core.config import settings

_CLIENT_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")
DEFAULT_CLIENT_ID = "default"


def check_api_key(x_api_key: str | None) -> None:
    if not settings.api_key:
        return
    if x_api_key != settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Please provide a valid API key.",
        )


def resolve_client_id(
    x_client_id: str | None = Header(default=None, alias="X-Client-Id"),
) -> str:
    """Namespace for per-client storage; absent header means the default client."""
    if x_client_id is None or not x_client_id.strip():
        return DEFAULT_CLIENT_ID
    candidate = x_client_id.strip()
    if not _CLIENT_ID_RE.match(candidate):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Client-Id must be 1-64 characters of letters, digits, '-' or '_'.",
        )
    return candidate
