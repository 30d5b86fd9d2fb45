"""
FastAPI Security Dependencies
Optional bearer token extraction for chat requests
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

# HTTP Bearer security scheme with auto_error=False so anonymous requests pass through
security = HTTPBearer(auto_error=False)


async def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    """
    Return the bearer token from ``Authorization: Bearer <token>``.

    Missing headers, other schemes and empty tokens all resolve to None;
    authentication is optional on every route.
    """
    if credentials is None:
        return None

    token = credentials.credentials.strip()
    return token or None
