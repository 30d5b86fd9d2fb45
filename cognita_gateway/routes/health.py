"""
Health endpoint

Liveness probe for the gateway. Has no dependencies and writes nothing.
"""

import logging

from fastapi import APIRouter

from cognita_gateway.constants import SERVICE_NAME

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/api/health", tags=["health"])
async def health_check():
    """
    Returns:
        {"ok": true, "service": "cognita-mcp-gateway"}
    """
    return {"ok": True, "service": SERVICE_NAME}
