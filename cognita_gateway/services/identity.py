"""
Identity resolution.

Exchanges an optional bearer token for a Supabase user id. Anonymous use is
allowed, so any failure resolves to None instead of rejecting the request.
"""

import asyncio
import logging
from typing import Any

from cognita_gateway.config.config import GatewaySettings
from cognita_gateway.config.supabase_config import (
    close_supabase_client,
    get_supabase_client_for_token,
)

logger = logging.getLogger(__name__)


def _extract_user_id(response: Any) -> str | None:
    user = getattr(response, "user", None)
    if user is None and isinstance(response, dict):
        user = response.get("user")
    if user is None:
        return None

    user_id = user.get("id") if isinstance(user, dict) else getattr(user, "id", None)
    return str(user_id) if user_id else None


def _lookup_user_id(token: str, settings: GatewaySettings) -> str | None:
    client = get_supabase_client_for_token(settings, token)
    if client is None:
        return None
    try:
        return _extract_user_id(client.auth.get_user(token))
    finally:
        close_supabase_client(client)


async def resolve_user_id(token: str | None, settings: GatewaySettings) -> str | None:
    """
    Resolve the caller's user id.

    Args:
        token: Bearer token from the Authorization header, if any
        settings: Gateway settings

    Returns:
        The user id, or None for missing/invalid tokens or when Supabase is
        unavailable
    """
    if not token:
        return None

    try:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, _lookup_user_id, token, settings)
    except Exception as e:
        logger.info(f"Could not resolve user from bearer token; continuing anonymously: {e}")
        return None
