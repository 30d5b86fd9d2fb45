"""
Supabase client construction.

The gateway talks to Supabase for two best-effort jobs: exchanging a caller's
bearer token for a user id, and inserting usage rows. Both run with the
project's anon key plus the caller's JWT so row-level security evaluates the
caller, which means a client is built per token rather than shared.
"""

import logging

from supabase import Client, create_client
from supabase.client import ClientOptions

from cognita_gateway.config.config import GatewaySettings

logger = logging.getLogger(__name__)

# Timeout for PostgREST calls made by short-lived per-request clients
POSTGREST_TIMEOUT = 10


def get_supabase_client_for_token(settings: GatewaySettings, jwt: str | None = None) -> Client | None:
    """
    Build a Supabase client that acts on behalf of ``jwt``.

    Args:
        settings: Gateway settings holding the Supabase URL and anon key
        jwt: Caller's access token, or None for an anonymous client

    Returns:
        A configured client, or None when Supabase is not configured
    """
    if not settings.supabase_configured:
        return None

    headers = {"X-Client-Info": "cognita-gateway/1.0"}
    if jwt:
        headers["Authorization"] = f"Bearer {jwt}"

    client = create_client(
        supabase_url=settings.supabase_url,
        supabase_key=settings.supabase_anon_key,
        options=ClientOptions(
            headers=headers,
            auto_refresh_token=False,
            persist_session=False,
            postgrest_client_timeout=POSTGREST_TIMEOUT,
        ),
    )

    # Make sure table writes carry the caller's token, not the anon key
    if jwt:
        client.postgrest.auth(jwt)

    return client


def close_supabase_client(client: Client) -> None:
    """
    Close the HTTP pools held by a per-request client.

    Each client owns a PostgREST session and an auth HTTP client. A failed
    close is logged and does not propagate.
    """
    pools = (
        ("postgrest", getattr(client.postgrest, "session", None)),
        ("auth", getattr(client.auth, "_http_client", None)),
    )
    for name, http_client in pools:
        if http_client is None:
            continue
        try:
            http_client.close()
        except Exception as e:
            logger.warning(f"Failed to close Supabase {name} client: {e}")


def log_configuration_status(settings: GatewaySettings) -> bool:
    """Log whether identity and usage logging are available. Returns True when configured."""
    missing = settings.missing_supabase_vars()
    if missing:
        logger.warning(
            f"Missing {', '.join(missing)} in env. "
            "Auth and usage logging are disabled; chat dispatch still works."
        )
        return False

    url_value = settings.supabase_url
    masked_url = url_value[:30] + "..." if len(url_value) > 30 else url_value
    logger.info(f"Supabase identity and usage logging enabled ({masked_url})")
    return True
