"""
Connection pooling manager for model provider clients.

Keeps one AsyncOpenAI client per provider/base URL/key and one raw
httpx.AsyncClient per provider for non OpenAI-compatible endpoints, so
repeated chat requests reuse keepalive connections.
"""

import hashlib
import logging
from threading import Lock

import httpx
from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

_async_client_pool: dict[str, AsyncOpenAI] = {}
_async_http_pool: dict[str, httpx.AsyncClient] = {}
_pool_lock = Lock()

# Connection pool configuration
DEFAULT_LIMITS = httpx.Limits(
    max_connections=100,  # Maximum total connections
    max_keepalive_connections=20,  # Keep these many connections alive
    keepalive_expiry=30.0,  # Seconds to keep idle connections alive
)


def build_timeout(read_timeout: float) -> httpx.Timeout:
    """Transport timeouts for a provider whose overall budget is ``read_timeout``."""
    return httpx.Timeout(connect=5.0, read=read_timeout, write=10.0, pool=5.0)


def _normalize_base_url(base_url: str) -> str:
    """Normalize base URLs to avoid duplicate cache keys due to trailing slashes."""
    stripped = base_url.strip()
    return stripped[:-1] if stripped.endswith("/") else stripped


def _pool_prefix(provider: str, base_url: str) -> str:
    """Build a stable prefix for all clients of a provider/base_url combination."""
    return f"{provider.lower()}::{_normalize_base_url(base_url)}"


def _api_key_hash(api_key: str | None) -> str:
    """Hash API keys so rotations create distinct clients without storing secrets."""
    if not api_key:
        return "no-key"
    return hashlib.sha256(api_key.encode("utf-8")).hexdigest()[:16]


def _cache_key(provider: str, base_url: str, api_key: str | None) -> str:
    """Generate the full cache key including the hashed API key."""
    return f"{_pool_prefix(provider, base_url)}::{_api_key_hash(api_key)}"


def _get_async_http_client(timeout: httpx.Timeout) -> httpx.AsyncClient:
    """Create an async HTTP client with connection pooling and keepalive."""
    return httpx.AsyncClient(
        timeout=timeout,
        limits=DEFAULT_LIMITS,
        http2=False,
        follow_redirects=True,
    )


def get_pooled_async_client(
    provider: str,
    base_url: str,
    api_key: str,
    timeout: float = 30.0,
) -> AsyncOpenAI:
    """
    Get or create a pooled AsyncOpenAI client for a specific provider.

    Retries are disabled: fallback between providers is the dispatcher's job.

    Args:
        provider: Provider name (e.g., 'cerebras', 'meta-llama')
        base_url: API base URL the SDK appends /chat/completions to
        api_key: API key for authentication
        timeout: Read timeout in seconds

    Returns:
        AsyncOpenAI client with connection pooling enabled
    """
    cache_key = _cache_key(provider, base_url, api_key)

    with _pool_lock:
        client = _async_client_pool.get(cache_key)
        if client is not None:
            return client

        client = AsyncOpenAI(
            base_url=_normalize_base_url(base_url),
            api_key=api_key,
            http_client=_get_async_http_client(build_timeout(timeout)),
            max_retries=0,
        )
        _async_client_pool[cache_key] = client
        logger.info(
            f"Created pooled async client for {provider} (pool size: {len(_async_client_pool)})"
        )

        return client


def get_pooled_async_http_client(provider: str, timeout: float = 30.0) -> httpx.AsyncClient:
    """Get or create a pooled raw httpx client for a provider's REST endpoints."""
    with _pool_lock:
        client = _async_http_pool.get(provider)
        if client is None or client.is_closed:
            client = _get_async_http_client(build_timeout(timeout))
            _async_http_pool[provider] = client
            logger.info(f"Created pooled HTTP client for {provider}")
        return client


async def close_connection_pools() -> None:
    """Close every pooled client. Called during graceful shutdown."""
    with _pool_lock:
        openai_clients = list(_async_client_pool.values())
        http_clients = list(_async_http_pool.values())
        _async_client_pool.clear()
        _async_http_pool.clear()

    for client in openai_clients:
        try:
            await client.close()
        except Exception as e:
            logger.warning(f"Error closing async client: {e}")

    for http_client in http_clients:
        try:
            await http_client.aclose()
        except Exception as e:
            logger.warning(f"Error closing HTTP client: {e}")

    logger.info("Cleared all connection pools")


def get_pool_stats() -> dict[str, int]:
    """Get statistics about current connection pools."""
    with _pool_lock:
        return {
            "openai_clients": len(_async_client_pool),
            "http_clients": len(_async_http_pool),
            "total_clients": len(_async_client_pool) + len(_async_http_pool),
        }
