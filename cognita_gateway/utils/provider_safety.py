"""
Provider Safety Utilities

Error types for upstream provider calls, timeout enforcement and safe
extraction of completion text from OpenAI-compatible responses.
"""

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """Raised when a provider's credential or base URL is missing."""

    pass


class UpstreamError(ProviderError):
    """Raised when a provider answers with a non-success status or no content."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.body = body


class ProviderTimeoutError(ProviderError):
    """Raised when provider request times out."""

    pass


class AllProvidersFailedError(ProviderError):
    """Raised when no candidate provider produced a result."""

    def __init__(self, message: str, errors: dict[str, Exception] | None = None):
        super().__init__(message)
        self.errors = errors or {}


async def run_with_timeout(awaitable: Awaitable[T], provider_name: str, timeout: float) -> T:
    """
    Await a provider call, converting a hang into ProviderTimeoutError.

    Args:
        awaitable: Pending provider call
        provider_name: Provider name (for logging and the error)
        timeout: Timeout in seconds

    Raises:
        ProviderTimeoutError: If the call does not finish in time
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error(f"{provider_name} call timed out after {timeout}s")
        raise ProviderTimeoutError(
            f"{provider_name} request timed out after {timeout:g}s", provider=provider_name
        ) from None


def extract_completion_text(response: Any, display_name: str, provider: str | None = None) -> str:
    """
    Safely extract ``choices[0].message.content`` from a chat completion.

    Accepts both SDK response objects and plain dicts.

    Raises:
        UpstreamError: If there is no non-empty completion text
    """
    if isinstance(response, dict):
        choices = response.get("choices") or []
    else:
        choices = getattr(response, "choices", None) or []

    text = None
    if choices:
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else getattr(first, "message", None)
        if isinstance(message, dict):
            text = message.get("content")
        elif message is not None:
            text = getattr(message, "content", None)

    if not text or not isinstance(text, str):
        raise UpstreamError(f"No completion returned from {display_name}", provider=provider)

    return text
