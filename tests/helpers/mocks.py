"""
Reusable mock patterns for gateway tests.

- Settings factories with explicit provider credentials
- FakeAdapter: scripted provider adapter that records its calls
- MockSupabaseClient: records ai_logs inserts and auth lookups

Usage:
    from tests.helpers.mocks import FakeAdapter, make_settings

    adapter = FakeAdapter("cerebras", text="hello")
"""

import asyncio
from types import MappingProxyType
from typing import Any
from unittest.mock import MagicMock

from cognita_gateway.adapters.base import BaseProviderAdapter
from cognita_gateway.config.config import GatewaySettings, ProviderSettings
from cognita_gateway.config.providers import PROVIDER_CONFIGS

DEFAULT_ORDER = ("cerebras", "replicate", "meta-llama")


def make_provider_settings(
    name: str,
    api_key: str | None = "test-key",
    base_url: str | None = None,
    timeout: float = 30.0,
) -> ProviderSettings:
    provider_config = PROVIDER_CONFIGS[name]
    return ProviderSettings(
        name=name,
        display_name=provider_config["display_name"],
        api_key_env=provider_config["api_key_env"],
        api_key=api_key,
        base_url=base_url or provider_config["default_base_url"],
        timeout=timeout,
    )


def make_settings(
    supabase: bool = False,
    fallback_order: tuple[str, ...] = DEFAULT_ORDER,
    **overrides: Any,
) -> GatewaySettings:
    providers = {name: make_provider_settings(name) for name in PROVIDER_CONFIGS}
    values = {
        "app_env": "testing",
        "supabase_url": "https://test.supabase.co" if supabase else None,
        "supabase_anon_key": "anon-key" if supabase else None,
        "providers": MappingProxyType(providers),
        "fallback_order": fallback_order,
        "usage_log_drain_timeout": 1.0,
    }
    values.update(overrides)
    return GatewaySettings(**values)


# ============================================================================
# Provider Adapter Mocks
# ============================================================================


class FakeAdapter(BaseProviderAdapter):
    """
    Scripted adapter.

    Returns ``text`` after ``delay`` seconds, or raises ``error`` if given.
    Every invocation is appended to ``calls``.
    """

    def __init__(
        self,
        name: str,
        text: str | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        timeout: float = 30.0,
    ):
        super().__init__(make_provider_settings(name, timeout=timeout))
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: list[dict[str, Any]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def send_chat(self, model, messages, temperature=None, max_tokens=None) -> str:
        self.calls.append(
            {
                "model": model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


# ============================================================================
# Supabase Client Mocks
# ============================================================================


class MockSupabaseClient:
    """Records table inserts; auth.get_user returns ``user_id`` or raises ``auth_error``."""

    def __init__(self, user_id: str | None = "user-123", auth_error: Exception | None = None):
        self.inserted: list[tuple[str, dict]] = []
        self.auth = MagicMock()
        if auth_error is not None:
            self.auth.get_user.side_effect = auth_error
        else:
            user = MagicMock()
            user.id = user_id
            response = MagicMock()
            response.user = user if user_id else None
            self.auth.get_user.return_value = response
        self.postgrest = MagicMock()

    @property
    def closed(self) -> bool:
        """True once both the PostgREST session and the auth HTTP client were closed."""
        return self.postgrest.session.close.called and self.auth._http_client.close.called

    def table(self, name: str):
        client = self

        class _Query:
            def insert(self, row):
                client.inserted.append((name, row))
                return self

            def execute(self):
                result = MagicMock()
                result.data = [row for table, row in client.inserted if table == name]
                return result

        return _Query()
