import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv

from cognita_gateway.config.providers import (
    PROVIDER_CONFIGS,
    get_provider_timeout,
    parse_fallback_order,
)
from cognita_gateway.constants import MAX_REQUEST_BODY_BYTES

# Load environment variables from .env file
load_dotenv()

_TRUTHY = {"1", "true", "yes"}


def _get_env_var(name: str, default: str | None = None, *, strip: bool = True) -> str | None:
    """
    Fetch an environment variable with optional whitespace trimming.

    Args:
        name: Environment variable to look up.
        default: Value to return when the env var is unset or empty.
        strip: Whether to strip leading/trailing whitespace (default: True).

    Returns:
        The normalized string value or the provided default when empty.
    """
    value = os.environ.get(name)
    if value is None:
        return default

    if strip:
        value = value.strip()

    return value or default


def _get_float_env(name: str, default: float) -> float:
    value = _get_env_var(name)
    return float(value) if value else default


@dataclass(frozen=True)
class ProviderSettings:
    """Read-only connection settings for one upstream vendor."""

    name: str
    display_name: str
    api_key_env: str
    api_key: str | None
    base_url: str
    timeout: float

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class GatewaySettings:
    """
    Immutable process-wide settings.

    Built once at startup from Config and handed to the dispatcher, the
    adapters, the identity resolver and the usage logger. Request handling
    never reads the environment directly.
    """

    app_env: str = "development"
    port: int = 4000
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    providers: Mapping[str, ProviderSettings] = field(
        default_factory=lambda: MappingProxyType({})
    )
    fallback_order: tuple[str, ...] = ()
    usage_log_drain_timeout: float = 5.0
    max_request_body_bytes: int = MAX_REQUEST_BODY_BYTES

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def missing_supabase_vars(self) -> list[str]:
        critical_vars = {
            "SUPABASE_URL": self.supabase_url,
            "SUPABASE_ANON_KEY": self.supabase_anon_key,
        }
        return [name for name, value in critical_vars.items() if not value]

    def provider(self, name: str) -> ProviderSettings:
        return self.providers[name]


class Config:
    """Configuration class for the application"""

    # Environment Detection
    APP_ENV = os.environ.get("APP_ENV", "development")  # development, staging, production
    IS_DEVELOPMENT = APP_ENV == "development"

    PORT = int(os.environ.get("PORT", "4000"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Supabase Configuration (identity + usage logging)
    SUPABASE_URL = _get_env_var("SUPABASE_URL")
    SUPABASE_ANON_KEY = _get_env_var("SUPABASE_ANON_KEY")

    # Cerebras Configuration
    CEREBRAS_API_KEY = _get_env_var("CEREBRAS_API_KEY")
    CEREBRAS_API_BASE = _get_env_var(
        "CEREBRAS_API_BASE", PROVIDER_CONFIGS["cerebras"]["default_base_url"]
    )
    CEREBRAS_TIMEOUT = _get_float_env("CEREBRAS_TIMEOUT", get_provider_timeout("cerebras"))

    # Meta Llama API Configuration
    LLAMA_API_KEY = _get_env_var("LLAMA_API_KEY")
    LLAMA_API_BASE = _get_env_var(
        "LLAMA_API_BASE", PROVIDER_CONFIGS["meta-llama"]["default_base_url"]
    )
    LLAMA_TIMEOUT = _get_float_env("LLAMA_TIMEOUT", get_provider_timeout("meta-llama"))

    # Replicate Configuration
    REPLICATE_API_TOKEN = _get_env_var("REPLICATE_API_TOKEN")
    REPLICATE_API_BASE = _get_env_var(
        "REPLICATE_API_BASE", PROVIDER_CONFIGS["replicate"]["default_base_url"]
    )
    REPLICATE_TIMEOUT = _get_float_env("REPLICATE_TIMEOUT", get_provider_timeout("replicate"))

    # Candidate order for provider="auto" when the request names none
    AI_FALLBACK_ORDER = _get_env_var("AI_FALLBACK_ORDER")

    # Seconds to wait for in-flight usage log writes during shutdown
    USAGE_LOG_DRAIN_TIMEOUT = _get_float_env("USAGE_LOG_DRAIN_TIMEOUT", 5.0)

    # ==================== Monitoring & Observability Configuration ====================

    # Sentry Configuration
    SENTRY_DSN = os.environ.get("SENTRY_DSN")
    SENTRY_ENABLED = os.environ.get("SENTRY_ENABLED", "true").lower() in _TRUTHY
    SENTRY_ENVIRONMENT = os.environ.get("SENTRY_ENVIRONMENT", APP_ENV)
    SENTRY_TRACES_SAMPLE_RATE = float(os.environ.get("SENTRY_TRACES_SAMPLE_RATE", "0.1"))
    APP_VERSION = os.environ.get("APP_VERSION", "1.0.0")

    # Prometheus Configuration
    PROMETHEUS_ENABLED = os.environ.get("PROMETHEUS_ENABLED", "true").lower() in _TRUTHY

    @classmethod
    def provider_settings(cls) -> dict[str, ProviderSettings]:
        """Build per-vendor settings from the class attributes."""
        values = {
            "cerebras": (cls.CEREBRAS_API_KEY, cls.CEREBRAS_API_BASE, cls.CEREBRAS_TIMEOUT),
            "meta-llama": (cls.LLAMA_API_KEY, cls.LLAMA_API_BASE, cls.LLAMA_TIMEOUT),
            "replicate": (cls.REPLICATE_API_TOKEN, cls.REPLICATE_API_BASE, cls.REPLICATE_TIMEOUT),
        }

        providers = {}
        for name, (api_key, base_url, timeout) in values.items():
            provider_config = PROVIDER_CONFIGS[name]
            providers[name] = ProviderSettings(
                name=name,
                display_name=provider_config["display_name"],
                api_key_env=provider_config["api_key_env"],
                api_key=api_key,
                base_url=(base_url or provider_config["default_base_url"]).rstrip("/"),
                timeout=float(timeout),
            )
        return providers

    @classmethod
    def to_settings(cls) -> GatewaySettings:
        """Freeze the current configuration into a GatewaySettings instance."""
        return GatewaySettings(
            app_env=cls.APP_ENV,
            port=cls.PORT,
            supabase_url=cls.SUPABASE_URL,
            supabase_anon_key=cls.SUPABASE_ANON_KEY,
            providers=MappingProxyType(cls.provider_settings()),
            fallback_order=parse_fallback_order(cls.AI_FALLBACK_ORDER),
            usage_log_drain_timeout=cls.USAGE_LOG_DRAIN_TIMEOUT,
        )
