"""
Provider Configuration

Defines the upstream LLM vendors the gateway can dispatch to.
To add a vendor, add an entry to PROVIDER_CONFIGS and an adapter in
cognita_gateway.adapters.

Format: provider_name: {display_name, api_key_env, default_base_url, timeout, priority}
"""

from typing import Any

PROVIDER_CONFIGS: dict[str, dict[str, Any]] = {
    "cerebras": {
        "display_name": "Cerebras",
        "api_key_env": "CEREBRAS_API_KEY",
        "default_base_url": "https://api.cerebras.ai/v1",
        "timeout": 30,
        "priority": 1,
    },
    "replicate": {
        "display_name": "Replicate",
        "api_key_env": "REPLICATE_API_TOKEN",
        "default_base_url": "https://api.replicate.com/v1",
        "timeout": 30,
        "priority": 2,
    },
    "meta-llama": {
        "display_name": "Llama API",
        "api_key_env": "LLAMA_API_KEY",
        "default_base_url": "https://api.llama-api.com",
        "timeout": 30,
        "priority": 3,
    },
}

# Default timeout if provider not found
DEFAULT_TIMEOUT = 30

# Fallback order when a request does not name its own candidates
DEFAULT_FALLBACK_ORDER = tuple(
    sorted(PROVIDER_CONFIGS, key=lambda name: PROVIDER_CONFIGS[name]["priority"])
)


def get_provider_timeout(provider_name: str) -> int:
    """Get timeout for a provider"""
    config = PROVIDER_CONFIGS.get(provider_name, {})
    return config.get("timeout", DEFAULT_TIMEOUT)


def parse_fallback_order(raw: str | None) -> tuple[str, ...]:
    """
    Parse a comma separated provider list (AI_FALLBACK_ORDER).

    Unknown names and duplicates are dropped. An empty or fully invalid value
    yields DEFAULT_FALLBACK_ORDER.
    """
    if not raw:
        return DEFAULT_FALLBACK_ORDER

    order: list[str] = []
    for name in raw.split(","):
        name = name.strip().lower()
        if name in PROVIDER_CONFIGS and name not in order:
            order.append(name)

    return tuple(order) or DEFAULT_FALLBACK_ORDER
