"""
Provider registry: maps provider names to adapter instances.
"""

import logging

from cognita_gateway.adapters.base import BaseProviderAdapter
from cognita_gateway.adapters.cerebras import CerebrasAdapter
from cognita_gateway.adapters.meta_llama import MetaLlamaAdapter
from cognita_gateway.adapters.replicate import ReplicateAdapter
from cognita_gateway.config.config import GatewaySettings

logger = logging.getLogger(__name__)

ADAPTER_CLASSES: dict[str, type[BaseProviderAdapter]] = {
    "cerebras": CerebrasAdapter,
    "meta-llama": MetaLlamaAdapter,
    "replicate": ReplicateAdapter,
}


def build_provider_registry(settings: GatewaySettings) -> dict[str, BaseProviderAdapter]:
    """
    Instantiate one adapter per configured vendor.

    Vendors without a credential are still registered; calling them fails
    with ProviderConfigurationError so fallback can move on.
    """
    registry: dict[str, BaseProviderAdapter] = {}
    for name, adapter_cls in ADAPTER_CLASSES.items():
        if name not in settings.providers:
            continue
        provider_settings = settings.provider(name)
        registry[name] = adapter_cls(provider_settings)
        if not provider_settings.enabled:
            logger.warning(f"{provider_settings.api_key_env} not set; {name} calls will fail")

    logger.info(f"Registered providers: {', '.join(registry) or 'none'}")
    return registry
