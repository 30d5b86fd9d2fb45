from cognita_gateway.config.config import Config, GatewaySettings, ProviderSettings

__all__ = ["Config", "GatewaySettings", "ProviderSettings"]
