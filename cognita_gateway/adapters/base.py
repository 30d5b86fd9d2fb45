"""
Base adapter interface for upstream chat providers.

Every vendor adapter exposes the same narrow capability, send_chat(), and
owns all vendor specific request building and response parsing. The
dispatcher only ever sees plain text or a ProviderError.
"""

from abc import ABC, abstractmethod

from cognita_gateway.config.config import ProviderSettings
from cognita_gateway.utils.provider_safety import ProviderConfigurationError


class BaseProviderAdapter(ABC):
    """
    Abstract base class for provider adapters.

    Adapters never retry. Retry and fallback across vendors live in
    ChatDispatcher.
    """

    def __init__(self, settings: ProviderSettings):
        self.settings = settings

    @property
    def name(self) -> str:
        return self.settings.name

    @property
    def display_name(self) -> str:
        return self.settings.display_name

    @property
    def timeout(self) -> float:
        return self.settings.timeout

    def require_api_key(self) -> str:
        """
        Return the configured credential.

        Raises:
            ProviderConfigurationError: If the credential is not set
        """
        if not self.settings.api_key:
            raise ProviderConfigurationError(
                f"{self.settings.api_key_env} not configured", provider=self.name
            )
        return self.settings.api_key

    @abstractmethod
    async def send_chat(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """
        Send a chat conversation upstream and return the completion text.

        Args:
            model: Vendor model identifier, forwarded as-is
            messages: Ordered [{"role", "content"}] list, forwarded verbatim
            temperature: Optional sampling temperature
            max_tokens: Optional completion length cap

        Raises:
            ProviderError: On missing configuration, upstream failure or empty output
        """
        pass
