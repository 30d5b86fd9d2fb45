"""
OpenAI-compatible chat completions adapter.

Shared by every vendor exposing ``POST {base}/chat/completions`` with the
OpenAI request/response shape. Requests go through a pooled AsyncOpenAI
client with retries disabled.
"""

import logging
from typing import Any

from openai import APIConnectionError, APIStatusError

from cognita_gateway.adapters.base import BaseProviderAdapter
from cognita_gateway.services.connection_pool import get_pooled_async_client
from cognita_gateway.utils.provider_safety import UpstreamError, extract_completion_text

logger = logging.getLogger(__name__)


def build_chat_kwargs(
    model: str,
    messages: list[dict[str, str]],
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> dict[str, Any]:
    """Build chat.completions.create() arguments, omitting unset sampling options."""
    kwargs: dict[str, Any] = {"model": model, "messages": messages, "stream": False}
    if temperature is not None:
        kwargs["temperature"] = temperature
    if max_tokens is not None:
        kwargs["max_tokens"] = max_tokens
    return kwargs


class OpenAICompatibleAdapter(BaseProviderAdapter):
    """Adapter for vendors that speak the OpenAI Chat Completions format."""

    @property
    def api_base_url(self) -> str:
        """Base URL the SDK appends ``/chat/completions`` to."""
        return self.settings.base_url

    def get_client(self):
        api_key = self.require_api_key()
        return get_pooled_async_client(
            provider=self.name,
            base_url=self.api_base_url,
            api_key=api_key,
            timeout=self.timeout,
        )

    async def create_chat_completion(self, **kwargs) -> str:
        """
        Call the chat completions endpoint and return the completion text.

        Raises:
            UpstreamError: status_code is set for non-success HTTP responses and
                None for transport failures or an empty completion
        """
        client = self.get_client()
        try:
            response = await client.chat.completions.create(**kwargs)
        except APIStatusError as e:
            body = e.response.text
            logger.warning(f"{self.display_name} returned {e.status_code} for model {kwargs.get('model')}")
            raise UpstreamError(
                f"{self.display_name} error {e.status_code}: {body}",
                provider=self.name,
                status_code=e.status_code,
                body=body,
            ) from e
        except APIConnectionError as e:
            raise UpstreamError(
                f"{self.display_name} request failed: {e}", provider=self.name
            ) from e

        return extract_completion_text(response, self.display_name, provider=self.name)

    async def send_chat(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        logger.info(f"Making {self.display_name} request with model: {model}")
        logger.debug(f"Request params: message_count={len(messages)}")

        text = await self.create_chat_completion(
            **build_chat_kwargs(model, messages, temperature, max_tokens)
        )

        logger.info(f"{self.display_name} request successful for model: {model}")
        return text
