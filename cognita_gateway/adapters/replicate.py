"""
Replicate adapter.

Replicate exposes an OpenAI-compatible chat endpoint for some models. Models
that only accept a single prompt are served through the generic predictions
API instead, so a non-success status from the chat endpoint triggers one
predictions call with the conversation flattened into a prompt.
"""

import logging
from typing import Any

import httpx

from cognita_gateway.adapters.openai_compatible import OpenAICompatibleAdapter, build_chat_kwargs
from cognita_gateway.services.connection_pool import get_pooled_async_http_client
from cognita_gateway.utils.provider_safety import UpstreamError

logger = logging.getLogger(__name__)


def build_prompt(messages: list[dict[str, str]]) -> str:
    """Flatten a conversation into ``ROLE: content`` blocks separated by a blank line."""
    return "\n\n".join(f"{m['role'].upper()}: {m['content']}" for m in messages)


def build_prediction_payload(
    model: str,
    messages: list[dict[str, str]],
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> dict[str, Any]:
    model_input: dict[str, Any] = {"prompt": build_prompt(messages)}
    if temperature is not None:
        model_input["temperature"] = temperature
    if max_tokens is not None:
        model_input["max_tokens"] = max_tokens
    return {"model": model, "input": model_input}


def extract_prediction_output(data: Any) -> str | None:
    """Predictions return ``output`` as a string or a list of streamed fragments."""
    output = data.get("output") if isinstance(data, dict) else None
    if isinstance(output, list):
        return "".join(str(fragment) for fragment in output if fragment is not None)
    if output is None:
        return None
    return str(output)


class ReplicateAdapter(OpenAICompatibleAdapter):
    """Replicate chat completions with a predictions API fallback."""

    async def send_chat(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        logger.info(f"Making Replicate request with model: {model}")
        try:
            return await self.create_chat_completion(
                **build_chat_kwargs(model, messages, temperature, max_tokens)
            )
        except UpstreamError as e:
            # Only an HTTP rejection means the model may need the predictions API.
            if e.status_code is None:
                raise
            logger.info(
                f"Replicate chat endpoint returned {e.status_code}, retrying via predictions API"
            )

        return await self.create_prediction(model, messages, temperature, max_tokens)

    async def create_prediction(
        self,
        model: str,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        api_key = self.require_api_key()
        client = get_pooled_async_http_client(self.name, timeout=self.timeout)
        url = f"{self.settings.base_url.rstrip('/')}/predictions"
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await client.post(
                url,
                json=build_prediction_payload(model, messages, temperature, max_tokens),
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Replicate request failed: {e}", provider=self.name) from e

        if not response.is_success:
            raise UpstreamError(
                f"Replicate error {response.status_code}: {response.text}",
                provider=self.name,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        text = extract_prediction_output(data)
        if not text:
            raise UpstreamError("No output returned from Replicate", provider=self.name)

        logger.info(f"Replicate prediction successful for model: {model}")
        return text
