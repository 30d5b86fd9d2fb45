"""Cerebras API adapter.

Cerebras serves open-weight models on wafer-scale hardware behind an
OpenAI-compatible API, so the shared chat completions adapter is used as-is
against ``{CEREBRAS_API_BASE}/chat/completions``.

API Documentation: https://inference-docs.cerebras.ai/api-reference/chat-completions
"""

from cognita_gateway.adapters.openai_compatible import OpenAICompatibleAdapter


class CerebrasAdapter(OpenAICompatibleAdapter):
    """Direct Cerebras inference (vendor base URL already ends in /v1)."""
