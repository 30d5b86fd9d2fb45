"""Meta Llama API adapter.

The Llama API base URL is configured without a version segment, so requests
go to ``{LLAMA_API_BASE}/v1/chat/completions``.
"""

from cognita_gateway.adapters.openai_compatible import OpenAICompatibleAdapter


class MetaLlamaAdapter(OpenAICompatibleAdapter):
    @property
    def api_base_url(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/v1"
