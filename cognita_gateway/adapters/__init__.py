"""Upstream LLM vendor adapters. Each one implements send_chat() for a single vendor."""

from cognita_gateway.adapters.base import BaseProviderAdapter
from cognita_gateway.adapters.cerebras import CerebrasAdapter
from cognita_gateway.adapters.meta_llama import MetaLlamaAdapter
from cognita_gateway.adapters.openai_compatible import OpenAICompatibleAdapter
from cognita_gateway.adapters.replicate import ReplicateAdapter

__all__ = [
    "BaseProviderAdapter",
    "OpenAICompatibleAdapter",
    "CerebrasAdapter",
    "MetaLlamaAdapter",
    "ReplicateAdapter",
]
