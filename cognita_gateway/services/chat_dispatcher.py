"""
Chat Dispatcher

Decides which upstream provider(s) serve a validated chat request and runs
one of three strategies:

- direct: call exactly the named provider
- fallback: try candidates one at a time, first success wins
- ensemble: call every candidate concurrently and merge the successes

Every adapter call is bounded by the provider's timeout, so a hung vendor
fails like any other and fallback moves on.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping, Sequence

from cognita_gateway.adapters.base import BaseProviderAdapter
from cognita_gateway.constants import (
    ALL_PROVIDERS_FAILED_MESSAGE,
    AUTO_PROVIDER,
    ENSEMBLE_PROVIDER,
    ENSEMBLE_SECTION_SEPARATOR,
)
from cognita_gateway.schemas.chat import ChatRequest
from cognita_gateway.services.prometheus_metrics import track_provider_call
from cognita_gateway.utils.provider_safety import (
    AllProvidersFailedError,
    ProviderConfigurationError,
    run_with_timeout,
)

logger = logging.getLogger(__name__)


class DispatchStrategy(str, Enum):
    DIRECT = "direct"
    FALLBACK = "fallback"
    ENSEMBLE = "ensemble"


def select_strategy(request: ChatRequest) -> DispatchStrategy:
    """Fallback takes precedence over ensemble, direct is the default."""
    if request.provider == AUTO_PROVIDER or request.strategy == "fallback":
        return DispatchStrategy.FALLBACK
    if request.provider == ENSEMBLE_PROVIDER or request.strategy == "combine":
        return DispatchStrategy.ENSEMBLE
    return DispatchStrategy.DIRECT


def dedupe(names: Iterable[str]) -> list[str]:
    """Drop repeated names, keeping the first occurrence."""
    return list(dict.fromkeys(names))


def format_ensemble_content(sections: Sequence[tuple[str, str]]) -> str:
    return ENSEMBLE_SECTION_SEPARATOR.join(
        f"### {provider}\n\n{text}" for provider, text in sections
    )


@dataclass(frozen=True)
class ProviderResult:
    """Normalized text output tagged with the provider that produced it."""

    provider: str
    content: str


class ChatDispatcher:
    """
    Runs a chat request against the registered provider adapters.

    Args:
        adapters: Provider name -> adapter
        fallback_order: Candidates used when a request names none
    """

    def __init__(self, adapters: Mapping[str, BaseProviderAdapter], fallback_order: Sequence[str]):
        self.adapters = dict(adapters)
        self.fallback_order = tuple(fallback_order)

    def candidates_for(self, request: ChatRequest) -> list[str]:
        if request.providers is not None:
            return list(request.providers)
        return list(self.fallback_order)

    async def dispatch(self, request: ChatRequest) -> ProviderResult:
        """
        Execute the request's strategy.

        Raises:
            ProviderError: The terminal failure. For fallback this is the last
                candidate's error, for direct the adapter's own error.
        """
        strategy = select_strategy(request)
        logger.info(
            f"Dispatching chat request: provider={request.provider} strategy={strategy.value} "
            f"model={request.model}"
        )

        if strategy is DispatchStrategy.FALLBACK:
            return await self._run_fallback(request, self.candidates_for(request))
        if strategy is DispatchStrategy.ENSEMBLE:
            return await self._run_ensemble(request, dedupe(self.candidates_for(request)))
        return await self._run_direct(request)

    async def call_provider(self, provider: str, request: ChatRequest) -> str:
        """Invoke one adapter with timeout enforcement and metrics."""
        adapter = self.adapters.get(provider)
        if adapter is None:
            raise ProviderConfigurationError(f"Unknown provider: {provider}", provider=provider)

        with track_provider_call(provider, request.model):
            return await run_with_timeout(
                adapter.send_chat(
                    model=request.model,
                    messages=request.message_dicts(),
                    temperature=request.temperature,
                    max_tokens=request.max_tokens,
                ),
                provider_name=provider,
                timeout=adapter.timeout,
            )

    async def _run_direct(self, request: ChatRequest) -> ProviderResult:
        text = await self.call_provider(request.provider, request)
        return ProviderResult(provider=request.provider, content=text)

    async def _run_fallback(self, request: ChatRequest, candidates: list[str]) -> ProviderResult:
        last_error: Exception | None = None

        for idx, provider in enumerate(candidates):
            try:
                logger.info(f"Attempt {idx + 1}/{len(candidates)}: trying {provider}")
                text = await self.call_provider(provider, request)
            except Exception as e:
                logger.warning(f"Provider {provider} failed: {e}")
                last_error = e
                continue

            logger.info(f"Fallback succeeded on {provider}")
            return ProviderResult(provider=provider, content=text)

        if last_error is None:
            raise AllProvidersFailedError(ALL_PROVIDERS_FAILED_MESSAGE)
        raise last_error

    async def _run_ensemble(self, request: ChatRequest, candidates: list[str]) -> ProviderResult:
        outcomes = await asyncio.gather(
            *(self.call_provider(provider, request) for provider in candidates),
            return_exceptions=True,
        )

        sections: list[tuple[str, str]] = []
        errors: dict[str, Exception] = {}
        for provider, outcome in zip(candidates, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                logger.warning(f"Ensemble member {provider} failed: {outcome}")
                errors[provider] = outcome
            else:
                sections.append((provider, outcome))

        if not sections:
            raise AllProvidersFailedError(ALL_PROVIDERS_FAILED_MESSAGE, errors=errors)

        logger.info(f"Ensemble combined {len(sections)}/{len(candidates)} providers")
        return ProviderResult(provider=ENSEMBLE_PROVIDER, content=format_ensemble_content(sections))
