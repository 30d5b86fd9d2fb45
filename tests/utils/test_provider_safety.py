"""Tests for provider error types and response helpers"""

import asyncio
from unittest.mock import MagicMock

import pytest

from cognita_gateway.utils.provider_safety import (
    AllProvidersFailedError,
    ProviderConfigurationError,
    ProviderError,
    ProviderTimeoutError,
    UpstreamError,
    extract_completion_text,
    run_with_timeout,
)


class TestErrorHierarchy:
    def test_all_provider_failures_share_base(self):
        for error_cls in (ProviderConfigurationError, UpstreamError, ProviderTimeoutError):
            assert issubclass(error_cls, ProviderError)
        assert issubclass(AllProvidersFailedError, ProviderError)

    def test_upstream_error_fields(self):
        error = UpstreamError("Replicate error 500: x", provider="replicate", status_code=500, body="x")
        assert str(error) == "Replicate error 500: x"
        assert (error.provider, error.status_code, error.body) == ("replicate", 500, "x")


class TestRunWithTimeout:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def quick():
            return "done"

        assert await run_with_timeout(quick(), "cerebras", 1.0) == "done"

    @pytest.mark.asyncio
    async def test_converts_hang(self):
        with pytest.raises(ProviderTimeoutError) as exc_info:
            await run_with_timeout(asyncio.sleep(5), "replicate", 0.01)

        assert str(exc_info.value) == "replicate request timed out after 0.01s"
        assert exc_info.value.provider == "replicate"

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self):
        async def broken():
            raise UpstreamError("nope")

        with pytest.raises(UpstreamError, match="nope"):
            await run_with_timeout(broken(), "cerebras", 1.0)


class TestExtractCompletionText:
    def test_dict_response(self):
        response = {"choices": [{"message": {"role": "assistant", "content": "hi"}}]}
        assert extract_completion_text(response, "Cerebras") == "hi"

    def test_object_response(self):
        response = MagicMock()
        response.choices = [MagicMock(message=MagicMock(content="hello"))]
        assert extract_completion_text(response, "Cerebras") == "hello"

    @pytest.mark.parametrize(
        "response",
        [
            {},
            {"choices": []},
            {"choices": [{}]},
            {"choices": [{"message": {"content": ""}}]},
            {"choices": [{"message": {"content": None}}]},
        ],
    )
    def test_missing_content(self, response):
        with pytest.raises(UpstreamError, match="No completion returned from Llama API"):
            extract_completion_text(response, "Llama API", provider="meta-llama")
