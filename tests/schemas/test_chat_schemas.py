"""Tests for chat request validation"""

import pytest

from cognita_gateway.schemas.chat import (
    ChatRequestValidationError,
    flatten_validation_errors,
    validate_chat_request,
)


def _payload(**overrides):
    payload = {
        "provider": "cerebras",
        "model": "llama3.1-8b",
        "messages": [{"role": "user", "content": "Hello"}],
    }
    payload.update(overrides)
    return payload


class TestValidateChatRequest:
    def test_minimal_request(self):
        request = validate_chat_request(_payload())

        assert request.provider == "cerebras"
        assert request.temperature is None
        assert request.max_tokens is None
        assert request.providers is None
        assert request.strategy is None

    def test_full_request_preserves_message_order(self):
        messages = [
            {"role": "system", "content": "Be brief"},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "Summarize my week"},
        ]
        request = validate_chat_request(
            _payload(
                provider="ensemble",
                messages=messages,
                temperature=0.7,
                max_tokens=256,
                providers=["replicate", "cerebras"],
                strategy="combine",
            )
        )

        assert request.message_dicts() == messages
        assert request.providers == ["replicate", "cerebras"]
        assert request.prompt_chars == sum(len(m["content"]) for m in messages)

    def test_unknown_top_level_keys_ignored(self):
        request = validate_chat_request(_payload(stream=True, user="abc"))
        assert request.model == "llama3.1-8b"

    @pytest.mark.parametrize("temperature", [0, 0.0, 2, 2.0, 1.3])
    def test_temperature_bounds_accepted(self, temperature):
        assert validate_chat_request(_payload(temperature=temperature)).temperature == temperature

    @pytest.mark.parametrize("temperature", [-0.1, 2.01, "0.5", True])
    def test_temperature_rejected(self, temperature):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(_payload(temperature=temperature))
        assert "temperature" in exc_info.value.details["fieldErrors"]

    @pytest.mark.parametrize("max_tokens", [1, 32768])
    def test_max_tokens_bounds_accepted(self, max_tokens):
        assert validate_chat_request(_payload(max_tokens=max_tokens)).max_tokens == max_tokens

    def test_max_tokens_integral_float_accepted(self):
        request = validate_chat_request(_payload(max_tokens=100.0))
        assert request.max_tokens == 100
        assert isinstance(request.max_tokens, int)

    @pytest.mark.parametrize("max_tokens", [0, 32769, 10.5, 32769.0, "100", False, True])
    def test_max_tokens_rejected(self, max_tokens):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(_payload(max_tokens=max_tokens))
        assert "max_tokens" in exc_info.value.details["fieldErrors"]

    def test_empty_messages_rejected(self):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(_payload(messages=[]))
        assert "messages" in exc_info.value.details["fieldErrors"]

    def test_empty_content_rejected(self):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(_payload(messages=[{"role": "user", "content": ""}]))
        assert "messages.0.content" in exc_info.value.details["fieldErrors"]

    def test_unknown_role_and_provider_rejected(self):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(
                _payload(provider="openai", messages=[{"role": "tool", "content": "x"}])
            )
        field_errors = exc_info.value.details["fieldErrors"]
        assert "provider" in field_errors
        assert "messages.0.role" in field_errors

    def test_pseudo_providers_not_allowed_in_candidate_list(self):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(_payload(provider="auto", providers=["cerebras", "ensemble"]))
        assert "providers.1" in exc_info.value.details["fieldErrors"]

    def test_reports_every_violation(self):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request({"provider": "nope", "model": "", "messages": []})

        error = exc_info.value
        assert error.message == "Invalid request body"
        assert set(error.details["fieldErrors"]) == {"provider", "model", "messages"}
        assert error.details["formErrors"] == []

    @pytest.mark.parametrize("payload,received", [([], "list"), (None, "null"), ("x", "str")])
    def test_non_object_body(self, payload, received):
        with pytest.raises(ChatRequestValidationError) as exc_info:
            validate_chat_request(payload)
        assert exc_info.value.details == {
            "formErrors": [f"Expected object, received {received}"],
            "fieldErrors": {},
        }


class TestFlattenValidationErrors:
    def test_groups_by_dotted_path(self):
        details = flatten_validation_errors(
            [
                {"loc": ("body", "messages", 0, "content"), "msg": "too short"},
                {"loc": ("messages", 0, "content"), "msg": "still too short"},
                {"loc": (), "msg": "bad body"},
            ]
        )
        assert details == {
            "formErrors": ["bad body"],
            "fieldErrors": {"messages.0.content": ["too short", "still too short"]},
        }
