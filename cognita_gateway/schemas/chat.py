"""
Chat request/response models and request validation.

validate_chat_request() is the single entry point for turning an inbound JSON
payload into a ChatRequest. It reports every violated constraint at once so
the caller can fix a request in one round trip.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cognita_gateway.constants import MAX_TOKENS_LIMIT

ChatRole = Literal["system", "user", "assistant"]
ConcreteProvider = Literal["cerebras", "meta-llama", "replicate"]
RequestedProvider = Literal["cerebras", "meta-llama", "replicate", "auto", "ensemble"]
DispatchStrategyName = Literal["fallback", "combine"]

INVALID_BODY_MESSAGE = "Invalid request body"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: ChatRole
    content: str = Field(min_length=1)


class ChatRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: RequestedProvider
    model: str = Field(min_length=1)
    messages: list[ChatMessage] = Field(min_length=1)
    temperature: float | None = Field(default=None, ge=0.0, le=2.0, strict=True)
    max_tokens: int | None = Field(default=None, ge=1, le=MAX_TOKENS_LIMIT, strict=True)
    providers: list[ConcreteProvider] | None = None
    strategy: DispatchStrategyName | None = None

    @field_validator("max_tokens", mode="before")
    @classmethod
    def integral_float_max_tokens(cls, value: Any) -> Any:
        # 100.0 is a whole number; 100.5 still fails strict int validation
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return value

    @property
    def prompt_chars(self) -> int:
        return sum(len(message.content) for message in self.messages)

    def message_dicts(self) -> list[dict[str, str]]:
        """Messages in upstream wire form, order preserved."""
        return [{"role": message.role, "content": message.content} for message in self.messages]


class ChatCompletionResponse(BaseModel):
    content: str
    model: str
    provider: str
    latency_ms: int


class ChatRequestValidationError(Exception):
    """Raised when an inbound chat payload violates the request schema."""

    def __init__(self, details: dict[str, Any], message: str = INVALID_BODY_MESSAGE):
        super().__init__(message)
        self.message = message
        self.details = details


def flatten_validation_errors(errors: list[dict[str, Any]]) -> dict[str, Any]:
    """
    Group pydantic error entries by field path.

    Returns:
        {"formErrors": [...], "fieldErrors": {"messages.0.content": [...], ...}}
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = {}

    for error in errors:
        message = error.get("msg", "Invalid value")
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        if not location:
            form_errors.append(message)
            continue
        field_errors.setdefault(".".join(location), []).append(message)

    return {"formErrors": form_errors, "fieldErrors": field_errors}


def validate_chat_request(payload: Any) -> ChatRequest:
    """
    Validate an arbitrary JSON-like payload.

    Raises:
        ChatRequestValidationError: with the full set of field errors
    """
    if not isinstance(payload, dict):
        received = "null" if payload is None else type(payload).__name__
        raise ChatRequestValidationError(
            {"formErrors": [f"Expected object, received {received}"], "fieldErrors": {}}
        )

    try:
        return ChatRequest.model_validate(payload)
    except ValidationError as e:
        raise ChatRequestValidationError(flatten_validation_errors(e.errors())) from None
