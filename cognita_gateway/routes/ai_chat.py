"""
AI chat endpoint.

POST /api/ai/chat validates the body, resolves the optional caller, runs the
dispatcher and records one usage row per outcome in the background.
"""

import json
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from cognita_gateway.config.config import GatewaySettings
from cognita_gateway.db.ai_logs import UsageLogEntry
from cognita_gateway.dependencies import get_dispatcher, get_settings
from cognita_gateway.schemas.chat import (
    ChatCompletionResponse,
    ChatRequestValidationError,
    validate_chat_request,
)
from cognita_gateway.security.deps import get_bearer_token
from cognita_gateway.services.background_tasks import schedule_usage_log
from cognita_gateway.services.chat_dispatcher import ChatDispatcher, select_strategy
from cognita_gateway.services.identity import resolve_user_id
from cognita_gateway.services.prometheus_metrics import record_chat_request
from cognita_gateway.utils.provider_safety import ProviderError

logger = logging.getLogger(__name__)
router = APIRouter()

REQUEST_TOO_LARGE_MESSAGE = "Request body too large"


async def read_json_body(request: Request, max_bytes: int):
    """
    Read and decode the request body, enforcing the size limit.

    Raises:
        HTTPException: 413 when the body exceeds ``max_bytes``
        ChatRequestValidationError: When the body is not valid JSON
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_bytes:
        raise HTTPException(status_code=413, detail=REQUEST_TOO_LARGE_MESSAGE)

    body = await request.body()
    if len(body) > max_bytes:
        raise HTTPException(status_code=413, detail=REQUEST_TOO_LARGE_MESSAGE)

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise ChatRequestValidationError(
            {"formErrors": ["Request body must be valid JSON"], "fieldErrors": {}}
        ) from None


@router.post("/api/ai/chat", tags=["chat"], response_model=ChatCompletionResponse)
async def ai_chat(
    request: Request,
    token: str | None = Depends(get_bearer_token),
    settings: GatewaySettings = Depends(get_settings),
    dispatcher: ChatDispatcher = Depends(get_dispatcher),
):
    started = time.monotonic()
    payload = await read_json_body(request, settings.max_request_body_bytes)
    chat_request = validate_chat_request(payload)

    user_id = await resolve_user_id(token, settings)
    strategy = select_strategy(chat_request).value

    try:
        result = await dispatcher.dispatch(chat_request)
    except Exception as e:
        latency_ms = int((time.monotonic() - started) * 1000)
        message = str(e)
        if isinstance(e, ProviderError):
            logger.warning(f"Chat request failed after {latency_ms}ms: {message}")
        else:
            logger.error(f"Unexpected error dispatching chat request: {message}", exc_info=True)

        record_chat_request(chat_request.provider, strategy, "error", latency_ms / 1000)
        schedule_usage_log(
            UsageLogEntry(
                user_id=user_id,
                provider=chat_request.provider,
                model=chat_request.model,
                prompt_chars=chat_request.prompt_chars,
                completion_chars=0,
                latency_ms=latency_ms,
                status="error",
                error_text=message,
            ),
            token,
            settings,
        )
        return JSONResponse(status_code=500, content={"error": message})

    latency_ms = int((time.monotonic() - started) * 1000)
    record_chat_request(chat_request.provider, strategy, "success", latency_ms / 1000)
    logger.info(
        f"Chat request served by {result.provider} in {latency_ms}ms",
        extra={"provider": result.provider, "model": chat_request.model, "latency_ms": latency_ms},
    )

    schedule_usage_log(
        UsageLogEntry(
            user_id=user_id,
            provider=result.provider,
            model=chat_request.model,
            prompt_chars=chat_request.prompt_chars,
            completion_chars=len(result.content),
            latency_ms=latency_ms,
            status="success",
        ),
        token,
        settings,
    )

    return ChatCompletionResponse(
        content=result.content,
        model=chat_request.model,
        provider=result.provider,
        latency_ms=latency_ms,
    )
