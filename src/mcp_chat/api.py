from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request

from .config import Settings, get_settings
from .errors import PayloadTooLargeError, ValidationError, utc_timestamp
from .schemas import ChatResponse, ErrorEnvelope, HealthResponse
from .service import ChatService, get_chat_service
from .validation import ValidationFailure, sanitize_prompt, validate_chat_request

router = APIRouter()

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    413: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
    503: {"model": ErrorEnvelope},
}


def app_settings(request: Request) -> Settings:
    """Settings the app was created with, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


def chat_service(settings: Settings = Depends(app_settings)) -> ChatService:
    return get_chat_service(settings)


async def _read_json_body(request: Request, limit: int):
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(f"Request body exceeds the {limit} byte limit")

    body = await request.body()
    if len(body) > limit:
        raise PayloadTooLargeError(f"Request body exceeds the {limit} byte limit")
    if not body:
        return None
    try:
        return json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError("Request body must be valid JSON", errors=[str(exc)]) from exc


@router.get("/health", response_model=HealthResponse)
def healthcheck(service: ChatService = Depends(chat_service)) -> HealthResponse:
    return HealthResponse(timestamp=utc_timestamp(), agent_ready=service.is_ready)


@router.post("/chat", response_model=ChatResponse, responses=_ERROR_RESPONSES)
async def chat(
    request: Request,
    settings: Settings = Depends(app_settings),
    service: ChatService = Depends(chat_service),
) -> ChatResponse:
    request_id = getattr(request.state, "request_id", "-")
    payload = await _read_json_body(request, settings.request_body_limit_bytes)

    result = validate_chat_request(payload, max_length=settings.max_prompt_length)
    if isinstance(result, ValidationFailure):
        logger.warning("[CHAT] request_id=%s rejected: %s", request_id, "; ".join(result.errors))
        raise ValidationError("; ".join(result.errors), errors=result.errors)

    prompt = sanitize_prompt(result.prompt)
    logger.info(
        "[CHAT] request_id=%s thread_id=%s prompt_chars=%d",
        request_id,
        result.thread_id,
        len(prompt),
    )

    chat_result = await service.process_chat(prompt, result.thread_id)
    logger.info(
        "[CHAT] request_id=%s thread_id=%s answered in %.0fms",
        request_id,
        result.thread_id,
        chat_result.duration_ms,
    )
    return ChatResponse(
        prompt=prompt,
        response=chat_result.response,
        thread_id=result.thread_id,
        timestamp=utc_timestamp(),
    )
