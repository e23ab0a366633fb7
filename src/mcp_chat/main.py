from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from .api import router
from .config import Settings, get_settings, validate_environment
from .errors import ChatError, ConfigurationError, create_error_response, http_error_response
from .logging_setup import configure_logging
from .service import shutdown_chat_service

settings = get_settings()

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, log its outcome and shape unhandled errors."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("[HTTP] request_id=%s unhandled error", request_id)
            response = JSONResponse(create_error_response(exc), status_code=500)

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "[HTTP] request_id=%s %s %s -> %d (%.0fms)",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response


async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "-")
    level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(level, "[HTTP] request_id=%s %s: %s", request_id, exc.code.value, exc.message)
    return JSONResponse(create_error_response(exc), status_code=exc.status_code)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (404, 405) in the same envelope as every other error."""
    request_id = getattr(request.state, "request_id", "-")
    logger.warning(
        "[HTTP] request_id=%s %s %s -> %d", request_id, request.method, request.url.path, exc.status_code
    )
    return JSONResponse(
        http_error_response(exc.status_code, exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def build_lifespan(app_settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Validate configuration on startup, release the agent on shutdown."""
        is_valid, errors = validate_environment(app_settings)
        if not is_valid:
            for error in errors:
                logger.error("[CONFIG] %s", error)
            raise ConfigurationError("Invalid environment configuration", errors=errors)

        logger.info(
            "MCP Chat API starting up (provider=%s, model=%s, checkpointer=%s)",
            app_settings.llm_provider,
            app_settings.model_name,
            app_settings.checkpointer_backend,
        )
        try:
            yield
        finally:
            logger.info("MCP Chat API shutting down")
            await shutdown_chat_service()

    return lifespan


def create_app(app_settings: Settings | None = None) -> FastAPI:
    resolved = app_settings or settings
    configure_logging(resolved.log_level)

    app = FastAPI(
        title="MCP Chat API",
        description="Chat gateway in front of an MCP-backed LangGraph agent",
        version="0.1.0",
        lifespan=build_lifespan(resolved),
        debug=resolved.debug,
    )
    app.state.settings = resolved

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=resolved.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ChatError, chat_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(router)
    return app


app = create_app()
