from __future__ import annotations

import logging
from typing import Any

import httpx

from .types import ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"


class ChatAPIError(Exception):
    """Raised when the gateway answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        payload = {}
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if payload.get("message"):
            return str(payload["message"])
    return f"HTTP error! status: {response.status_code}"


class ChatAPI:
    """Thin async wrapper over the gateway's HTTP endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Chat API unreachable (%s %s): %s", method, path, exc)
            raise ChatAPIError(f"Unable to reach chat API: {str(exc) or type(exc).__name__}") from exc

    async def send_message(self, prompt: str, thread_id: str) -> ChatResponse:
        response = await self._request("POST", "/chat", json={"prompt": prompt, "threadId": thread_id})
        if response.is_error:
            message = _error_message(response)
            logger.warning("Chat request failed (%d): %s", response.status_code, message)
            raise ChatAPIError(message, status_code=response.status_code)
        return ChatResponse.from_payload(response.json())

    async def check_health(self) -> dict[str, Any]:
        response = await self._request("GET", "/health")
        if response.is_error:
            raise ChatAPIError(
                f"Health check failed: {response.status_code}", status_code=response.status_code
            )
        return response.json()

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ChatAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
