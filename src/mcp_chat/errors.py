"""Error taxonomy for the chat gateway.

Every error that reaches a client is shaped into the same envelope::

    {"success": false, "error": {"message", "code", "statusCode", "timestamp"}}

Stack traces are logged server-side only.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Stable error codes returned in the ``error.code`` field."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    HTTP_ERROR = "HTTP_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class ChatError(Exception):
    """Base exception for all errors raised by the chat gateway."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}
        self.timestamp = utc_timestamp()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "message": self.message,
            "code": self.code.value,
            "statusCode": self.status_code,
            "timestamp": self.timestamp,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(ChatError):
    """Malformed or missing input. Never retried automatically."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        details = {"errors": list(errors)} if errors else None
        super().__init__(message, status.HTTP_400_BAD_REQUEST, ErrorCode.VALIDATION_ERROR, details)


class ConfigurationError(ChatError):
    """Required environment configuration is missing. Fatal at startup."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        details = {"errors": list(errors)} if errors else None
        super().__init__(
            message, status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.CONFIGURATION_ERROR, details
        )


class ServiceUnavailableError(ChatError):
    """The agent runtime is not ready to take requests."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, ErrorCode.SERVICE_UNAVAILABLE)


class PayloadTooLargeError(ChatError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 413, ErrorCode.PAYLOAD_TOO_LARGE)


class InternalError(ChatError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.INTERNAL_ERROR)


def create_error_response(error: BaseException) -> dict[str, Any]:
    """Shape any exception into the public error envelope."""

    if isinstance(error, ChatError):
        return {"success": False, "error": error.to_dict()}

    message = str(error) or "An unexpected error occurred"
    return {
        "success": False,
        "error": {
            "message": message,
            "code": ErrorCode.UNKNOWN_ERROR.value,
            "statusCode": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "timestamp": utc_timestamp(),
        },
    }


_HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
}


def http_error_response(status_code: int, detail: Any = None) -> dict[str, Any]:
    """Envelope for framework-level HTTP errors such as unknown routes."""

    message = detail if isinstance(detail, str) and detail else f"HTTP {status_code}"
    return {
        "success": False,
        "error": {
            "message": message,
            "code": _HTTP_ERROR_CODES.get(status_code, ErrorCode.HTTP_ERROR).value,
            "statusCode": status_code,
            "timestamp": utc_timestamp(),
        },
    }


__all__ = [
    "ChatError",
    "ConfigurationError",
    "ErrorCode",
    "InternalError",
    "PayloadTooLargeError",
    "ServiceUnavailableError",
    "ValidationError",
    "create_error_response",
    "http_error_response",
    "utc_timestamp",
]
