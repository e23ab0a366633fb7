from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Union

DEFAULT_THREAD_ID = "default"

_WHITESPACE = re.compile(r"\s+")
_PROMPT_FIELDS = ("prompt", "message")


@dataclass(frozen=True, slots=True)
class ValidationSuccess:
    prompt: str
    thread_id: str = DEFAULT_THREAD_ID
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    errors: list[str]
    ok: bool = field(default=False, init=False)


ValidationResult = Union[ValidationSuccess, ValidationFailure]


def _check_text_field(name: str, value: Any, max_length: int) -> str | None:
    if not isinstance(value, str):
        return f"'{name}' must be a string"
    if not value.strip():
        return f"'{name}' cannot be empty"
    if len(value) > max_length:
        return f"'{name}' cannot exceed {max_length} characters"
    return None


def validate_chat_request(data: Any, max_length: int = 2000) -> ValidationResult:
    """Validate a decoded ``POST /chat`` body.

    Exactly one of ``prompt`` or ``message`` must be given. ``threadId`` is
    optional and falls back to :data:`DEFAULT_THREAD_ID`. Never raises.
    """
    if not isinstance(data, dict):
        return ValidationFailure(errors=["Request body must be an object"])

    errors: list[str] = []
    present = [name for name in _PROMPT_FIELDS if data.get(name) not in (None, "")]

    if not present:
        # Empty strings still get the field-specific message below
        if not any(name in data and data[name] is not None for name in _PROMPT_FIELDS):
            errors.append("Either 'prompt' or 'message' field is required")
    elif len(present) > 1:
        errors.append("Provide exactly one of 'prompt' or 'message', not both")

    for name in _PROMPT_FIELDS:
        if name in data and data[name] is not None:
            problem = _check_text_field(name, data[name], max_length)
            if problem:
                errors.append(problem)

    thread_id = data.get("threadId", DEFAULT_THREAD_ID)
    if not isinstance(thread_id, str) or not thread_id.strip():
        errors.append("'threadId' must be a non-empty string")

    if errors:
        return ValidationFailure(errors=errors)

    prompt = data.get("prompt") if data.get("prompt") is not None else data.get("message")
    return ValidationSuccess(prompt=prompt, thread_id=thread_id)


def sanitize_prompt(prompt: str) -> str:
    """Collapse whitespace runs to single spaces and trim the ends."""

    return _WHITESPACE.sub(" ", prompt).strip()


__all__ = [
    "DEFAULT_THREAD_ID",
    "ValidationFailure",
    "ValidationResult",
    "ValidationSuccess",
    "sanitize_prompt",
    "validate_chat_request",
]
