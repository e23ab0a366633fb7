"""Flatten LangChain message content into plain text.

Message content arrives in one of a few shapes: a plain string, a list of
parts (strings, ``{"type": "text", "text": ...}`` blocks, or other blocks
such as tool-use or image references), or an arbitrary object.
"""

from __future__ import annotations

import json
from functools import singledispatch
from typing import Any

EMPTY_RESPONSE = "No response generated"


@singledispatch
def _part_text(part: Any) -> str:
    return json.dumps(part, ensure_ascii=False, default=str, separators=(",", ":"))


@_part_text.register
def _(part: str) -> str:
    return part


@_part_text.register
def _(part: dict) -> str:
    if part.get("type") == "text" and isinstance(part.get("text"), str):
        return part["text"]
    return json.dumps(part, ensure_ascii=False, default=str, separators=(",", ":"))


@singledispatch
def _content_text(content: Any) -> str:
    if content is None:
        return ""
    return str(content)


@_content_text.register
def _(content: str) -> str:
    return content


@_content_text.register
def _(content: list) -> str:
    return " ".join(_part_text(part) for part in content)


def extract_text(content: Any) -> str:
    """Return the textual form of a message's ``content``."""

    text = _content_text(content)
    return text if text else EMPTY_RESPONSE


def extract_message_text(message: Any) -> str:
    return extract_text(getattr(message, "content", None))


__all__ = ["EMPTY_RESPONSE", "extract_message_text", "extract_text"]
