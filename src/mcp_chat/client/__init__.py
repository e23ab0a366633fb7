from __future__ import annotations

from .api import ChatAPI, ChatAPIError
from .session import ChatSession
from .types import ChatResponse, Message

__all__ = [
    "ChatAPI",
    "ChatAPIError",
    "ChatResponse",
    "ChatSession",
    "Message",
]
