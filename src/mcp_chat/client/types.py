from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional

Role = Literal["user", "assistant", "system"]
MessageStatus = Literal["sending", "sent", "error"]
Theme = Literal["light", "dark"]


@dataclass(frozen=True, slots=True)
class Message:
    id: str
    role: Role
    content: str
    timestamp: datetime
    status: MessageStatus = "sent"


@dataclass(slots=True)
class ChatResponse:
    success: bool
    response: str = ""
    prompt: str = ""
    thread_id: Optional[str] = None
    timestamp: Optional[str] = None
    error: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ChatResponse":
        error = payload.get("error")
        if isinstance(error, dict):
            error = error.get("message")
        return cls(
            success=bool(payload.get("success")),
            response=payload.get("response") or "",
            prompt=payload.get("prompt") or "",
            thread_id=payload.get("threadId"),
            timestamp=payload.get("timestamp"),
            error=error or payload.get("message"),
            raw=payload,
        )
