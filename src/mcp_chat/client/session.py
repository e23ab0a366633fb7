"""Client-side conversation state.

One :class:`ChatSession` tracks the visible transcript and the thread id that
ties it to server-side memory. ``start_new_chat`` swaps the thread id (the
agent forgets the conversation); ``clear_chat`` only empties the transcript
(the agent still remembers it).
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Optional, Protocol

from .types import ChatResponse, Message, MessageStatus, Role, Theme

logger = logging.getLogger(__name__)


class ChatTransport(Protocol):
    async def send_message(self, prompt: str, thread_id: str) -> ChatResponse: ...


def generate_id() -> str:
    return uuid.uuid4().hex


def format_timestamp(value: datetime) -> str:
    return value.strftime("%I:%M %p")


class ChatSession:
    def __init__(self, api: ChatTransport, *, thread_id: str | None = None, theme: Theme = "light") -> None:
        self.api = api
        self.messages: list[Message] = []
        self.is_loading = False
        self.error: Optional[str] = None
        self.thread_id = thread_id or generate_id()
        self.theme: Theme = theme

    def add_message(self, role: Role, content: str, status: MessageStatus = "sent") -> Message:
        message = Message(
            id=generate_id(),
            role=role,
            content=content,
            timestamp=datetime.now(),
            status=status,
        )
        self.messages.append(message)
        return message

    def update_message_status(self, message_id: str, status: MessageStatus) -> None:
        self.messages = [
            replace(message, status=status) if message.id == message_id else message
            for message in self.messages
        ]

    async def send_message(self, content: str) -> Optional[Message]:
        """Send one user turn; returns the assistant message, or None on failure."""
        self.error = None
        user_message = self.add_message("user", content, "sent")
        self.is_loading = True

        try:
            response = await self.api.send_message(content, self.thread_id)
            if not response.success:
                raise RuntimeError(response.error or "Failed to get response")
            return self.add_message("assistant", response.response, "sent")
        except Exception as exc:
            error_message = str(exc) or "Something went wrong"
            logger.warning("Chat error (thread_id=%s): %s", self.thread_id, error_message)
            self.update_message_status(user_message.id, "error")
            self.add_message("system", f"Error: {error_message}", "sent")
            self.error = error_message
            return None
        finally:
            self.is_loading = False

    def last_user_message(self) -> Optional[Message]:
        for message in reversed(self.messages):
            if message.role == "user":
                return message
        return None

    async def retry(self) -> Optional[Message]:
        """Resend the most recent user message verbatim."""
        last = self.last_user_message()
        if last is None:
            return None
        return await self.send_message(last.content)

    def clear_chat(self) -> None:
        self.messages = []
        self.error = None

    def start_new_chat(self) -> None:
        self.thread_id = generate_id()
        self.messages = []
        self.error = None

    def toggle_theme(self) -> Theme:
        self.theme = "dark" if self.theme == "light" else "light"
        return self.theme


__all__ = ["ChatSession", "ChatTransport", "format_timestamp", "generate_id"]
