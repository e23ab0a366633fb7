"""Tests for the client-side chat session state."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from mcp_chat.client.api import ChatAPIError
from mcp_chat.client.session import ChatSession, format_timestamp
from mcp_chat.client.types import ChatResponse


def _ok(text: str) -> ChatResponse:
    return ChatResponse(success=True, response=text)


@pytest.fixture
def api():
    fake = AsyncMock()
    fake.send_message = AsyncMock(side_effect=lambda prompt, thread_id: _ok(f"echo: {prompt}"))
    return fake


@pytest.fixture
def session(api):
    return ChatSession(api)


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_success_appends_user_and_assistant(self, session, api):
        reply = await session.send_message("hello")

        assert [m.role for m in session.messages] == ["user", "assistant"]
        assert session.messages[0].status == "sent"
        assert reply is session.messages[1]
        assert reply.content == "echo: hello"
        assert not session.is_loading
        assert session.error is None
        api.send_message.assert_awaited_once_with("hello", session.thread_id)

    @pytest.mark.asyncio
    async def test_loading_flag_set_during_call(self, session, api):
        observed = []

        async def capture(prompt, thread_id):
            observed.append(session.is_loading)
            return _ok("done")

        api.send_message.side_effect = capture

        await session.send_message("hello")

        assert observed == [True]
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_failure_marks_user_message_and_adds_system_error(self, session, api):
        api.send_message.side_effect = ChatAPIError("Chat processing failed: LLM exploded", 500)

        reply = await session.send_message("hello")

        assert reply is None
        assert [m.role for m in session.messages] == ["user", "system"]
        assert session.messages[0].status == "error"
        assert session.messages[1].content == "Error: Chat processing failed: LLM exploded"
        assert session.error == "Chat processing failed: LLM exploded"
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_unsuccessful_response_is_an_error(self, session, api):
        api.send_message.side_effect = None
        api.send_message.return_value = ChatResponse(success=False, error="nope")

        await session.send_message("hello")

        assert session.error == "nope"
        assert session.messages[0].status == "error"

    @pytest.mark.asyncio
    async def test_next_send_clears_previous_error(self, session, api):
        api.send_message.side_effect = [ChatAPIError("down"), _ok("back")]

        await session.send_message("first")
        await session.send_message("second")

        assert session.error is None


class TestRetry:
    @pytest.mark.asyncio
    async def test_resends_last_user_message_verbatim(self, session, api):
        api.send_message.side_effect = [ChatAPIError("down"), _ok("ok now")]
        await session.send_message("  exact   text ")

        await session.retry()

        assert api.send_message.await_args_list[-1].args == ("  exact   text ", session.thread_id)
        assert session.messages[-1].content == "ok now"

    @pytest.mark.asyncio
    async def test_noop_without_user_messages(self, session, api):
        assert await session.retry() is None
        api.send_message.assert_not_awaited()


class TestNewAndClear:
    @pytest.mark.asyncio
    async def test_new_chat_resets_transcript_and_thread(self, session):
        for text in ("one", "two", "three"):
            await session.send_message(text)
        previous_thread = session.thread_id

        session.start_new_chat()

        assert session.messages == []
        assert session.thread_id != previous_thread
        assert session.error is None

    @pytest.mark.asyncio
    async def test_clear_chat_keeps_thread(self, session):
        for text in ("one", "two"):
            await session.send_message(text)
        previous_thread = session.thread_id

        session.clear_chat()

        assert session.messages == []
        assert session.thread_id == previous_thread

    @pytest.mark.asyncio
    async def test_clear_keeps_server_side_continuity(self, session, api):
        await session.send_message("one")
        thread_id = session.thread_id

        session.clear_chat()
        await session.send_message("two")

        assert api.send_message.await_args_list[-1].args == ("two", thread_id)


class TestMisc:
    def test_thread_id_generated(self, api):
        assert ChatSession(api).thread_id != ChatSession(api).thread_id

    def test_explicit_thread_id(self, api):
        assert ChatSession(api, thread_id="fixed").thread_id == "fixed"

    def test_toggle_theme(self, session):
        assert session.theme == "light"
        assert session.toggle_theme() == "dark"
        assert session.toggle_theme() == "light"

    def test_update_status_replaces_message(self, session):
        message = session.add_message("user", "hi")

        session.update_message_status(message.id, "error")

        assert session.messages[0].status == "error"
        assert message.status == "sent"

    def test_format_timestamp(self):
        from datetime import datetime

        assert format_timestamp(datetime(2024, 1, 1, 14, 5)) == "02:05 PM"
