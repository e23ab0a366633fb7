"""Shared test helpers (fake chat models and tools)."""

from __future__ import annotations

import itertools
from typing import Any

from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage
from langchain_core.tools import tool


class FakeToolCallingModel(GenericFakeChatModel):
    """Scripted chat model that accepts ``bind_tools`` and ignores the tools."""

    def bind_tools(self, tools: Any, **kwargs: Any) -> "FakeToolCallingModel":
        return self


@tool
def count_customers() -> str:
    """Return the number of customers in the database."""

    return "42"


def tool_call_message(name: str = "count_customers", call_id: str = "call-1", **args: Any) -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": call_id}])


def scripted_model(*responses: AIMessage | str) -> FakeToolCallingModel:
    return FakeToolCallingModel(messages=iter(responses))


def looping_model() -> FakeToolCallingModel:
    """A model that never stops asking for tools."""

    return FakeToolCallingModel(
        messages=(tool_call_message(call_id=f"call-{i}") for i in itertools.count())
    )


def failing_model(message: str = "LLM exploded") -> FakeToolCallingModel:
    def _responses():
        raise RuntimeError(message)
        yield  # pragma: no cover

    return FakeToolCallingModel(messages=_responses())
