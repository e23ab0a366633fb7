"""Shared test fixtures and configuration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from langgraph.checkpoint.memory import InMemorySaver

from mcp_chat.config import Settings
from mcp_chat.service import ChatService
from tests.helpers import count_customers


@pytest.fixture
def test_settings() -> Settings:
    """Settings that need no external services."""
    return Settings(
        LLM_PROVIDER="openai",
        OPENAI_API_KEY="sk-test",
        CHECKPOINTER_BACKEND="memory",
        MODEL_NAME="gpt-4o-mini",
        RECURSION_LIMIT=10,
        MAX_PROMPT_LENGTH=2000,
        REQUEST_BODY_LIMIT="10mb",
        SYSTEM_PROMPT="You are a test assistant.",
    )


@pytest.fixture
def mcp_client():
    return MagicMock(name="MultiServerMCPClient")


@pytest.fixture
def tool_loader(mcp_client):
    return AsyncMock(return_value=(mcp_client, [count_customers]))


@pytest.fixture
def mongo_client():
    return MagicMock(name="MongoClient")


@pytest.fixture
def checkpointer_factory():
    return MagicMock(side_effect=lambda settings: (InMemorySaver(), None))


@pytest.fixture
def make_service(test_settings, tool_loader, checkpointer_factory):
    """Build a ChatService whose model comes from ``model_factory``."""

    def _make(model_factory, settings: Settings | None = None, **overrides) -> ChatService:
        kwargs = {
            "tool_loader": tool_loader,
            "checkpointer_factory": checkpointer_factory,
            "model_factory": model_factory,
        }
        kwargs.update(overrides)
        return ChatService(settings or test_settings, **kwargs)

    return _make
