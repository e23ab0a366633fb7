"""Process-wide adapter around the agent runtime.

The first request builds the agent (MCP tools, checkpointer, model, graph);
concurrent requests arriving meanwhile wait on the same initialization task.
A failed initialization leaves the service uninitialized so the next request
starts over.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from langchain_core.messages import HumanMessage

from .agent import build_model, create_graph
from .checkpoint import create_checkpointer
from .config import Settings, get_settings
from .content import EMPTY_RESPONSE, extract_message_text
from .errors import ChatError, InternalError, ServiceUnavailableError
from .mcp_tools import load_mcp_tools
from .prompts import get_system_prompt

logger = logging.getLogger(__name__)

ToolLoader = Callable[[Settings], Awaitable[tuple[Any, list[Any]]]]


@dataclass(slots=True)
class ChatResult:
    response: str
    thread_id: str
    duration_ms: float


class ChatService:
    def __init__(
        self,
        settings: Settings,
        *,
        tool_loader: ToolLoader = load_mcp_tools,
        checkpointer_factory: Callable[[Settings], tuple[Any, Any]] = create_checkpointer,
        model_factory: Callable[[Settings], Any] = build_model,
    ) -> None:
        self._settings = settings
        self._tool_loader = tool_loader
        self._checkpointer_factory = checkpointer_factory
        self._model_factory = model_factory

        self._graph: Any = None
        self._mcp_client: Any = None
        self._mongo_client: Any = None
        self._tool_names: list[str] = []
        self._init_task: asyncio.Task[None] | None = None

        logger.info(
            "[SERVICE] ChatService created (provider=%s, model=%s, mcp=%s, recursion_limit=%d)",
            settings.llm_provider,
            settings.model_name,
            settings.mcp_server_url,
            settings.recursion_limit,
        )

    @property
    def is_ready(self) -> bool:
        return self._graph is not None

    @property
    def tool_names(self) -> list[str]:
        return list(self._tool_names)

    async def initialize(self) -> None:
        """Build the agent once; concurrent callers share the pending attempt."""
        if self._graph is not None:
            return

        if self._init_task is None:
            logger.info("[SERVICE] Starting initialization")
            self._init_task = asyncio.ensure_future(self._initialize())
        else:
            logger.info("[SERVICE] Initialization already in progress, waiting")

        # A cancelled waiter must not cancel the shared attempt
        await asyncio.shield(self._init_task)

    async def _initialize(self) -> None:
        started = time.perf_counter()
        mongo_client = None
        try:
            mcp_client, tools = await self._tool_loader(self._settings)
            checkpointer, mongo_client = self._checkpointer_factory(self._settings)
            model = self._model_factory(self._settings)
            graph = create_graph(
                model,
                tools,
                checkpointer,
                get_system_prompt(self._settings.system_prompt),
            )
        except Exception as exc:
            self._init_task = None
            if mongo_client is not None:
                mongo_client.close()
            logger.exception("[SERVICE] Initialization failed")
            cause = exc.message if isinstance(exc, ChatError) else str(exc) or type(exc).__name__
            raise ServiceUnavailableError(f"ChatService initialization failed: {cause}") from exc

        self._mcp_client = mcp_client
        self._mongo_client = mongo_client
        self._tool_names = [tool.name for tool in tools]
        self._graph = graph
        logger.info(
            "[SERVICE] Initialization completed in %.0fms with %d tool(s)",
            (time.perf_counter() - started) * 1000,
            len(tools),
        )

    async def process_chat(self, prompt: str, thread_id: str) -> ChatResult:
        """Run one conversation turn and return the final answer as text."""
        await self.initialize()
        if self._graph is None:
            raise ServiceUnavailableError("Workflow not initialized")

        config = {
            "recursion_limit": self._settings.recursion_limit,
            "configurable": {"thread_id": thread_id},
        }
        logger.info("[SERVICE] Invoking agent (thread_id=%s, prompt_chars=%d)", thread_id, len(prompt))

        started = time.perf_counter()
        try:
            result = await self._graph.ainvoke(
                {"messages": [HumanMessage(content=prompt)]},
                config=config,
            )
        except ChatError:
            raise
        except Exception as exc:
            logger.exception("[SERVICE] Agent invocation failed (thread_id=%s)", thread_id)
            raise InternalError(f"Chat processing failed: {str(exc) or type(exc).__name__}") from exc
        duration_ms = (time.perf_counter() - started) * 1000

        messages = result.get("messages") or []
        response = extract_message_text(messages[-1]) if messages else EMPTY_RESPONSE
        logger.info(
            "[SERVICE] Agent finished in %.0fms (thread_id=%s, messages=%d, response_chars=%d)",
            duration_ms,
            thread_id,
            len(messages),
            len(response),
        )
        return ChatResult(response=response, thread_id=thread_id, duration_ms=duration_ms)

    async def cleanup(self) -> None:
        """Release external connections and return to the uninitialized state."""
        logger.info("[SERVICE] Cleaning up")
        if self._init_task is not None and not self._init_task.done():
            self._init_task.cancel()

        if self._mongo_client is not None:
            self._mongo_client.close()
            logger.info("[SERVICE] MongoDB connection closed")

        self._graph = None
        self._mcp_client = None
        self._mongo_client = None
        self._tool_names = []
        self._init_task = None


_service: ChatService | None = None


def get_chat_service(settings: Settings | None = None) -> ChatService:
    """Return the process-wide service, creating it on first use."""
    global _service
    if _service is None:
        _service = ChatService(settings or get_settings())
    return _service


async def shutdown_chat_service() -> None:
    global _service
    if _service is None:
        return
    await _service.cleanup()
    _service = None


__all__ = [
    "ChatResult",
    "ChatService",
    "get_chat_service",
    "shutdown_chat_service",
]
