from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import SystemMessage
from langchain_core.runnables import RunnableConfig
from langchain_core.tools import BaseTool
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI
from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.graph import END, START, MessagesState, StateGraph
from langgraph.prebuilt import ToolNode

from .config import Settings

logger = logging.getLogger(__name__)

LLM_NODE = "llm"
TOOLS_NODE = "tools"


def build_model(settings: Settings) -> BaseChatModel:
    """Instantiate the configured chat model."""
    if settings.llm_provider == "google":
        return ChatGoogleGenerativeAI(
            model=settings.model_name,
            api_key=settings.google_api_key,
            temperature=settings.temperature,
            timeout=60,
            max_retries=2,
        )
    return ChatOpenAI(
        model=settings.model_name,
        api_key=settings.openai_api_key,
        temperature=settings.temperature,
        timeout=60,
        max_retries=2,
    )


def create_graph(
    model: BaseChatModel,
    tools: Sequence[BaseTool],
    checkpointer: BaseCheckpointSaver | None,
    system_prompt: str,
):
    """Compile the two-node agent loop: ``llm`` calls tools until it answers."""
    model_with_tools = model.bind_tools(list(tools))
    system_message = SystemMessage(content=system_prompt)

    async def call_model(state: MessagesState, config: RunnableConfig):
        history = list(state["messages"])
        logger.info("[AGENT] llm node: %d message(s) in state", len(history))

        started = time.perf_counter()
        response = await model_with_tools.ainvoke([system_message, *history], config=config)
        elapsed_ms = (time.perf_counter() - started) * 1000

        tool_calls = getattr(response, "tool_calls", None) or []
        if tool_calls:
            logger.info(
                "[AGENT] Model requested %d tool call(s) in %.0fms: %s",
                len(tool_calls),
                elapsed_ms,
                ", ".join(call["name"] for call in tool_calls),
            )
        else:
            logger.info("[AGENT] Model answered without tool calls in %.0fms", elapsed_ms)
        return {"messages": [response]}

    def should_continue(state: MessagesState) -> str:
        last_message = state["messages"][-1]
        if getattr(last_message, "tool_calls", None):
            return TOOLS_NODE
        return END

    workflow = StateGraph(MessagesState)
    workflow.add_node(LLM_NODE, call_model)
    workflow.add_node(TOOLS_NODE, ToolNode(list(tools)))
    workflow.add_edge(START, LLM_NODE)
    workflow.add_conditional_edges(LLM_NODE, should_continue, [TOOLS_NODE, END])
    workflow.add_edge(TOOLS_NODE, LLM_NODE)

    return workflow.compile(checkpointer=checkpointer)


__all__ = ["LLM_NODE", "TOOLS_NODE", "build_model", "create_graph"]
