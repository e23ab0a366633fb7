"""Tests for the agent graph."""

from __future__ import annotations

import pytest
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage
from langgraph.checkpoint.memory import InMemorySaver
from langgraph.errors import GraphRecursionError

from mcp_chat.agent import LLM_NODE, TOOLS_NODE, build_model, create_graph
from mcp_chat.config import Settings
from tests.helpers import count_customers, looping_model, scripted_model, tool_call_message


def _config(thread_id: str = "thread-1", recursion_limit: int = 10) -> dict:
    return {"configurable": {"thread_id": thread_id}, "recursion_limit": recursion_limit}


class TestCreateGraph:
    def test_has_llm_and_tools_nodes(self):
        graph = create_graph(scripted_model("hi"), [count_customers], InMemorySaver(), "system")

        assert {LLM_NODE, TOOLS_NODE} <= set(graph.get_graph().nodes)

    @pytest.mark.asyncio
    async def test_answers_without_tools(self):
        graph = create_graph(scripted_model("Hello there"), [count_customers], InMemorySaver(), "system")

        result = await graph.ainvoke({"messages": [HumanMessage(content="hi")]}, config=_config())

        assert len(result["messages"]) == 2
        assert result["messages"][-1].content == "Hello there"

    @pytest.mark.asyncio
    async def test_routes_tool_calls_through_tool_node(self):
        model = scripted_model(tool_call_message(), AIMessage(content="There are 42 customers."))
        graph = create_graph(model, [count_customers], InMemorySaver(), "system")

        result = await graph.ainvoke(
            {"messages": [HumanMessage(content="How many customers?")]}, config=_config()
        )

        messages = result["messages"]
        assert isinstance(messages[2], ToolMessage)
        assert messages[2].content == "42"
        assert messages[-1].content == "There are 42 customers."

    @pytest.mark.asyncio
    async def test_thread_memory_is_kept_by_checkpointer(self):
        model = scripted_model("first answer", "second answer")
        graph = create_graph(model, [count_customers], InMemorySaver(), "system")

        await graph.ainvoke({"messages": [HumanMessage(content="one")]}, config=_config("t1"))
        result = await graph.ainvoke({"messages": [HumanMessage(content="two")]}, config=_config("t1"))

        assert [m.content for m in result["messages"]] == ["one", "first answer", "two", "second answer"]

    @pytest.mark.asyncio
    async def test_threads_are_isolated(self):
        model = scripted_model("a", "b")
        graph = create_graph(model, [count_customers], InMemorySaver(), "system")

        await graph.ainvoke({"messages": [HumanMessage(content="one")]}, config=_config("t1"))
        result = await graph.ainvoke({"messages": [HumanMessage(content="two")]}, config=_config("t2"))

        assert len(result["messages"]) == 2

    @pytest.mark.asyncio
    async def test_recursion_limit_bounds_tool_loop(self):
        graph = create_graph(looping_model(), [count_customers], InMemorySaver(), "system")

        with pytest.raises(GraphRecursionError):
            await graph.ainvoke(
                {"messages": [HumanMessage(content="loop")]}, config=_config(recursion_limit=4)
            )


class TestBuildModel:
    def test_openai(self):
        settings = Settings(LLM_PROVIDER="openai", OPENAI_API_KEY="sk-test", MODEL_NAME="gpt-4o-mini")

        model = build_model(settings)

        assert type(model).__name__ == "ChatOpenAI"
        assert model.model_name == "gpt-4o-mini"

    def test_google(self):
        settings = Settings(LLM_PROVIDER="google", GOOGLE_API_KEY="g-test", MODEL_NAME="gemini-2.0-flash")

        model = build_model(settings)

        assert type(model).__name__ == "ChatGoogleGenerativeAI"
