"""Chat gateway and terminal client for an MCP-backed LangGraph agent."""

__version__ = "0.1.0"
