"""Discover agent tools from the configured MCP server."""

from __future__ import annotations

import logging
import time
from typing import Any

from langchain_core.tools import BaseTool
from langchain_mcp_adapters.client import MultiServerMCPClient

from .config import Settings
from .errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

MCP_REMOTE_PACKAGE = "mcp-remote@latest"


def build_connections(settings: Settings) -> dict[str, dict[str, Any]]:
    """Connection map for :class:`MultiServerMCPClient`.

    ``stdio`` bridges to the remote URL through ``npx mcp-remote``; the HTTP
    transports talk to the URL directly.
    """
    if settings.mcp_transport == "stdio":
        connection: dict[str, Any] = {
            "transport": "stdio",
            "command": "npx",
            "args": ["-y", MCP_REMOTE_PACKAGE, settings.mcp_server_url],
        }
    else:
        connection = {
            "transport": settings.mcp_transport,
            "url": settings.mcp_server_url,
        }
    return {settings.mcp_server_name: connection}


async def load_mcp_tools(settings: Settings) -> tuple[MultiServerMCPClient, list[BaseTool]]:
    """Create the MCP client and fetch its tools.

    Raises :class:`ServiceUnavailableError` when the server exposes no tools.
    """
    connections = build_connections(settings)
    logger.info(
        "[MCP] Connecting to %s via %s (%s)",
        settings.mcp_server_name,
        settings.mcp_transport,
        settings.mcp_server_url,
    )
    client = MultiServerMCPClient(connections)

    started = time.perf_counter()
    tools = list(await client.get_tools())
    logger.info(
        "[MCP] Loaded %d tool(s) in %.0fms",
        len(tools),
        (time.perf_counter() - started) * 1000,
    )

    if not tools:
        raise ServiceUnavailableError(
            f"No MCP tools found. Make sure the {settings.mcp_server_name} server is working correctly."
        )

    for index, tool in enumerate(tools, start=1):
        logger.info("[MCP]   %d. %s - %s", index, tool.name, tool.description or "No description")

    return client, tools


__all__ = ["build_connections", "load_mcp_tools"]
