"""Run the chat gateway: ``python -m mcp_chat`` or ``mcp-chat-server``."""

from __future__ import annotations

import argparse
import logging

import uvicorn

from .config import get_settings
from .logging_setup import configure_logging

logger = logging.getLogger("mcp_chat.server")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="mcp-chat-server", description="MCP chat gateway")
    parser.add_argument("--host", default=settings.app_host, help="bind address (APP_HOST)")
    parser.add_argument("--port", type=int, default=settings.app_port, help="bind port (APP_PORT)")
    parser.add_argument(
        "--reload", action="store_true", default=settings.debug, help="auto-reload on code changes (DEBUG)"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(get_settings().log_level)
    logger.info("Starting MCP chat gateway on %s:%d (reload=%s)", args.host, args.port, args.reload)

    uvicorn.run(
        "mcp_chat.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
