"""One logging setup shared by the server entry point and the app factory."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PACKAGE_LOGGER = "mcp_chat"


def resolve_level(level: str | int) -> int | None:
    """Map ``"debug"``/``"INFO"``/``10`` to a logging level, or None if unknown."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else None


def configure_logging(level: str | int = "INFO") -> int:
    """Install the stdout handler once and set the package log level.

    Unknown level names fall back to INFO; configuration validation reports
    them separately.
    """
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    resolved = resolve_level(level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if resolved is None:
        package_logger.warning("Unknown LOG_LEVEL %r, using INFO", level)
        resolved = logging.INFO
    package_logger.setLevel(resolved)
    return resolved


__all__ = ["LOG_FORMAT", "configure_logging", "resolve_level"]
