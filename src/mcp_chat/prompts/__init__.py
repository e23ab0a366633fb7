"""Bundled system prompt for the Neo4j assistant.

The prompt ships as package data, one ``<section>.txt`` per concern, and is
assembled in :data:`PROMPT_SECTION_ORDER`. ``SYSTEM_PROMPT`` in the
environment replaces the whole thing.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources

logger = logging.getLogger(__name__)

PROMPT_SECTION_ORDER = ("base", "query_guidelines", "examples")


@lru_cache(maxsize=None)
def load_section(name: str) -> str | None:
    """Text of one bundled section, or None when the package has no such file."""
    resource = resources.files(__name__).joinpath(f"{name}.txt")
    if not resource.is_file():
        logger.warning("[PROMPT] Missing prompt section %r", name)
        return None
    return resource.read_text(encoding="utf-8").strip() or None


def build_system_prompt(
    *,
    section_order: tuple[str, ...] | None = None,
    separator: str = "\n\n",
) -> str:
    sections = [load_section(name) for name in section_order or PROMPT_SECTION_ORDER]
    return separator.join(text for text in sections if text)


def get_system_prompt(override: str | None = None) -> str:
    """``override`` when it has text, otherwise the bundled prompt."""
    prompt = (override or "").strip()
    source = "SYSTEM_PROMPT" if prompt else "bundled"
    if not prompt:
        prompt = build_system_prompt()
    logger.info("[PROMPT] Using %s system prompt (%d chars)", source, len(prompt))
    return prompt


__all__ = ["PROMPT_SECTION_ORDER", "build_system_prompt", "get_system_prompt", "load_section"]
