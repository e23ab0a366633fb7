from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging_setup import resolve_level

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*(b|kb|mb|gb)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"b": 1, "kb": 1024, "mb": 1024**2, "gb": 1024**3}


def parse_byte_size(value: str | int) -> int:
    """Parse sizes such as ``"10mb"`` or ``"512kb"`` into a byte count."""

    if isinstance(value, int):
        return value
    match = _SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid size value: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _SIZE_UNITS[(unit or "b").lower()]


class Settings(BaseSettings):
    """Runtime configuration for the chat gateway and its client."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # LLM provider
    llm_provider: Literal["openai", "google"] = Field(default="openai", alias="LLM_PROVIDER")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    google_api_key: str | None = Field(default=None, alias="GOOGLE_API_KEY")
    model_name: str = Field(default="gpt-4o-mini", alias="MODEL_NAME")
    temperature: float = Field(default=0.0, alias="TEMPERATURE")
    recursion_limit: int = Field(default=10, ge=1, alias="RECURSION_LIMIT")

    # Request limits
    max_prompt_length: int = Field(default=2000, ge=1, alias="MAX_PROMPT_LENGTH")
    request_body_limit: str = Field(default="10mb", alias="REQUEST_BODY_LIMIT")

    # MCP tool server
    mcp_server_name: str = Field(default="neo4j", alias="MCP_SERVER_NAME")
    mcp_server_url: str = Field(default="http://localhost:8000/api/mcp/", alias="MCP_SERVER_URL")
    mcp_transport: Literal["streamable_http", "sse", "stdio"] = Field(
        default="streamable_http", alias="MCP_TRANSPORT"
    )

    # Conversation memory
    checkpointer_backend: Literal["mongodb", "memory"] = Field(
        default="mongodb", alias="CHECKPOINTER_BACKEND"
    )
    mongodb_uri: str | None = Field(default=None, alias="MONGODB_URI")
    mongodb_db_name: str = Field(default="mcp_chat", alias="MONGODB_DB_NAME")

    # Optional override for the bundled system prompt
    system_prompt: str | None = Field(default=None, alias="SYSTEM_PROMPT")

    # FastAPI configuration
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")
    app_host: str = Field(default="0.0.0.0", alias="APP_HOST")
    app_port: int = Field(default=3001, alias="APP_PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    debug: bool = Field(default=False, alias="DEBUG")

    # Terminal client
    chat_api_base_url: str = Field(default="http://localhost:3001", alias="CHAT_API_BASE_URL")

    @property
    def request_body_limit_bytes(self) -> int:
        return parse_byte_size(self.request_body_limit)

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def llm_api_key(self) -> str | None:
        if self.llm_provider == "google":
            return self.google_api_key
        return self.openai_api_key


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings so multiple imports share a single instance."""

    return Settings()  # type: ignore[call-arg]


def validate_environment(settings: Settings) -> tuple[bool, list[str]]:
    """Check that the configuration needed to serve chat requests is present."""

    errors: list[str] = []
    if not settings.llm_api_key:
        key_name = "GOOGLE_API_KEY" if settings.llm_provider == "google" else "OPENAI_API_KEY"
        errors.append(f"{key_name} environment variable is required")
    if settings.checkpointer_backend == "mongodb" and not settings.mongodb_uri:
        errors.append("MONGODB_URI must be set when CHECKPOINTER_BACKEND=mongodb")
    try:
        settings.request_body_limit_bytes
    except ValueError as exc:
        errors.append(f"REQUEST_BODY_LIMIT is invalid: {exc}")
    if resolve_level(settings.log_level) is None:
        errors.append(f"LOG_LEVEL is invalid: {settings.log_level!r}")
    return not errors, errors
