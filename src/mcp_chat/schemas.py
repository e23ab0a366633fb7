from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "OK"
    message: str = "Chat API is running"
    timestamp: str
    agent_ready: bool = Field(default=False, alias="agentReady")


class ChatResponse(BaseModel):
    """Successful ``POST /chat`` payload."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    prompt: str
    response: str
    thread_id: str = Field(..., alias="threadId")
    timestamp: str


class ErrorBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    code: str
    status_code: int = Field(..., alias="statusCode")
    timestamp: str
    details: dict | None = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: ErrorBody
