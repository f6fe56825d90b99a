"""
Pydantic schemas for the bridge API.

Defines request/response models for the command endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from ..domain.entities import Message


# =============================================================================
# Command Schemas
# =============================================================================


class CommandRequest(BaseModel):
    """Natural-language command to run against the MCP tools.

    ``command`` is optional at the schema level so a missing value can be
    answered with the API's own 400 error body.
    """

    command: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {"command": "Open google.com and search for the weather in Paris"}
        }
    }


class CommandResponse(BaseModel):
    """Final answer for a command."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for 400 and 500 responses."""

    error: str


# =============================================================================
# History Schemas
# =============================================================================


class HistoryResponse(BaseModel):
    """Current conversation, system prompt first."""

    messages: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_messages(cls, messages: tuple[Message, ...]) -> "HistoryResponse":
        return cls(messages=[m.to_dict() for m in messages])


class ClearHistoryResponse(BaseModel):
    status: str = "cleared"
