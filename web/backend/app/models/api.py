"""Pydantic models for API request/response serialization.

AgentCards themselves are returned as plain JSON objects so that fields the
registry does not interpret reach the client unchanged.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class RegisterAgentRequest(BaseModel):
    """Body of ``POST /agents``."""

    url: Optional[str] = Field(
        None,
        description="Agent base URL or direct AgentCard .json URL",
    )


class UpdateAgentRequest(BaseModel):
    """Optional body of ``PUT /agents/{name}``."""

    url: Optional[str] = Field(
        None,
        description="New URL to fetch the AgentCard from; defaults to the stored card's url",
    )


class ErrorResponse(BaseModel):
    """Error body returned by every failing route."""

    error: str
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str = ""


class RootResponse(BaseModel):
    name: str
    version: str
    endpoints: dict[str, str] = Field(default_factory=dict)
    docs: str = "/docs"


AgentCardResponse = dict[str, Any]
