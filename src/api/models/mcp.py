"""Request/response models for the MCP endpoints."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class RunRequest(BaseModel):
    tool: str = Field(min_length=1)
    params: Dict[str, Any]


class RunResponse(BaseModel):
    result: Any


class ErrorResponse(BaseModel):
    error: str


class ToolsResponse(BaseModel):
    tools: List[Dict[str, Any]]
