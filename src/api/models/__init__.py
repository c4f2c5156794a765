"""Pydantic schemas for API requests and responses."""

from .mcp import ErrorResponse, RunRequest, RunResponse, ToolsResponse

__all__ = ["ErrorResponse", "RunRequest", "RunResponse", "ToolsResponse"]
