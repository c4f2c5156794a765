"""Exceptions raised while executing gateway tools.

Each error knows the HTTP status it maps to and whether its message is sent
back as plain text or wrapped in ``{"error": ...}``.
"""

from __future__ import annotations

from typing import Optional


class ToolExecutionError(RuntimeError):
    """Base class for failures that are reported back to the caller."""

    status_code: int = 500
    plain_text: bool = False

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class CredentialsNotConfiguredError(ToolExecutionError):
    status_code = 401
    plain_text = True


class ToolNotFoundError(ToolExecutionError):
    status_code = 404
    plain_text = True

    def __init__(self, tool: str) -> None:
        super().__init__("Tool not found")
        self.tool = tool


class MissingParameterError(ToolExecutionError):
    status_code = 400
    plain_text = True

    def __init__(self, *names: str) -> None:
        if len(names) == 1:
            message = f"Missing required parameter: {names[0]}"
        else:
            message = f"Missing required parameters: {' and '.join(names)}"
        super().__init__(message)
        self.names = names


class InvalidParameterError(ToolExecutionError):
    status_code = 400
    plain_text = True

    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid parameter: {name}")
        self.name = name


class UpstreamError(ToolExecutionError):
    """An upstream API answered with a non-success status."""

    def __init__(self, status_code: int, message: str, *, upstream: str) -> None:
        super().__init__(message, status_code=status_code)
        self.upstream = upstream


class InvalidResponseError(ToolExecutionError):
    """An upstream call succeeded but its payload lacks an expected field."""

    def __init__(self, message: str = "Invalid response format") -> None:
        super().__init__(message, status_code=500)


class AIResponseParseError(ToolExecutionError):
    def __init__(self, message: str = "Failed to parse AI response") -> None:
        super().__init__(message, status_code=500)
