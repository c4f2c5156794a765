"""MCP endpoints: tool manifest, tool execution and the catch-all banner."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from api.models.mcp import ErrorResponse, RunRequest, RunResponse, ToolsResponse
from tooling import ToolExecutionError, ToolManager

logger = logging.getLogger("mcp_gateway.api")

# OPTIONS never reaches the routers; CORSHeadersMiddleware answers it.
ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]

router = APIRouter(prefix="/mcp", tags=["mcp"])
fallback_router = APIRouter(include_in_schema=False)


def _tool_manager(request: Request) -> ToolManager:
    return request.app.state.tool_manager


def _error_response(exc: ToolExecutionError) -> Response:
    if exc.plain_text:
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return JSONResponse(
        ErrorResponse(error=exc.message).model_dump(), status_code=exc.status_code
    )


@router.api_route("/tools", methods=ANY_METHOD, summary="List available tools")
async def list_tools(request: Request) -> JSONResponse:
    tools = _tool_manager(request).list_tools()
    return JSONResponse(ToolsResponse(tools=tools).model_dump())


@router.api_route("/run", methods=ANY_METHOD, summary="Execute a tool")
async def run_tool(request: Request) -> Response:
    if request.method != "POST":
        return PlainTextResponse("Method not allowed. Use POST for /mcp/run", status_code=405)

    body = (await request.body()).decode("utf-8", errors="replace")
    if not body:
        return PlainTextResponse("Request body is empty", status_code=400)
    try:
        payload = json.loads(body)
    except ValueError:
        logger.warning({"event": "mcp.invalid_json", "body": body})
        return PlainTextResponse(f"Invalid JSON body: {body}", status_code=400)
    try:
        invocation = RunRequest.model_validate(payload)
    except ValidationError:
        return PlainTextResponse(
            "Missing required fields: tool and params", status_code=400
        )

    manager = _tool_manager(request)
    try:
        result = await run_in_threadpool(
            manager.invoke_tool, invocation.tool, invocation.params
        )
    except ToolExecutionError as exc:
        return _error_response(exc)
    except Exception:  # noqa: BLE001
        logger.exception({"event": "mcp.unhandled_error", "tool": invocation.tool})
        return JSONResponse(
            ErrorResponse(error="Internal server error").model_dump(), status_code=500
        )
    return JSONResponse(RunResponse(result=result).model_dump())


@fallback_router.api_route("/{path:path}", methods=ANY_METHOD)
async def banner(path: str) -> PlainTextResponse:
    return PlainTextResponse("Monzo MCP Server")


__all__ = ["router", "fallback_router"]
