"""Custom middleware components for the gateway."""

from __future__ import annotations

import time
from typing import Dict, Iterable, Optional
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from observability.context import reset_request_context, set_request_id


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log structured request/response information for every call."""

    def __init__(self, app, logger) -> None:  # type: ignore[override]
        super().__init__(app)
        self._logger = logger

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self._logger.info(
                {
                    "event": "http.request",
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code if response else 500,
                    "duration_ms": round(duration_ms, 3),
                    "client_ip": request.client.host if request.client else None,
                }
            )


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID (from header or generated) and stores it in context vars."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        reset_request_context()
        request_id = request.headers.get("x-request-id") or str(uuid4())
        set_request_id(request_id)
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answers preflights and stamps CORS headers on every response.

    Unlike Starlette's ``CORSMiddleware`` an unknown origin is not rejected;
    the response simply names the default origin instead.
    """

    def __init__(
        self, app, *, allowed_origins: Iterable[str], default_origin: str
    ) -> None:  # type: ignore[override]
        super().__init__(app)
        self._allowed = set(allowed_origins)
        self._default_origin = default_origin

    def headers_for(self, origin: Optional[str]) -> Dict[str, str]:
        allowed = origin if origin and origin in self._allowed else self._default_origin
        return {
            "Access-Control-Allow-Origin": allowed,
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        headers = self.headers_for(request.headers.get("origin"))
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)
        response = await call_next(request)
        response.headers.update(headers)
        return response
