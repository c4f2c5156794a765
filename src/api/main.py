"""FastAPI application wiring routers, middleware, and the tool manager."""

from __future__ import annotations

from typing import Optional

import uvicorn
from fastapi import FastAPI, Response

from api.metrics import generate_prometheus_metrics
from api.middleware import (
    CORSHeadersMiddleware,
    RequestContextMiddleware,
    RequestLoggingMiddleware,
)
from api.routes import mcp
from config import Settings, get_settings
from observability.logging import configure_logging
from tooling import ToolManager


def create_app(
    settings: Optional[Settings] = None, tool_manager: Optional[ToolManager] = None
) -> FastAPI:
    settings = settings or get_settings()
    logger = configure_logging(settings.log_level)

    app = FastAPI(title=settings.project_name, version=settings.version)
    app.state.settings = settings
    app.state.tool_manager = tool_manager or ToolManager.from_settings(settings)

    app.add_middleware(
        CORSHeadersMiddleware,
        allowed_origins=settings.cors_origins,
        default_origin=settings.cors_default_origin,
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(RequestLoggingMiddleware, logger=logger)

    app.include_router(mcp.router)

    if settings.prometheus_enabled:

        @app.get("/metrics/prometheus", include_in_schema=False)
        async def prometheus_metrics():
            payload, content_type = generate_prometheus_metrics()
            return Response(content=payload, media_type=content_type)

    # Registered last so every concrete route wins over the banner.
    app.include_router(mcp.fallback_router)
    return app


app = create_app()


def run() -> None:
    """Serve the module-level app with uvicorn."""

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
